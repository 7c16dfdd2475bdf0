"""Tests for single-owner keyboard routing."""

from tube_relay.client.keyboard import KeyboardHub, KeyEvent
from tube_relay.client.playback import PlaybackController


def test_acquire_disposes_previous_owner():
    hub = KeyboardHub()
    first_keys, second_keys = [], []

    first = hub.acquire("first", lambda event: first_keys.append(event.key) or True)
    hub.acquire("second", lambda event: second_keys.append(event.key) or True)

    assert first.disposed is True
    assert hub.owner == "second"

    hub.dispatch(KeyEvent("k"))

    assert first_keys == []
    assert second_keys == ["k"]


def test_stale_dispose_does_not_release_new_owner():
    hub = KeyboardHub()
    first = hub.acquire("first", lambda event: True)
    hub.acquire("second", lambda event: True)

    first.dispose()

    assert hub.owner == "second"


def test_dispatch_without_owner():
    assert KeyboardHub().dispatch(KeyEvent("k")) is False


def test_controller_hand_off(media_element_factory, scheduler):
    hub = KeyboardHub()
    old_element = media_element_factory(duration=100.0)
    new_element = media_element_factory(duration=100.0)

    old = PlaybackController(old_element, scheduler=scheduler, keyboard_hub=hub)
    old.begin_loading()
    old.ready("http://relay.test/api/stream/aaaaaaaaaaa")

    new = PlaybackController(new_element, scheduler=scheduler, keyboard_hub=hub)
    new.begin_loading()
    new.ready("http://relay.test/api/stream/bbbbbbbbbbb")

    hub.dispatch(KeyEvent("m"))

    assert hub.owner is new
    assert new_element.muted is True
    assert old_element.muted is False

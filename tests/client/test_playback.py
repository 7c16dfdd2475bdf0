"""Tests for the playback controller state machine."""

import math

import pytest

from tube_relay.client.keyboard import KeyEvent
from tube_relay.client.playback import PlaybackController, PlaybackState, format_time

STREAM_URL = "http://relay.test/api/stream/dQw4w9WgXcQ"


@pytest.fixture
def controller(element, scheduler, keyboard_hub, fullscreen_host):
    controller = PlaybackController(element, fullscreen_host=fullscreen_host, scheduler=scheduler, keyboard_hub=keyboard_hub)
    controller.begin_loading()
    controller.ready(STREAM_URL)
    return controller


@pytest.fixture
def playing(controller, element):
    element.confirm_play()
    assert controller.state is PlaybackState.PLAYING
    return controller


@pytest.mark.parametrize("seconds,expected", [
    (0, "0:00"),
    (5.9, "0:05"),
    (65, "1:05"),
    (599, "9:59"),
    (3600, "1:00:00"),
    (3725, "1:02:05"),
    (float("nan"), "0:00"),
    (-3, "0:00"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


# --- Lifecycle ---


def test_ready_binds_stream_and_requests_autoplay(controller, element, keyboard_hub):
    assert controller.state is PlaybackState.READY
    assert element.src == STREAM_URL
    assert element.play_requests == 1
    assert controller.surface.play_icon == "play"
    assert keyboard_hub.owner is controller


def test_ready_outside_loading_is_ignored(element, scheduler, keyboard_hub):
    controller = PlaybackController(element, scheduler=scheduler, keyboard_hub=keyboard_hub)

    controller.ready(STREAM_URL)

    assert controller.state is PlaybackState.IDLE
    assert element.src is None
    assert keyboard_hub.owner is None


def test_fail_is_terminal(element, scheduler, keyboard_hub):
    controller = PlaybackController(element, scheduler=scheduler, keyboard_hub=keyboard_hub)
    controller.begin_loading()

    controller.fail()
    controller.toggle_play()

    assert controller.state is PlaybackState.ERROR
    assert element.play_requests == 0


def test_dispose_detaches_everything(playing, element, keyboard_hub, scheduler):
    playing.pointer_activity()

    playing.dispose()

    assert element.listener_count() == 0
    assert keyboard_hub.owner is None
    assert scheduler.pending == []


# --- Play/pause ---


def test_play_icon_waits_for_element_confirmation(controller, element):
    controller.toggle_play()

    assert element.play_requests == 2
    assert controller.surface.play_icon == "play"

    element.confirm_play()

    assert controller.surface.play_icon == "pause"
    assert controller.state is PlaybackState.PLAYING


def test_toggle_pauses_playing_element(playing, element):
    playing.toggle_play()

    assert element.paused
    assert playing.state is PlaybackState.PAUSED
    assert playing.surface.play_icon == "play"


# --- Progress and seeking ---


def test_time_update_moves_fill(playing, element):
    element.advance(25)

    assert playing.surface.progress == pytest.approx(0.25)
    assert playing.surface.current_time_text == "0:25"


def test_time_update_with_unknown_duration_keeps_fill(element, scheduler, keyboard_hub):
    element._duration = float("nan")
    controller = PlaybackController(element, scheduler=scheduler, keyboard_hub=keyboard_hub)
    controller.begin_loading()
    controller.ready(STREAM_URL)

    element.advance(12)

    assert controller.surface.progress == 0.0
    assert controller.surface.current_time_text == "0:12"


def test_duration_change_renders_total(controller, element):
    element.set_duration(3725)

    assert controller.surface.duration_text == "1:02:05"


def test_drag_is_isolated_from_time_updates(playing, element):
    element.advance(10)

    playing.pointer_down(0.5)

    assert playing.state is PlaybackState.SEEKING
    assert element.paused
    assert element.current_time == 50
    assert playing.surface.progress == 0.5

    # Stale notifications from the element must not move the fill
    element.advance(11)
    assert playing.surface.progress == 0.5
    assert playing.surface.current_time_text == "0:50"

    playing.pointer_move(0.75)
    assert element.current_time == 75
    assert playing.surface.progress == 0.75
    assert playing.surface.current_time_text == "1:15"

    playing.pointer_up()
    assert playing.state is PlaybackState.PAUSED
    assert element.play_requests == 2

    element.confirm_play()
    assert playing.state is PlaybackState.PLAYING


def test_drag_does_not_resume_paused_playback(controller, element):
    controller.pointer_down(0.2)
    controller.pointer_up(0.4)

    assert element.current_time == 40
    assert element.play_requests == 1
    assert controller.state is PlaybackState.PAUSED


def test_drag_position_is_clamped(controller, element):
    controller.pointer_down(1.5)
    assert element.current_time == 100

    controller.pointer_move(-0.3)
    assert element.current_time == 0
    assert controller.surface.progress == 0.0


def test_pointer_move_without_drag_is_ignored(controller, element):
    controller.pointer_move(0.9)

    assert element.current_time == 0


def test_pause_event_during_drag_keeps_seeking(playing, element):
    playing.pointer_down(0.3)

    assert playing.state is PlaybackState.SEEKING
    assert playing.surface.play_icon == "play"


def test_play_key_during_drag_is_ignored(controller, element, keyboard_hub):
    controller.pointer_down(0.2)

    _press(keyboard_hub, " ")

    assert element.play_requests == 1
    controller.pointer_up()
    assert controller.state is PlaybackState.PAUSED
    assert element.paused


def test_drag_release_follows_element_that_resumed(playing, element, scheduler):
    playing.pointer_down(0.2)
    element.confirm_play()
    assert playing.state is PlaybackState.SEEKING

    playing.pointer_up()

    assert playing.state is PlaybackState.PLAYING
    assert element.play_requests == 1

    playing.pointer_activity()
    scheduler.advance(2.0)
    assert playing.surface.controls_visible is False


# --- Volume ---


def test_volume_slider(controller, element):
    controller.set_volume_percent(40)

    assert element.volume == pytest.approx(0.4)
    assert controller.surface.volume_slider == 40


def test_mute_remembers_last_volume(controller, element):
    controller.set_volume_percent(40)

    controller.toggle_mute()
    assert element.muted is True
    assert controller.surface.volume_slider == 0

    controller.toggle_mute()
    assert element.muted is False
    assert controller.surface.volume_slider == 40


def test_raising_volume_unmutes(controller, element):
    controller.toggle_mute()

    controller.set_volume_percent(70)

    assert element.muted is False


def test_unmute_after_zero_volume_restores_audible_level(controller, element):
    controller.set_volume_percent(60)
    controller.set_volume_percent(0)

    controller.toggle_mute()
    controller.toggle_mute()

    assert element.muted is False
    assert element.volume == pytest.approx(0.6)
    assert controller.surface.volume_slider == 60


# --- Keyboard ---


def _press(keyboard_hub, key, text_input=False):
    return keyboard_hub.dispatch(KeyEvent(key, target_is_text_input=text_input))


def test_arrow_keys_seek_by_step(controller, element, keyboard_hub):
    element.current_time = 20

    assert _press(keyboard_hub, "ArrowRight")
    assert element.current_time == 25

    _press(keyboard_hub, "ArrowLeft")
    _press(keyboard_hub, "ArrowLeft")
    assert element.current_time == 15


def test_jump_keys_clamp_to_duration(controller, element, keyboard_hub):
    element.current_time = 95
    _press(keyboard_hub, "l")
    assert element.current_time == 100

    element.current_time = 3
    _press(keyboard_hub, "j")
    assert element.current_time == 0


def test_volume_keys_clamp(controller, element, keyboard_hub):
    _press(keyboard_hub, "ArrowUp")
    assert element.volume == 1.0

    _press(keyboard_hub, "ArrowDown")
    assert element.volume == pytest.approx(0.9)

    element.volume = 0.05
    _press(keyboard_hub, "ArrowDown")
    assert element.volume == 0.0


def test_play_and_mute_and_fullscreen_keys(controller, element, keyboard_hub, fullscreen_host):
    _press(keyboard_hub, " ")
    _press(keyboard_hub, "K")
    assert element.play_requests == 3

    _press(keyboard_hub, "m")
    assert element.muted is True

    _press(keyboard_hub, "f")
    assert fullscreen_host.is_fullscreen is True
    _press(keyboard_hub, "f")
    assert fullscreen_host.is_fullscreen is False


def test_keys_in_text_input_are_ignored(controller, element, keyboard_hub):
    element.current_time = 20

    assert _press(keyboard_hub, "ArrowRight", text_input=True) is False
    assert element.current_time == 20


def test_unknown_key_is_not_consumed(controller, keyboard_hub):
    assert _press(keyboard_hub, "q") is False


# --- Controls visibility ---


def test_controls_hide_after_idle_pointer_while_playing(playing, scheduler):
    playing.pointer_activity()
    scheduler.advance(1.0)

    # A fresh movement replaces the pending timer
    playing.pointer_activity()
    assert len(scheduler.pending) == 1

    scheduler.advance(1.5)
    assert playing.surface.controls_visible is True

    scheduler.advance(0.5)
    assert playing.surface.controls_visible is False


def test_controls_stay_visible_when_not_playing(controller, scheduler):
    controller.pointer_activity()
    scheduler.advance(2.0)

    assert controller.surface.controls_visible is True


def test_pause_shows_controls_and_cancels_timer(playing, element, scheduler):
    playing.pointer_activity()
    scheduler.advance(2.0)
    assert playing.surface.controls_visible is False

    playing.pointer_activity()
    element.pause()

    assert playing.surface.controls_visible is True
    assert scheduler.pending == []


# --- Errors and recovery ---


def test_element_error_moves_to_error(playing, element):
    element.fail("connection reset")

    assert playing.state is PlaybackState.ERROR
    assert playing.surface.controls_visible is True


def test_reload_restores_position(playing, element):
    element.advance(42)
    element.fail()

    playing.reload()

    assert element.load_requests == 1
    assert element.current_time == 42
    assert playing.state is PlaybackState.READY
    assert element.play_requests == 2
    assert not math.isnan(element.duration)

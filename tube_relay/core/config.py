"""
Configuration management for Tube Relay.

This module handles all configuration settings including source resolution,
stream proxy tuning, server parameters and client-side playback defaults.
"""

import os
import json
import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path

DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"


@dataclass
class ResolverConfig:
    """Source resolver (yt-dlp) configuration"""

    socket_timeout_seconds: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    player_clients: List[str] = field(default_factory=lambda: ["web", "android"])


@dataclass
class StreamConfig:
    """Stream proxy configuration"""

    chunk_size_bytes: int = 64 * 1024
    upstream_connect_timeout_seconds: float = 10.0
    upstream_read_timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    # Resolution cache: range requests per seek would otherwise re-run extraction
    enable_cache: bool = True
    cache_ttl_minutes: int = 30
    cache_max_entries: int = 64


@dataclass
class SystemConfig:
    """System-wide configuration"""

    log_level: str = "INFO"
    log_file: Optional[str] = "tube_relay.log"
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    enable_api: bool = True
    enable_cors: bool = True


@dataclass
class ClientConfig:
    """Playback client configuration"""

    api_base_url: str = "http://localhost:3000"
    request_timeout_seconds: float = 30.0
    storage_file: str = "tube_relay_storage.json"
    storage_key: str = "tube-relay-playlist"
    controls_hide_delay_seconds: float = 2.0
    seek_step_seconds: float = 5.0
    seek_jump_seconds: float = 10.0
    volume_step: float = 0.1


class Config:
    """Main configuration manager"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or "config.json"
        self.logger = logging.getLogger(__name__)

        # Default configurations
        self.resolver = ResolverConfig()
        self.stream = StreamConfig()
        self.system = SystemConfig()
        self.client = ClientConfig()

        # Load configuration
        self.load_config()

        # Environment overrides
        self._apply_environment()

    def load_config(self) -> None:
        """Load configuration from file"""
        config_path = Path(self.config_file)

        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    config_data = json.load(f)

                if "resolver" in config_data:
                    self.resolver = self._build_section(ResolverConfig, config_data["resolver"], "resolver")

                if "stream" in config_data:
                    self.stream = self._build_section(StreamConfig, config_data["stream"], "stream")

                if "system" in config_data:
                    self.system = self._build_section(SystemConfig, config_data["system"], "system")

                if "client" in config_data:
                    self.client = self._build_section(ClientConfig, config_data["client"], "client")

                self.logger.info(f"Configuration loaded from {config_path}")

            except Exception as e:
                self.logger.error(f"Error loading config from {config_path}: {e}")
                self.resolver = ResolverConfig()
                self.stream = StreamConfig()
                self.system = SystemConfig()
                self.client = ClientConfig()
        else:
            self.logger.info(f"Config file {config_path} not found, using defaults")
            self.save_config()  # Save default config

    def _build_section(self, section_cls, data: Dict[str, Any], name: str):
        """Build a config section, ignoring keys the section does not know"""
        known = {f.name for f in fields(section_cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            self.logger.warning(f"Ignoring unknown {name} config keys: {unknown}")
        return section_cls(**{key: value for key, value in data.items() if key in known})

    def _apply_environment(self) -> None:
        """Apply environment variable overrides"""
        port = os.environ.get("PORT")
        if port:
            try:
                self.system.api_port = int(port)
            except ValueError:
                self.logger.warning(f"Ignoring non-numeric PORT value: {port}")

    def save_config(self) -> None:
        """Save current configuration to file"""
        try:
            with open(self.config_file, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
            self.logger.info(f"Configuration saved to {self.config_file}")
        except Exception as e:
            self.logger.error(f"Error saving config to {self.config_file}: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {"resolver": asdict(self.resolver), "stream": asdict(self.stream), "system": asdict(self.system), "client": asdict(self.client)}

"""
Process coordinator for Tube Relay.

Loads configuration, configures logging, builds the video module and the
API server, and keeps the process alive until a signal or a server exit.
"""

import argparse
import logging
import signal
import sys
import threading
from datetime import datetime
from typing import List, Optional

from .core.config import Config
from .core.logging_config import setup_logging, get_error_tracker
from .video.integration import VideoModule
from .api.server import APIServer

# How often the wait loop checks that uvicorn is still alive
SUPERVISE_INTERVAL = 1.0


class TubeRelaySystem:
    """Owns the relay's components for the lifetime of the process"""

    def __init__(self, config_file: Optional[str] = None, log_level: Optional[str] = None,
                 port: Optional[int] = None):
        self.config = Config(config_file)
        if log_level:
            self.config.system.log_level = log_level
        if port:
            self.config.system.api_port = port

        self.logger_setup = setup_logging(log_level=self.config.system.log_level, log_file=self.config.system.log_file)
        self.logger = logging.getLogger(__name__)
        self.error_tracker = get_error_tracker("relay")

        self.video_module = VideoModule(self.config)
        self.api_server = APIServer(self.config, self.video_module)

        self.start_time: Optional[datetime] = None
        self._shutdown = threading.Event()
        self._shutdown.set()

        self._install_signal_handlers()

    def _install_signal_handlers(self) -> None:
        def on_signal(signum, frame):
            self.logger.info(f"Received {signal.Signals(signum).name}, shutting down")
            self._shutdown.set()

        signal.signal(signal.SIGINT, on_signal)
        signal.signal(signal.SIGTERM, on_signal)

    @property
    def running(self) -> bool:
        return not self._shutdown.is_set()

    def start(self) -> bool:
        if self.running:
            self.logger.warning("Tube Relay is already running")
            return True

        try:
            started = self.api_server.start()
        except Exception as e:
            self.error_tracker.log_error(e, "startup")
            return False

        if not started:
            self.error_tracker.log_warning("API server did not start", "startup")
            return False

        self.start_time = datetime.now()
        self._shutdown.clear()
        self.logger.info(f"Tube Relay listening on http://{self.config.system.api_host}:{self.config.system.api_port}")
        return True

    def stop(self) -> None:
        """Stop the API server; safe to call more than once"""
        was_running = self.running
        self._shutdown.set()
        if not was_running and not self.api_server.is_running():
            return

        self.api_server.stop()
        if self.start_time:
            uptime = (datetime.now() - self.start_time).total_seconds()
            self.logger.info(f"Tube Relay stopped after {uptime:.1f}s")

    def run(self) -> bool:
        """Start and block until shutdown. Returns False if startup failed or the server died."""
        if not self.start():
            self.logger.error("Failed to start Tube Relay")
            return False

        clean_exit = True
        try:
            while not self._shutdown.wait(SUPERVISE_INTERVAL):
                if not self.api_server.is_running():
                    self.error_tracker.log_warning("API server exited unexpectedly", "supervise")
                    clean_exit = False
                    break
        finally:
            self.stop()
        return clean_exit

    def get_system_status(self) -> dict:
        uptime = (datetime.now() - self.start_time).total_seconds() if self.running and self.start_time else 0
        return {
            "running": self.running,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "uptime_seconds": uptime,
            "api_server": self.api_server.get_server_info(),
            "video_module": self.video_module.get_module_status(),
            "errors": self.error_tracker.get_error_stats(),
        }

    def is_running(self) -> bool:
        return self.running


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tube Relay video playback relay")
    parser.add_argument("--config", type=str, default="config.json", help="Path to configuration file")
    parser.add_argument("--log-level", type=str, choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=None,
                        help="Override the configured log level")
    parser.add_argument("--port", type=int, default=None, help="Override the listening port")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    system = TubeRelaySystem(args.config, log_level=args.log_level, port=args.port)
    return 0 if system.run() else 1


if __name__ == "__main__":
    sys.exit(main())

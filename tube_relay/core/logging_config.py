"""
Logging configuration for Tube Relay.

Console output is colored, the optional log file rotates, and chatty
third-party loggers are held at WARNING unless the relay runs at DEBUG.
ErrorTracker instances count failures per component and feed /health.
"""

import logging
import logging.handlers
import os
import sys
from collections import Counter
from datetime import datetime
from typing import Dict, Optional, Tuple

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# logger name -> (level when debugging, level otherwise)
COMPONENT_LEVELS: Dict[str, Tuple[int, int]] = {
    'tube_relay.video': (logging.DEBUG, logging.INFO),    # one line per range request at DEBUG
    'tube_relay.api': (logging.DEBUG, logging.INFO),
    'tube_relay.client': (logging.DEBUG, logging.INFO),
    'uvicorn': (logging.INFO, logging.WARNING),           # access log fires on every seek
    'httpx': (logging.INFO, logging.WARNING),
    'fastapi': (logging.WARNING, logging.WARNING),
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        # Work on a copy; the same record still reaches the file handler
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def build_file_handler(log_file: str, rotate: bool = True) -> logging.Handler:
    """Create the handler for ``log_file``, making its directory if needed"""
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    if rotate:
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS
        )
    else:
        handler = logging.FileHandler(log_file)

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


class TubeRelayLogger:
    """Configures the root logger for the relay process"""

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 enable_console: bool = True, enable_rotation: bool = True):
        self.log_level = log_level.upper()
        self.log_file = log_file
        self.enable_console = enable_console
        self.enable_rotation = enable_rotation

        self._configure_root()
        self._apply_component_levels()

        logging.getLogger(__name__).info(f"Logging initialized - Level: {self.log_level}, File: {self.log_file}")

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level)

    def _configure_root(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        root_logger.handlers.clear()

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.level)
            console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
            root_logger.addHandler(console_handler)

        if self.log_file:
            try:
                root_logger.addHandler(build_file_handler(self.log_file, self.enable_rotation))
            except OSError as e:
                # Logging is not up yet, so stderr is the only channel
                print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    def _apply_component_levels(self) -> None:
        debugging = self.log_level == 'DEBUG'
        for name, (debug_level, normal_level) in COMPONENT_LEVELS.items():
            logging.getLogger(name).setLevel(debug_level if debugging else normal_level)

    @staticmethod
    def setup_exception_logging():
        """Route uncaught exceptions through logging"""

        def handle_exception(exc_type, exc_value, exc_traceback):
            if issubclass(exc_type, KeyboardInterrupt):
                sys.__excepthook__(exc_type, exc_value, exc_traceback)
                return
            logging.getLogger("uncaught_exception").critical(
                "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
            )

        sys.excepthook = handle_exception


class ErrorTracker:
    """Counts a component's errors and logs them with context"""

    def __init__(self, component_name: str):
        self.component_name = component_name
        self.logger = logging.getLogger(f"errors.{component_name}")
        self.error_count = 0
        self.last_error_time: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.contexts: Counter = Counter()

    def _describe(self, kind: str, message: str, context: str) -> str:
        where = f" ({context})" if context else ""
        return f"{kind} in {self.component_name}{where}: {message}"

    def log_error(self, error: Exception, context: str = "",
                  additional_data: Optional[dict] = None, exc_info: bool = True) -> None:
        self.error_count += 1
        self.last_error_time = datetime.now()
        self.last_error = f"{type(error).__name__}: {error}"
        self.contexts[context or "unspecified"] += 1

        message = self._describe("Error", str(error), context)
        if additional_data:
            message += f" | Data: {additional_data}"
        self.logger.error(message, exc_info=exc_info)

    def log_warning(self, message: str, context: str = "") -> None:
        self.logger.warning(self._describe("Warning", message, context))

    def get_error_stats(self) -> dict:
        return {
            "component": self.component_name,
            "error_count": self.error_count,
            "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None,
            "last_error": self.last_error,
            "by_context": dict(self.contexts),
        }


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> TubeRelayLogger:
    """Configure logging for the whole process"""
    logger_setup = TubeRelayLogger(log_level=log_level, log_file=log_file)
    TubeRelayLogger.setup_exception_logging()
    return logger_setup


def get_error_tracker(component_name: str) -> ErrorTracker:
    return ErrorTracker(component_name)

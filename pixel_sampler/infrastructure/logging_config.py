# pixel_sampler/infrastructure/logging_config.py

import logging
import os
import sys
from typing import List, Optional

# Settings arrive through __init__; this module does not read pixel_sampler.config.

class LoggingConfigurator:
    """
    Installs root logging handlers for a host process.

    The library never installs handlers itself. A host (the CLI in app.py, or
    an embedding application) builds one of these and calls configure(),
    which replaces whatever handlers the root logger already had.
    """

    def __init__(self,
                 log_level: int,
                 log_format: str,
                 date_format: str,
                 log_file: Optional[str] = None,
                 log_to_console: bool = True,
                 noisy_loggers_to_silence: Optional[List[str]] = None):
        """
        Args:
            log_level: Root level, e.g. logging.INFO.
            log_format: Format string for every handler.
            date_format: Timestamp format.
            log_file: Path of a UTF-8 log file; None disables file logging.
                Missing parent directories are created.
            log_to_console: Whether to also log to stderr.
            noisy_loggers_to_silence: Logger names capped at WARNING.
        """
        self.log_level = log_level
        self.log_format = log_format
        self.date_format = date_format
        self.log_file = os.path.abspath(log_file) if log_file else None
        self.log_to_console = log_to_console
        self.noisy_loggers = noisy_loggers_to_silence or []

        self._setup_logger = logging.getLogger(self.__class__.__name__ + ".Setup")

    def _create_handlers(self) -> List[logging.Handler]:
        handlers = []

        if self.log_file:
            try:
                os.makedirs(os.path.dirname(self.log_file), exist_ok=True)
                handlers.append(logging.FileHandler(self.log_file, encoding="utf-8"))
            except OSError as e:
                # Console logging may still work
                print(f"[ERROR] LoggingConfigurator: Cannot open log file '{self.log_file}': {e}", file=sys.stderr)

        if self.log_to_console:
            handlers.append(logging.StreamHandler())

        return handlers

    def silence_noisy_loggers(self):
        for logger_name in self.noisy_loggers:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    def configure(self) -> List[logging.Handler]:
        """Applies the settings and returns the handlers now on the root logger."""
        handlers = self._create_handlers()
        if not handlers:
            print("[WARNING] LoggingConfigurator: No handlers created, logging inactive.", file=sys.stderr)
            return []

        logging.basicConfig(
            level=self.log_level,
            format=self.log_format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )
        self.silence_noisy_loggers()
        self._setup_logger.debug(f"Logging configured: level={logging.getLevelName(self.log_level)}, "
                                 f"handlers={len(handlers)}, file={self.log_file}")
        return handlers

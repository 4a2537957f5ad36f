"""RelayLogger — singleton JSON logger with console and rotating file output.

Every record is one JSON object on stderr and in ``logs/relay.log``.  Other
modules either call :meth:`RelayLogger.get_logger` or create a child logger
under the ``feedback_relay`` namespace, which propagates to the same handlers.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = "feedback_relay"


class _JsonFormatter(logging.Formatter):
    """Format every log record as a single-line JSON object.

    Standard fields (timestamp, level, logger, message, module, func_name)
    are always present.  Key-value pairs passed through ``extra`` are merged
    in, so call sites attach context such as ``chat_id``, ``update_id`` or
    ``offset``::

        logger.info("Offset primed", extra={"offset": 42})

    Produces::

        {"timestamp": "…", "level": "INFO", …, "offset": 42}
    """

    # Keys that belong to the standard LogRecord; everything else is extra.
    _BUILTIN_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
    )))

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }

        for key, value in record.__dict__.items():
            if key not in self._BUILTIN_ATTRS and key not in log_entry:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class RelayLogger:
    """Singleton logger with dual handlers (console + rotating file).

    Usage::

        from core.logger import RelayLogger

        logger = RelayLogger.get_logger()
        logger.info("Session started")

    The level defaults to ``INFO`` and can be overridden with the
    ``RELAY_LOG_LEVEL`` environment variable (``DEBUG``, ``WARNING``, …).
    Setting ``RELAY_LOG_DIR`` to an empty string disables the file handler.
    """

    _instance: Optional["RelayLogger"] = None
    _logger: Optional[logging.Logger] = None

    _DEFAULT_LOG_DIR: str = "logs"
    _LOG_FILE: str = "relay.log"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: int | None = None) -> "RelayLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(level if level is not None else cls._level_from_env())
        return cls._instance

    @staticmethod
    def _level_from_env() -> int:
        name = os.environ.get("RELAY_LOG_LEVEL", "INFO").strip().upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.INFO

    def _init_logger(self, level: int) -> None:
        """Create the underlying :class:`logging.Logger` and attach handlers."""
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(level)

        # Avoid duplicate handlers if the module is reloaded.
        if self._logger.handlers:
            return

        formatter = _JsonFormatter()

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        log_dir = os.environ.get("RELAY_LOG_DIR", self._DEFAULT_LOG_DIR)
        if not log_dir:
            return
        os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            os.path.join(log_dir, self._LOG_FILE),
            maxBytes=self._MAX_BYTES,
            backupCount=self._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        self._logger.addHandler(file_handler)

    @staticmethod
    def get_logger(level: int | None = None) -> logging.Logger:
        """Return the shared :class:`logging.Logger` instance.

        Creates the singleton on first call; later calls return the same
        logger regardless of the *level* argument.
        """
        instance = RelayLogger(level)
        assert instance._logger is not None  # guaranteed by __new__
        return instance._logger

    def cleanup(self) -> None:
        """Flush and close all handlers attached to the logger."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

"""Structured logging manager for AgentOffice.

Sets up the ``agentoffice`` logger with a human readable console handler and
a rotating JSON Lines file, so every module can keep using
``logging.getLogger(__name__)``.
"""

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path

_RESERVED_RECORD_KEYS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "asctime",
        "taskName",
    ]
)


class JsonLineFormatter(logging.Formatter):
    """Formats each record as one JSON object, including ``extra`` fields."""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS:
                continue
            try:
                json.dumps(value)  # Ensure serializable
                log_obj[key] = value
            except (TypeError, ValueError):
                log_obj[key] = str(value)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj)


class LoggingManager:
    """Configures logging for the AgentOffice process."""

    LOGGER_NAME = "agentoffice"

    def __init__(self, log_dir: str | Path = "/tmp/agentoffice_logs", log_level: str = "INFO"):
        """Initialize logging manager.

        Args:
            log_dir: Directory for the JSON log file
            log_level: Console log level name

        Raises:
            ValueError: If ``log_level`` is not a logging level name
        """
        self.log_dir = Path(log_dir)
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        self.log_level = level

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / "agentoffice.log"

        self._setup_logger()

        # Modules imported before setup may already hold child loggers with
        # their own handlers; route them through the parent instead.
        for name in list(logging.Logger.manager.loggerDict.keys()):
            if name.startswith(f"{self.LOGGER_NAME}."):
                child_logger = logging.getLogger(name)
                if isinstance(child_logger, logging.Logger):  # Skip PlaceHolders
                    child_logger.setLevel(logging.NOTSET)
                    child_logger.propagate = True
                    child_logger.handlers.clear()

    def _setup_logger(self):
        """Setup main logger with file and console handlers."""
        logger = logging.getLogger(self.LOGGER_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False  # Don't propagate to root - we have our own handlers

        logger.handlers.clear()

        # Console handler - human readable
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

        # File handler - structured JSON
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)  # Capture everything to file
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

        self.logger = logger

    def get_recent_logs(self, tail: int = 100) -> list[dict]:
        """Return the most recent entries of the JSON log file.

        Args:
            tail: Number of recent entries to return

        Returns:
            Parsed log entries, oldest first. Unparseable lines are skipped.
        """
        if not self.log_file.exists():
            return []

        entries = []
        with self.log_file.open("r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()

        for line in lines[-tail:] if tail else lines:
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return entries

"""
Append-only request/event log.

Every event becomes one JSON line in ``<log_dir>/server-YYYY-MM-DD.log``
(local calendar date at write time) and one human-readable line on the
console. Nothing is filtered by level and nothing ever reads the files back.
"""

import json
import logging
import traceback
from datetime import date, datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any

from .config import get_settings

LEVEL_NAMES = {
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
}


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T17:22:33.123Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _entry_for(record: logging.LogRecord) -> dict:
    entry = getattr(record, "entry", None)
    if entry is None:
        # Record logged straight through the logger rather than via LogSink
        entry = {
            "timestamp": utc_timestamp(),
            "level": LEVEL_NAMES.get(record.levelno, record.levelname),
            "message": record.getMessage(),
        }
    return entry


class DailyJSONLinesHandler(logging.Handler):
    """Writes each log entry as a single JSON line to the file for the current day."""

    def __init__(self, log_dir: str | Path):
        super().__init__()
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, day: date) -> Path:
        return self.log_dir / f"server-{day.isoformat()}.log"

    def emit(self, record: logging.LogRecord) -> None:
        # Handler.handle() holds self.lock here, so one call is one whole line
        try:
            line = json.dumps(_entry_for(record), default=str, ensure_ascii=False) + "\n"
            with open(self.path_for(date.today()), "a", encoding="utf-8") as f:
                f.write(line)
        except Exception:
            self.handleError(record)


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = _entry_for(record)
        line = f"{entry['timestamp']} [{entry['level']}] {entry['message']}"
        if entry.get("statusCode") is not None:
            line += f" ({entry['statusCode']})"
        details = entry.get("details")
        if details:
            summary = {k: v for k, v in details.items() if k != "stack"}
            if summary:
                line += f" {json.dumps(summary, default=str, ensure_ascii=False)}"
        return line


class LogSink:
    """
    Structured logger for the proxy.

    Built once at startup; ``info``/``warn``/``error`` each produce exactly
    one entry and return it.
    """

    def __init__(self, log_dir: str | Path, name: str = "chatproxy", stream=None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        self.file_handler = DailyJSONLinesHandler(log_dir)
        console_handler = logging.StreamHandler(stream)
        console_handler.setFormatter(ConsoleFormatter())

        self.logger.addHandler(self.file_handler)
        self.logger.addHandler(console_handler)

    @property
    def current_path(self) -> Path:
        """Path of the file today's entries go to."""
        return self.file_handler.path_for(date.today())

    def _write(
        self,
        level: int,
        message: str,
        details: dict | None = None,
        endpoint: str | None = None,
        method: str | None = None,
        status_code: int | None = None,
    ) -> dict:
        entry: dict[str, Any] = {
            "timestamp": utc_timestamp(),
            "level": LEVEL_NAMES[level],
            "message": message,
        }
        if details is not None:
            entry["details"] = details
        if endpoint is not None:
            entry["endpoint"] = endpoint
        if method is not None:
            entry["method"] = method
        if status_code is not None:
            entry["statusCode"] = status_code

        self.logger.log(level, message, extra={"entry": entry})
        return entry

    def info(self, message: str, details: dict | None = None) -> dict:
        return self._write(logging.INFO, message, details)

    def warn(self, message: str, details: dict | None = None) -> dict:
        return self._write(logging.WARNING, message, details)

    def error(
        self,
        message: str,
        error: BaseException | None = None,
        request_context: dict | None = None,
        status_code: int | None = None,
    ) -> dict:
        """
        Log an error.

        The exception's message, stack trace and class name go into
        ``details``. ``request_context`` may carry ``endpoint`` and
        ``method``; anything else in it is merged into ``details``.
        """
        context = dict(request_context or {})
        endpoint = context.pop("endpoint", None)
        method = context.pop("method", None)

        details: dict[str, Any] = {}
        if error is not None:
            details["error"] = str(error)
            details["name"] = type(error).__name__
            details["stack"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        details.update(context)

        return self._write(
            logging.ERROR,
            message,
            details or None,
            endpoint=endpoint,
            method=method,
            status_code=status_code,
        )


@lru_cache
def get_log_sink() -> LogSink:
    return LogSink(get_settings().log_dir)

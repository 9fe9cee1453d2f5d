"""Logging and trace output for scripts.

- ``get_logger`` sets up stderr logging once and returns a named logger.
- ``configure_logging`` applies the ``observability`` settings section
  (``log_level``, ``log_format``) once settings are loaded.
- ``JSONFormatter`` renders records as single-line JSON for
  ``log_format: json``.
- ``write_trace`` appends a serialised trace to a JSON Lines file; the
  trace collector writes through it.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that are noisy at INFO
_QUIET_LOGGERS = ("httpx", "chromadb")

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def _parse_level(log_level: Optional[str]) -> int:
    if not log_level:
        return logging.INFO
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str = "embedvec", log_level: Optional[str] = None) -> logging.Logger:
    """Return a named logger, configuring stderr output on first use.

    Args:
        name: Logger name.
        log_level: Optional level name (e.g. ``"DEBUG"``).
    """
    logging.basicConfig(level=_parse_level(log_level), format=_TEXT_FORMAT, stream=sys.stderr)
    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return logging.getLogger(name)


def configure_logging(observability: Mapping[str, Any]) -> None:
    """Apply ``log_level`` and ``log_format`` (``text`` or ``json``) to the root logger."""
    root = logging.getLogger()
    root.setLevel(_parse_level(observability.get("log_level")))

    log_format = str(observability.get("log_format") or "text").lower()
    if log_format not in ("text", "json"):
        raise ValueError(f"observability.log_format must be 'text' or 'json', got '{log_format}'")
    formatter = JSONFormatter() if log_format == "json" else logging.Formatter(_TEXT_FORMAT)
    for handler in root.handlers:
        handler.setFormatter(formatter)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp``, ``level``, ``logger``, ``message``, any ``extra=``
    attributes (stringified when not JSON-serialisable) and ``exception``
    when the record carries exception info.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and k not in payload}
        payload.update(extras)
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def write_trace(trace_dict: Dict[str, Any], traces_path: str | Path) -> None:
    """Append *trace_dict* as one JSON line, creating parent directories.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(traces_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(trace_dict, ensure_ascii=False, default=str) + "\n")

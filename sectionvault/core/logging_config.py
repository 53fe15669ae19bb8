"""Log output for SectionVault.

``setup_logging`` installs one stdout handler on the root logger. In ``json``
mode each record is a single JSON object carrying the ``extra`` fields given
at the call site and the id of the request being served; ``text`` mode is
for reading logs in a terminal. Either way, credentials are masked before a
record is written.
"""

import contextvars
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Optional

# Set by RequestContextMiddleware for the duration of a request.
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(request_id)s] %(message)s"
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool")

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}

_MASK = "***"
_CREDENTIAL_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[\w.\-]{20,}"),
    re.compile(r"(?i)((?:secret|password|token|authorization)\s*[=:]\s*)[^\s,'\"]{8,}"),
    re.compile(r"(\w+://[^:/@\s]+:)[^@\s]+(?=@)"),
)


def mask_credentials(text: str) -> str:
    """Replace bearer tokens, key=value secrets and URL passwords with ``***``."""
    for pattern in _CREDENTIAL_PATTERNS:
        text = pattern.sub(lambda m: m.group(1) + _MASK, text)
    return text


class RequestIdFilter(logging.Filter):
    """Copy the current request id onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class CredentialFilter(logging.Filter):
    """Mask credentials in the rendered message and in exception text."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = mask_credentials(record.getMessage())
        record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = mask_credentials(record.exc_text)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` keys are emitted at top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None) or request_id_var.get()
        if request_id and request_id != "-":
            entry["request_id"] = request_id

        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in entry
        )

        if record.exc_text:
            entry["exc_info"] = record.exc_text
        elif record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Route all logging to stdout in the requested format.

    Safe to call more than once: previous root handlers are replaced.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(CredentialFilter())
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured", extra={"level": level, "format": fmt})

import json
import logging
import sys
from datetime import datetime, timezone

from .config import config

# attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: event name plus whatever was passed as extra."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "at": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "env": config.ENV,
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        entry.update(
            (k, v) for k, v in record.__dict__.items() if k not in _RESERVED
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def get_logger(name: str) -> logging.Logger:
    log = logging.getLogger(name)
    if log.handlers:
        return log
    out = logging.StreamHandler(sys.stdout)
    out.setFormatter(JsonLogFormatter())
    log.addHandler(out)
    log.setLevel(config.LOG_LEVEL.upper())
    log.propagate = False
    return log

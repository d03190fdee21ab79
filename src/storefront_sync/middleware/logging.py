"""JSON log output tagged with the current request id.

:func:`setup_logging` is called once by :func:`storefront_sync.app.create_app`.
"""

from __future__ import annotations

import datetime
import json
import logging
import sys
from typing import Any

from storefront_sync.middleware.correlation import get_request_id


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Keys: ``timestamp``, ``level``, ``logger``, ``message``, ``request_id``
    and ``exception`` (formatted traceback or ``null``).
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created,
                tz=datetime.UTC,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
            "exception": self.formatException(record.exc_info) if record.exc_info else None,
        }
        return json.dumps(payload, default=str)


def setup_logging(level: int = logging.INFO) -> None:
    """Replace the root logger's handlers with a single JSON stdout handler."""
    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

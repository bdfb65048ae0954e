"""Process-wide logging configuration for the controller.

Two output modes are supported:

* plain text, one record per line, for local development;
* single-line JSON (``BUILD_STRUCTURED_LOGGING=true``) so log aggregators can
  index fields such as ``build`` and ``namespace`` without regex parsing.

Reconcilers attach resource identity via ``extra={"resource": {...}}``;
the JSON formatter copies that mapping into the payload.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from build_engine.config import Settings

_TEXT_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        resource = getattr(record, "resource", None)
        if resource is not None:
            payload["resource"] = resource

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    """Install a root handler according to *settings*.

    Existing root handlers are replaced so repeated calls do not duplicate
    output.
    """
    level = logging.DEBUG if settings.debug else logging.INFO
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    if settings.structured_logging:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

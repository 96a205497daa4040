"""Log setup for the registry, the CLI and the ledger/oracle adapters."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Client libraries that log every request or connection at INFO/DEBUG
QUIET_LOGGERS = ("urllib3", "psycopg", "confluent_kafka")


def setup_logging(level: str = "INFO", format_type: str = "standard") -> None:
    """Route all logging to stderr.

    stdout is reserved for the JSON records the CLI prints.

    Parameters
    ----------
    level : str
        Level name for ``property_ledger`` loggers; unknown names mean INFO.
    format_type : str
        ``"json"`` for one JSON object per line, anything else for text.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    if format_type == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("property_ledger").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with the property it concerns."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Set by the registry via extra={"property_id": ...}
        property_id = getattr(record, "property_id", None)
        if property_id is not None:
            entry["property_id"] = property_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)

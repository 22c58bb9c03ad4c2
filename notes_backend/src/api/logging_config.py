import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from src.api.config import LOG_LEVEL


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with optional `event` and `extra_data` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "event"):
            entry["event"] = record.event  # type: ignore[attr-defined]
        if hasattr(record, "extra_data"):
            entry.update(record.extra_data)  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False, default=str)


# PUBLIC_INTERFACE
def setup_logging(level: str = LOG_LEVEL) -> None:
    """Install the JSON handler on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    # Quiet noisy libraries
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)

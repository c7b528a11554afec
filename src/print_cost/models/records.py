"""Helpers shared by the record (plain mapping) converters of the entity models."""

import uuid
from datetime import datetime
from typing import Any, Mapping, Optional


def new_id() -> str:
    """Generate a stable identifier for a new entity."""
    return str(uuid.uuid4())


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Read a timestamp stored as an ISO-8601 string (or already a datetime)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Write a timestamp as an ISO-8601 string."""
    if value is None:
        return None
    return value.isoformat()


def get_or(record: Mapping[str, Any], key: str, default: Any) -> Any:
    """Return record[key], or default when the key is absent or None."""
    value = record.get(key)
    return default if value is None else value

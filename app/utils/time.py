"""Time utilities (UTC now, ISO timestamps for the GraphQL Datetime scalar)."""
from __future__ import annotations
from datetime import datetime, timezone

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def isoformat_utc(value: datetime | None = None) -> str:
    """ISO-8601 with millisecond precision and a trailing ``Z``."""
    ts = (value or utc_now()).astimezone(timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")

__all__ = ["utc_now", "isoformat_utc"]

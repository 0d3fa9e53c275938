from __future__ import annotations
from datetime import UTC, date, datetime, time
from typing import Any


def require_text(value: Any, message: str) -> str:
    if not isinstance(value, str):
        raise ValueError(message)
    text = value.strip()
    if not text:
        raise ValueError(message)
    return text


def require_value(value: Any, message: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(message)
    return value.strip() if isinstance(value, str) else value


def optional_text(value: Any, message: str = "Expected a string") -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(message)
    return value.strip() or None


def calendar_day(value: Any, message: str) -> Any:
    """Reduce an ISO datetime to its UTC calendar day.

    Only midnight (after conversion to UTC) is accepted, a real time of day
    would be lost. Plain dates pass through to the schema.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and "T" in value:
        try:
            dt = datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(message) from None
    else:
        return value
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    if dt.time() != time(0):
        raise ValueError(message)
    return dt.date()


def combine_date_time(d: str | None, t: str | None) -> str | None:
    """Join the separate date/time inputs of an HTML form into one ISO string.

    None if either half is blank; parsing is left to the schema.
    """
    d, t = (d or "").strip(), (t or "").strip()
    if not d or not t:
        return None
    return f"{d}T{t}"


def ensure_time_range(start: datetime, end: datetime) -> None:
    if end <= start:
        raise ValueError("End time must be after start time")


def ensure_date_range(start: date, end: date) -> None:
    if end < start:
        raise ValueError("End date must be after or equal to start date")

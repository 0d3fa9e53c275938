from __future__ import annotations
from datetime import date, datetime

STATUS_CLASSES = {
    "APPROVED": "badge-approved",
    "REJECTED": "badge-rejected",
    "PENDING": "badge-pending",
}

def fmt_date(value: date | datetime | None) -> str:
    if not value:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%Y-%m-%d")

def fmt_datetime(value: datetime | None) -> str:
    if not value:
        return ""
    return value.strftime("%Y-%m-%d %H:%M")

def truncate_text(value: str | None, limit: int = 30) -> str:
    if not value:
        return ""
    return value if len(value) <= limit else value[:limit] + "..."

def status_class(value) -> str:
    key = getattr(value, "value", value)
    return STATUS_CLASSES.get(str(key), "badge-pending")

def register_filters(app):
    app.add_template_filter(fmt_date, "fmt_date")
    app.add_template_filter(fmt_datetime, "fmt_datetime")
    app.add_template_filter(truncate_text, "truncate_text")
    app.add_template_filter(status_class, "status_class")

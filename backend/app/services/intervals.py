"""Renewal interval arithmetic and shared field validation helpers."""

from datetime import date
from typing import Iterable, Optional

from backend.app.core.errors import ValidationError
from backend.app.core.time import add_months

INTERVAL_MONTHS = {
    "annual": 12,
    "bi-annual": 6,
    "2-year": 24,
    "3-year": 36,
    "5-year": 60,
}
INTERVAL_TYPES = tuple(INTERVAL_MONTHS) + ("custom",)


def normalize_choice(value, allowed: Iterable[str], label: str) -> str:
    """Lower-case and strip ``value`` and check it against ``allowed``."""
    allowed = tuple(allowed)
    normalized = str(value).strip().lower() if value is not None else ""
    if normalized not in allowed:
        raise ValidationError(f"Invalid {label} '{value}'. Must be one of: {', '.join(allowed)}")
    return normalized


def parse_positive_int(value, label: str) -> int:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError(f"{label} is required")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{label} must be a positive whole number")
        value = int(value)
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} must be a positive whole number")
    if number <= 0:
        raise ValidationError(f"{label} must be a positive whole number")
    return number


def interval_months(interval_type: str, custom_interval_months: Optional[int] = None) -> int:
    if interval_type == "custom":
        if custom_interval_months is None:
            raise ValidationError("Custom interval months is required for a custom interval")
        return parse_positive_int(custom_interval_months, "Custom interval months")
    if interval_type not in INTERVAL_MONTHS:
        raise ValidationError(
            f"Invalid interval type '{interval_type}'. Must be one of: {', '.join(INTERVAL_TYPES)}"
        )
    return INTERVAL_MONTHS[interval_type]


def compute_next_due_date(
    last_service_date: date, interval_type: str, custom_interval_months: Optional[int] = None
) -> date:
    """Return ``last_service_date`` shifted forward by the interval's month count."""
    return add_months(last_service_date, interval_months(interval_type, custom_interval_months))

"""Input validation helpers."""

from __future__ import annotations

import datetime as dt
import re
import uuid
from typing import Optional, Tuple

from finflow.core.errors import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def parse_uuid(value: str | None, label: str = "Id") -> str:
    if not value:
        raise ValidationError(f"{label} is required")
    # uuid.UUID also takes braces, urn: prefixes and bare hex; ids travel hyphenated only.
    if not isinstance(value, str) or not UUID_PATTERN.fullmatch(value):
        raise ValidationError(f"Invalid {label}")
    return str(uuid.UUID(value))


def parse_iso_date(value: str | None, field: str = "date") -> Optional[dt.date]:
    """Parse a strict ``yyyy-MM-dd`` string; blank means "not supplied"."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not _ISO_DATE.match(value):
        raise ValidationError(f"Invalid {field} date, expected yyyy-MM-dd")
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid {field} date, expected yyyy-MM-dd")


def resolve_date_range(
    from_date: Optional[dt.date],
    to_date: Optional[dt.date],
    *,
    days: int = 30,
    today: Optional[dt.date] = None,
) -> Tuple[dt.date, dt.date]:
    """Fill in missing bounds from the trailing ``days`` window ending today.

    A defaulted start is not moved to follow an explicit ``to_date``, so an
    early ``to_date`` yields an empty window rather than an error. Only two
    explicit, inverted bounds are rejected.
    """
    if from_date and to_date and from_date > to_date:
        raise ValidationError("from date must not be after to date")
    today = today or dt.date.today()
    end = to_date or today
    start = from_date or (today - dt.timedelta(days=days))
    return start, end

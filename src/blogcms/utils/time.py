"""Time utilities for UTC timestamps and display dates."""

from datetime import datetime, timezone
from typing import Optional

# Long-form month names for the blog's display locale (pt-BR)
MONTH_NAMES_PT_BR = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def utc_now_z() -> str:
    """
    Get current UTC time as ISO 8601 string with Z suffix, millisecond precision.

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2025-12-23T00:27:07.804Z')
    """
    return to_utc_z(datetime.now(timezone.utc))


def to_utc_z(dt: datetime) -> str:
    """
    Convert datetime to ISO 8601 UTC string with Z suffix.

    Args:
        dt: Datetime object (must be timezone-aware)

    Returns:
        ISO 8601 UTC timestamp with millisecond precision ending with 'Z'

    Raises:
        ValueError: If datetime is naive (not timezone-aware)
    """
    if dt.tzinfo is None:
        raise ValueError(
            f"Naive datetime not allowed. Got {dt}. "
            "Use datetime.now(timezone.utc) or dt.replace(tzinfo=timezone.utc)"
        )

    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 string (date or datetime, 'Z' allowed). Returns None if invalid."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_long_date(value: str) -> str:
    """
    Render an ISO timestamp as a long-form pt-BR date, e.g. '17 de outubro de 2026'.

    The date is taken in UTC. Unparseable input is returned unchanged.
    """
    dt = parse_iso(value)
    if dt is None:
        return value
    dt = dt.astimezone(timezone.utc)
    return f"{dt.day} de {MONTH_NAMES_PT_BR[dt.month - 1]} de {dt.year}"

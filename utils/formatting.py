"""
================================================================================
FORMATTING UTILITIES
================================================================================

Purpose: Small helpers that turn ratings, progress values, focus area lists
and timestamps into the strings stored on profiles or printed by scripts.

WHY: The same rating has to read the same way in the training program text,
the dashboard payload and the CLI summary, so the formatting lives in one
place.
================================================================================
"""

from datetime import datetime
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

FOCUS_AREA_SEPARATOR = ", "
DISPLAY_TIMEZONE = "Asia/Manila"


def format_rating(rating) -> str:
    """Format a rating with one decimal place.

    Args:
        rating (float or None): Rating value (e.g., 3.0).

    Returns:
        str: Formatted rating (e.g., "3.0") or "N/A".

    Example:
        >>> format_rating(3)
        '3.0'
        >>> format_rating(None)
        'N/A'
    """
    if rating is None:
        return "N/A"
    return f"{float(rating):.1f}"


def format_progress(progress_percent) -> str:
    """Format band progress as a percentage string (e.g., "6%")."""
    if progress_percent is None:
        return "0%"
    return f"{int(round(progress_percent))}%"


def join_focus_areas(focus_areas: Sequence[str]) -> str:
    """Join focus areas into the comma-separated form stored on the profile.

    Example:
        >>> join_focus_areas(['Serve', 'Return'])
        'Serve, Return'
    """
    return FOCUS_AREA_SEPARATOR.join(focus_areas)


def split_focus_areas(value: Optional[str]) -> List[str]:
    """Split the stored focus area string back into a list.

    Example:
        >>> split_focus_areas('Serve, Return, Dinks')
        ['Serve', 'Return', 'Dinks']
        >>> split_focus_areas(None)
        []
    """
    if not value:
        return []
    return [area.strip() for area in value.split(",") if area.strip()]


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO timestamp from Supabase (accepts a trailing 'Z')."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def format_timestamp(value, tz_name: str = DISPLAY_TIMEZONE) -> str:
    """Format a stored timestamp in local time as DD.MM.YYYY HH:MM.

    Naive timestamps are treated as UTC. Returns "never" for empty values.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return "never"
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    local = dt.astimezone(ZoneInfo(tz_name))
    return local.strftime("%d.%m.%Y %H:%M")

"""Relative time labels for retrieved memories."""

from datetime import UTC, datetime

from src.errors import ParseError

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY

# Anything older than this is shown as an absolute date.
WEEKS_CUTOFF_DAYS = 30

JUST_NOW = "just now"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid ISO-8601 timestamp: {value!r}"
        raise ParseError(msg) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''} ago"


def format_date(moment: datetime) -> str:
    """Format as ``January 15, 2025``."""
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"


def format_time_ago(iso_timestamp: str, now: datetime | None = None) -> str:
    """Format an ISO timestamp as a short relative label.

    - < 1 min → "just now"
    - < 60 min → "N minutes ago"
    - < 24 h → "N hours ago"
    - < 7 days → "N days ago"
    - < 30 days → "N weeks ago"
    - else → "January 15, 2025"

    Args:
        iso_timestamp: When the memory was recorded.
        now: Reference instant, defaults to the current UTC time.

    Raises:
        ParseError: ``iso_timestamp`` is not a valid ISO-8601 string.
    """
    then = parse_timestamp(iso_timestamp)
    current = now or datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)

    seconds = (current - then).total_seconds()
    if seconds < 0:
        return "in the future"
    if seconds < MINUTE:
        return JUST_NOW
    if seconds < HOUR:
        return _plural(int(seconds // MINUTE), "minute")
    if seconds < DAY:
        return _plural(int(seconds // HOUR), "hour")
    if seconds < WEEK:
        return _plural(int(seconds // DAY), "day")
    if seconds < WEEKS_CUTOFF_DAYS * DAY:
        return _plural(int(seconds // WEEK), "week")
    return format_date(then)

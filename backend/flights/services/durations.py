import re
from datetime import datetime, timezone

DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?")

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600


def parse_duration_to_minutes(value) -> int | None:
    """PT2H30M -> 150. Anything else (no PT prefix, no H or M part, trailing text) is None."""
    if not value or not isinstance(value, str):
        return None
    match = DURATION_RE.fullmatch(value.strip())
    if not match or (match.group(1) is None and match.group(2) is None):
        return None
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return hours * 60 + minutes


def compose_datetime(date, time) -> datetime | None:
    """Combine a supplier date ("2024-01-10") and time ("18:30:00") into a datetime."""
    if not date or not isinstance(date, str):
        return None
    if not time or not isinstance(time, str) or not time.strip():
        return None
    try:
        return datetime.fromisoformat(f"{date.strip()}T{time.strip()}")
    except ValueError:
        return None


def _epoch(value: datetime) -> float:
    # Naive supplier timestamps are read as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def gap_seconds(arrival: datetime, departure: datetime) -> int:
    return max(0, int(_epoch(departure) - _epoch(arrival)))


def format_gap(seconds: int) -> str:
    seconds = max(0, int(seconds))
    days = seconds // SECONDS_PER_DAY
    remainder = seconds % SECONDS_PER_DAY
    hours = remainder // SECONDS_PER_HOUR
    minutes = (remainder % SECONDS_PER_HOUR) // 60

    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"

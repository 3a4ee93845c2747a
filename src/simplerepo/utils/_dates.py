"""Date parsing and conversion helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pendulum

# e.g. "2005-04-07 15:30:13 -0700"
_GIT_DATE_FORMAT = "YYYY-MM-DD HH:mm:ss ZZ"


def parse_date(value: str) -> datetime:
    """Parse a user-supplied date string into an aware datetime.

    Accepts ISO 8601, the ``YYYY-MM-DD HH:mm:ss +ZZZZ`` form, and anything
    ``pendulum.parse`` understands in non-strict mode. Values without an
    offset are taken as UTC.

    Args:
        value: The date string.

    Returns:
        A timezone-aware datetime.

    Raises:
        ValueError: If the string cannot be parsed as a date.
    """
    text = value.strip()
    try:
        return ensure_aware(datetime.fromisoformat(text))
    except ValueError:
        pass

    try:
        parsed = pendulum.from_format(text, _GIT_DATE_FORMAT)
    except ValueError:
        # Fallback to pendulum for more flexible parsing (non-standard formats)
        parsed = pendulum.parse(text, strict=False)

    # pendulum.parse can return DateTime, Date, Time, or Duration
    if not isinstance(parsed, datetime):
        msg = f"Not a date and time: {value!r}"
        raise ValueError(msg)  # noqa: TRY004
    return ensure_aware(datetime.fromisoformat(parsed.isoformat()))


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, leaving aware ones unchanged.

    Args:
        value: A datetime that may be naive.

    Returns:
        A timezone-aware datetime.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def from_git_time(timestamp: int, offset: int) -> datetime:
    """Convert a git timestamp and offset into an aware datetime.

    Args:
        timestamp: Unix timestamp in seconds.
        offset: Timezone offset in seconds EAST of UTC, as dulwich reports it.

    Returns:
        The datetime in the commit's own timezone.
    """
    tz = timezone(timedelta(seconds=offset))
    return datetime.fromtimestamp(timestamp, tz=tz)


def to_git_time(value: datetime) -> tuple[int, int]:
    """Convert an aware datetime into a git timestamp and offset.

    Args:
        value: The datetime to convert; naive values are taken as UTC.

    Returns:
        Tuple of (unix timestamp, offset in seconds east of UTC).
    """
    aware = ensure_aware(value)
    offset = aware.utcoffset()
    return int(aware.timestamp()), int(offset.total_seconds()) if offset else 0

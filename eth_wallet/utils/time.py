"""Block time conversion and display helpers."""

from datetime import datetime, timezone
from typing import Union

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def to_utc_timestamp(timestamp: Union[int, float, datetime]) -> datetime:
    """Normalize a unix time or datetime to an aware UTC datetime."""
    if isinstance(timestamp, datetime):
        # Naive values are taken to be UTC already
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(timezone.utc)

    elif isinstance(timestamp, (int, float)):
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)

    else:
        raise ValueError(f"Unsupported timestamp type: {type(timestamp)}")


def block_time(unix_seconds: int) -> datetime:
    """Mining time of a block from its header timestamp."""
    if unix_seconds < 0:
        raise ValueError(f"Block timestamp must not be negative: {unix_seconds}")
    return to_utc_timestamp(int(unix_seconds))


def get_current_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_local(dt: datetime) -> str:
    """Render a stored UTC time in the machine's local timezone."""
    return to_utc_timestamp(dt).astimezone().strftime(DISPLAY_FORMAT)

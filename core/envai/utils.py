"""Small helpers shared by the metrics engine and the data model."""

import math
import re
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone, tzinfo

from .exceptions import EmptyInputError, InvalidRangeError, ZeroBaselineError


def round_half_up(value: float, digits: int = 0) -> float | int:
    """Round half away from negative infinity (2.5 -> 3, -2.5 -> -2).

    Integers are returned for ``digits == 0``.
    """
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    if digits == 0:
        return int(rounded)
    return rounded


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def parse_timestamp(value: str | datetime, tz: tzinfo | None = None) -> datetime:
    """Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Naive values are taken to be in ``tz`` (UTC when not given). When ``tz``
    is given, aware values are converted into it.

    Raises:
        InvalidRangeError: If the value is not a parseable timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise InvalidRangeError(f"Invalid timestamp: {value!r}")
        ts_str = value.strip()
        if ts_str.endswith("Z"):
            ts_str = ts_str[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(ts_str)
        except ValueError as e:
            raise InvalidRangeError(f"Invalid timestamp: {value!r}") from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz or timezone.utc)
    if tz is not None:
        return parsed.astimezone(tz)
    return parsed


def to_utc(moment: datetime) -> datetime:
    """Same instant in UTC.

    Datetimes sharing a ZoneInfo compare and subtract on wall-clock time, so
    ordering and elapsed-time arithmetic go through UTC.
    """
    return moment.astimezone(timezone.utc)


def sunday_weekday(moment: datetime) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (moment.weekday() + 1) % 7


def week_start(moment: datetime) -> date:
    """Sunday that starts the week containing ``moment``."""
    return moment.date() - timedelta(days=sunday_weekday(moment))


def require_readings(readings: Sequence, operation: str) -> None:
    """Raise EmptyInputError when an aggregate gets no readings."""
    if len(readings) == 0:
        raise EmptyInputError(operation)


def percent_change(baseline: float, value: float) -> float:
    """Relative change from ``baseline`` to ``value`` in percent.

    Raises:
        ZeroBaselineError: If the baseline is 0
    """
    if baseline == 0:
        raise ZeroBaselineError("Cannot compute a relative change from a zero baseline")
    return (value - baseline) / baseline * 100


def format_delta(value: float) -> str:
    """Format a delta with one decimal ("50.0"), without a negative zero."""
    return f"{round_half_up(value, 1) + 0.0:.1f}"


def now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()

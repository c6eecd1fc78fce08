"""UTC normalization and parsing of caller-supplied date text.

All stored timestamps are UTC. Naive datetimes are assumed to already be
UTC and are tagged as such rather than converted from local time.
"""

from datetime import UTC, date, datetime, time

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from smartmeter.core.exceptions import InvalidInputError

WindowBound = date | datetime | str

_date_adapter = TypeAdapter(date)
_datetime_adapter = TypeAdapter(datetime)


def to_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive input is taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def window_bound(value: WindowBound) -> datetime:
    """Normalize a window bound.

    Text is parsed first. Calendar dates become UTC start-of-day and
    date-times are converted to UTC without truncation.
    """
    if isinstance(value, str):
        value = parse_window_bound(value)
    if isinstance(value, datetime):
        return to_utc(value)
    return datetime.combine(value, time.min, tzinfo=UTC)


def resolve_window(from_date: WindowBound, to_date: WindowBound) -> tuple[datetime, datetime]:
    """Normalize both bounds of an inclusive window."""
    start = window_bound(from_date)
    end = window_bound(to_date)
    if start > end:
        raise InvalidInputError(f"Window start {start.isoformat()} is after end {end.isoformat()}")
    return start, end


def parse_reading_timestamp(text: str) -> datetime:
    """Parse reading date text (date or date-time) into an aware UTC datetime."""
    return window_bound(parse_window_bound(text))


def parse_window_bound(text: str) -> date | datetime:
    """Parse a window bound given either as YYYY-MM-DD or as an ISO date-time."""
    if not isinstance(text, str):
        raise InvalidInputError(f"Invalid date: {text!r}")
    value = text.strip()
    adapter = _datetime_adapter if ("T" in value or " " in value) else _date_adapter
    try:
        return adapter.validate_python(value)
    except PydanticValidationError as e:
        raise InvalidInputError(f"Invalid date: {text!r}") from e

"""Date window checks for transaction timestamps."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

# RFC3339 date-time: offset is mandatory, fraction optional
_RFC3339 = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)

_DATE_FORMAT = "%Y-%m-%d"


def _parse_timestamp(value: str) -> tuple[datetime, bool]:
    """Parse an RFC3339 timestamp, reporting dropped sub-microsecond digits.

    Returns:
        (aware datetime truncated to microseconds, True if any nonzero
        digit beyond microseconds was dropped).
    """
    if not _RFC3339.match(value):
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")

    text = value.upper()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    # nanosecond fractions -> microseconds
    truncated = False
    match = re.match(r"^(.*\.\d{6})(\d+)(.*)$", text)
    if match:
        truncated = match.group(2).strip("0") != ""
        text = match.group(1) + match.group(3)

    return datetime.fromisoformat(text), truncated


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp into an aware datetime.

    Fractional seconds beyond microseconds are truncated.

    Raises:
        ValueError: If value is not RFC3339.
    """
    parsed, _ = _parse_timestamp(value)
    return parsed


def parse_calendar_date(value: str) -> datetime:
    """Parse YYYY-MM-DD as midnight UTC.

    Raises:
        ValueError: If value is not a calendar date.
    """
    return datetime.strptime(value, _DATE_FORMAT).replace(tzinfo=timezone.utc)


def is_date_in_range(
    date: str,
    start_date: str,
    end_date: str = "",
    now: datetime | None = None,
) -> bool:
    """Check whether a timestamp falls inside a calendar-date window.

    The window opens strictly after midnight of `start_date` and covers the
    whole of `end_date`. An empty `end_date` means today (`now`).

    Args:
        date: RFC3339 transaction timestamp.
        start_date: First day, YYYY-MM-DD.
        end_date: Last day, YYYY-MM-DD, or "" for now.
        now: Reference time for an empty end_date. Defaults to current UTC time.

    Returns:
        True if start < date < end-of-window. False on empty or unparsable
        input.
    """
    if not date:
        return False

    try:
        parsed_date, truncated = _parse_timestamp(date)
    except ValueError as e:
        logger.debug(f"Error parsing the date: {e}")
        return False

    try:
        start = parse_calendar_date(start_date)
    except ValueError as e:
        logger.debug(f"Error parsing the start date: {e}")
        return False

    if end_date:
        try:
            end = parse_calendar_date(end_date)
        except ValueError as e:
            logger.debug(f"Error parsing the end date: {e}")
            return False
    else:
        end = now if now is not None else datetime.now(timezone.utc)

    # Exclusive upper bound: start of the following day
    boundary = end + timedelta(days=1)

    # A dropped sub-microsecond remainder still puts start midnight behind the date
    after_start = start < parsed_date or (truncated and parsed_date == start)
    return after_start and parsed_date < boundary

"""
Field normalization rules of the Astute Payroll timesheet API.

Pure functions converting domain values into the exact string forms the
web service accepts. See
https://api.astutepayroll.com/webservice/documentation/#type_timesheetSave
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from markupsafe import Markup, escape

from .exceptions import TimesheetValidationError
from .models import TimesheetDay

# Indexed Sunday-first, used as element name prefixes (e.g. mon_start)
WEEKDAY_TAGS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
BREAK_TIME_WIDTH = 4


@dataclass(frozen=True)
class NormalizedDay:
    """A timesheet day in wire form."""
    tag: str
    start: str
    finish: str
    break_time: str
    notes: Markup


def format_clock_time(moment: datetime) -> str:
    """Format the time of day as HHMM (24-hour, zero padded)."""
    return f"{moment.hour:02d}{moment.minute:02d}"


def pad_break_time(value: str) -> str:
    """
    Left-pad a break duration to exactly four digits.

    Args:
        value: Digit string of up to four characters, empty for no break

    Returns:
        Four character digit string

    Raises:
        ValueError: If the value is longer than four characters or not numeric
    """
    if len(value) > BREAK_TIME_WIDTH:
        raise ValueError(
            f"Break time must be at most {BREAK_TIME_WIDTH} digits, got {value!r}"
        )
    if value and not value.isdigit():
        raise ValueError(f"Break time must contain digits only, got {value!r}")
    return value.rjust(BREAK_TIME_WIDTH, "0")


def weekday_tag(moment: datetime) -> str:
    """Return the three letter weekday tag for the given moment."""
    return WEEKDAY_TAGS[moment.isoweekday() % 7]


def escape_notes(text: str) -> Markup:
    """Escape free text for use as XML character data."""
    return escape(text)


def timesheet_date(days: Sequence[TimesheetDay]) -> str:
    """Return the date of the earliest start time among the days."""
    if not days:
        raise TimesheetValidationError("A timesheet needs at least one day")
    try:
        earliest = min(day.start_time for day in days)
    except TypeError as exc:
        raise TimesheetValidationError(
            "Timesheet days mix naive and timezone-aware start times"
        ) from exc
    return earliest.strftime(DATE_FORMAT)


def submission_timestamp(
    submission_time: Optional[datetime],
    clock: Callable[[], datetime],
) -> str:
    """Serialize the submission time, falling back to the clock when unset."""
    moment = submission_time if submission_time is not None else clock()
    return moment.strftime(TIMESTAMP_FORMAT)


def normalize_day(day: TimesheetDay) -> NormalizedDay:
    """Convert a timesheet day into the strings sent on the wire."""
    try:
        break_time = pad_break_time(day.break_time)
    except ValueError as exc:
        raise TimesheetValidationError(str(exc)) from exc

    return NormalizedDay(
        tag=weekday_tag(day.start_time),
        start=format_clock_time(day.start_time),
        finish=format_clock_time(day.end_time),
        break_time=break_time,
        notes=escape_notes(day.notes),
    )

"""
Tests for the field normalization rules.
"""

from datetime import datetime

import pendulum
import pytest

from astute.domain.exceptions import TimesheetValidationError
from astute.domain.models import TimesheetDay
from astute.domain.normalizer import (
    WEEKDAY_TAGS,
    escape_notes,
    format_clock_time,
    normalize_day,
    pad_break_time,
    submission_timestamp,
    timesheet_date,
    weekday_tag,
)

TZ = "Australia/Sydney"


def _day(start: str, end: str, break_time: str = "30", notes: str = "") -> TimesheetDay:
    return TimesheetDay(
        start_time=pendulum.parse(start, tz=TZ),
        end_time=pendulum.parse(end, tz=TZ),
        break_time=break_time,
        notes=notes,
    )


class TestClockTime:
    """Tests for HHMM formatting."""

    @pytest.mark.parametrize(
        "moment, expected",
        [
            ("2024-11-25 09:05", "0905"),
            ("2024-11-25 17:30", "1730"),
            ("2024-11-25 00:00", "0000"),
            ("2024-11-25 23:59", "2359"),
        ],
    )
    def test_format_clock_time(self, moment, expected):
        """Hours and minutes are zero padded without a separator."""
        assert format_clock_time(pendulum.parse(moment, tz=TZ)) == expected


class TestBreakTime:
    """Tests for break duration padding."""

    @pytest.mark.parametrize("value", ["5", "45", "130", "1230"])
    def test_pads_to_four_digits(self, value):
        """Valid durations are left padded with zeros to four characters."""
        padded = pad_break_time(value)

        assert len(padded) == 4
        assert padded.endswith(value)
        assert set(padded[: 4 - len(value)]) <= {"0"}

    def test_empty_means_no_break(self):
        """An empty break time is sent as 0000."""
        assert pad_break_time("") == "0000"

    def test_too_long_raises(self):
        """More than four digits cannot be sent."""
        with pytest.raises(ValueError, match="at most 4 digits"):
            pad_break_time("12345")

    def test_non_digits_raise(self):
        """Only digits are accepted."""
        with pytest.raises(ValueError, match="digits only"):
            pad_break_time("1h")


class TestWeekdayTag:
    """Tests for weekday tag mapping."""

    def test_week_maps_onto_all_tags(self):
        """Sunday to Saturday map one-to-one onto the seven tags."""
        sunday = pendulum.parse("2024-11-24 08:00", tz=TZ)
        tags = [weekday_tag(sunday.add(days=offset)) for offset in range(7)]

        assert tags == ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
        assert set(tags) == set(WEEKDAY_TAGS)

    def test_plain_datetime(self):
        """Standard library datetimes are accepted as well."""
        from datetime import datetime

        assert weekday_tag(datetime(2024, 11, 29, 9, 0)) == "fri"


class TestNotes:
    """Tests for notes escaping."""

    def test_escapes_markup_characters(self):
        """Angle brackets, ampersands and quotes are replaced by entities."""
        escaped = escape_notes("<b>Tom & Jerry's \"day\"</b>")

        assert escaped == "&lt;b&gt;Tom &amp; Jerry&#39;s &#34;day&#34;&lt;/b&gt;"

    def test_plain_text_unchanged(self):
        assert escape_notes("Site visit") == "Site visit"


class TestTimesheetDate:
    """Tests for timesheet date derivation."""

    def test_uses_earliest_start_time(self):
        """The date is taken from the earliest day, whatever the input order."""
        days = [
            _day("2024-11-27 09:00", "2024-11-27 17:00"),
            _day("2024-11-25 09:00", "2024-11-25 17:00"),
            _day("2024-11-26 09:00", "2024-11-26 17:00"),
        ]

        assert timesheet_date(days) == "2024-11-25"

    def test_empty_days_rejected(self):
        with pytest.raises(TimesheetValidationError):
            timesheet_date([])

    def test_mixed_naive_and_aware_rejected(self):
        """Start times that cannot be compared are a validation error."""
        days = [
            _day("2024-11-26 09:00", "2024-11-26 17:00"),
            TimesheetDay(
                start_time=datetime(2024, 11, 25, 9, 0),
                end_time=datetime(2024, 11, 25, 17, 0),
            ),
        ]

        with pytest.raises(TimesheetValidationError, match="naive"):
            timesheet_date(days)


class TestSubmissionTimestamp:
    """Tests for the submission time default."""

    def test_explicit_value_wins(self):
        """An explicit submission time is used as given."""
        explicit = pendulum.parse("2024-11-29 16:45:10", tz=TZ)

        result = submission_timestamp(explicit, clock=lambda: pytest.fail("clock used"))

        assert result == "2024-11-29 16:45:10"

    def test_falls_back_to_clock(self):
        """Without a value the clock supplies the time."""
        now = pendulum.parse("2024-11-30 08:00:00", tz=TZ)

        assert submission_timestamp(None, clock=lambda: now) == "2024-11-30 08:00:00"


def test_normalize_day():
    """A day is converted into tag, times, break and escaped notes."""
    day = _day("2024-11-25 08:30", "2024-11-25 16:15", break_time="45", notes="A & B")

    normalized = normalize_day(day)

    assert normalized.tag == "mon"
    assert normalized.start == "0830"
    assert normalized.finish == "1615"
    assert normalized.break_time == "0045"
    assert normalized.notes == "A &amp; B"


def test_normalize_day_rejects_bad_break_time():
    day = _day("2024-11-25 08:30", "2024-11-25 16:15", break_time="99999")

    with pytest.raises(TimesheetValidationError):
        normalize_day(day)

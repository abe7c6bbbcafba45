"""
Timesheets described in YAML files, for saving from the command line.

Example::

    uid: "1001"
    user_id: jdoe
    tsid: "50001"
    days:
      - start: "2024-11-25 09:00"
        end: "2024-11-25 17:00"
        break: "30"
        notes: Ward round
"""

from datetime import datetime
from pathlib import Path
from typing import List

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import read_yaml_mapping
from .domain.models import SaveTimesheetParams, TimesheetDay, UserParams


def _as_text(value):
    # YAML reads unquoted numbers and full timestamps as native values
    if isinstance(value, (int, datetime)):
        return str(value)
    return value


class DayEntry(BaseModel):
    """One worked day as written in the file."""
    model_config = ConfigDict(populate_by_name=True)

    start: str
    end: str
    break_time: str = Field(default="", alias="break")
    notes: str = ""

    @field_validator("start", "end", "break_time", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)

    def to_day(self, timezone: str) -> TimesheetDay:
        """Parse the times in the given timezone unless they carry an offset."""
        return TimesheetDay(
            start_time=pendulum.parse(self.start, tz=timezone),
            end_time=pendulum.parse(self.end, tz=timezone),
            break_time=self.break_time,
            notes=self.notes,
        )


class TimesheetFile(BaseModel):
    """A timesheet with its days."""
    uid: str
    user_id: str
    tsid: str
    days: List[DayEntry] = Field(default_factory=list)

    @field_validator("uid", "user_id", "tsid", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)

    def to_params(self, timezone: str, submit: bool = False) -> SaveTimesheetParams:
        return SaveTimesheetParams(
            user=UserParams(uid=self.uid, user_id=self.user_id),
            tsid=self.tsid,
            days=[day.to_day(timezone) for day in self.days],
            submit=submit,
        )

    @classmethod
    def load_from_yaml(cls, path: Path) -> "TimesheetFile":
        """
        Load a timesheet from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a valid timesheet
        """
        if not path.exists():
            raise FileNotFoundError(f"Timesheet file not found: {path}")

        return cls(**read_yaml_mapping(path))

"""
Domain models for Astute Payroll requests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class AuthParams:
    """
    Credentials and endpoint shared by every call of a client.
    """
    api_url: str
    api_key: str
    api_username: str
    api_password: str

    def __repr__(self) -> str:
        return f"AuthParams(api_url={self.api_url!r}, api_username={self.api_username!r})"


@dataclass(frozen=True)
class QueryUserParams:
    """Search criteria for the user query (substring match on job code)."""
    job_code: str = ""


@dataclass(frozen=True)
class QueryTimesheetParams:
    """Search criteria for the timesheet query (equality on UID)."""
    uid: str


@dataclass(frozen=True)
class UserParams:
    """Identifies the employee a timesheet belongs to."""
    uid: str
    user_id: str


@dataclass(frozen=True)
class TimesheetDay:
    """
    A single worked day of a timesheet.

    break_time is the break duration as a digit string of up to 4 characters.
    """
    start_time: datetime
    end_time: datetime
    break_time: str = ""
    notes: str = ""


@dataclass(frozen=True)
class SaveTimesheetParams:
    """
    Parameters for saving (and optionally submitting) a timesheet.

    When did_not_work is set the days are ignored and only the
    did-not-work flag is sent.
    """
    user: UserParams
    tsid: str
    days: List[TimesheetDay] = field(default_factory=list)
    did_not_work: bool = False
    submit: bool = False
    submission_time: Optional[datetime] = None


@dataclass(frozen=True)
class SubmitTimesheetParams:
    """Parameters for submitting an already saved timesheet."""
    user: UserParams
    tsid: str
    start_time: datetime
    submission_time: Optional[datetime] = None


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body returned by a transport."""
    status_code: int
    content: bytes

"""
Pydantic models for parsing Astute Payroll *responses*.

Query results arrive as flat XML records; every child element of a record
becomes a field. Unknown fields are kept and exposed through ``model_extra``.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A user record returned by the user query."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    uid: str = Field(alias="UID")
    user_id: str = ""
    job_code: str = ""
    email: str = ""


class Timesheet(BaseModel):
    """A timesheet record returned by the timesheet query."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    tsid: str = Field(alias="TSID")
    uid: str = Field(default="", alias="UID")
    user_id: str = ""
    date: str = ""
    status: str = ""


class QueryUserResponse(BaseModel):
    users: List[User] = Field(default_factory=list)


class QueryTimesheetResponse(BaseModel):
    timesheets: List[Timesheet] = Field(default_factory=list)


class SaveTimesheetResponse(BaseModel):
    timesheet_id: str

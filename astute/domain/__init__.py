"""
Domain layer - Request/response types and field normalization rules.
"""

from .exceptions import (
    AstuteError,
    DecodeError,
    RemoteFaultError,
    SaveRejectedError,
    TimesheetValidationError,
    TransportError,
)
from .models import (
    AuthParams,
    QueryTimesheetParams,
    QueryUserParams,
    SaveTimesheetParams,
    SubmitTimesheetParams,
    TimesheetDay,
    UserParams,
)
from .responses import (
    QueryTimesheetResponse,
    QueryUserResponse,
    SaveTimesheetResponse,
    Timesheet,
    User,
)

__all__ = [
    "AstuteError",
    "AuthParams",
    "DecodeError",
    "QueryTimesheetParams",
    "QueryTimesheetResponse",
    "QueryUserParams",
    "QueryUserResponse",
    "RemoteFaultError",
    "SaveRejectedError",
    "SaveTimesheetParams",
    "SaveTimesheetResponse",
    "SubmitTimesheetParams",
    "Timesheet",
    "TimesheetDay",
    "TimesheetValidationError",
    "TransportError",
    "User",
    "UserParams",
]

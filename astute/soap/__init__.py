"""
SOAP layer - Envelope rendering and two-pass response decoding.
"""

from .decoder import (
    decode_envelope,
    decode_fault,
    decode_records,
    decode_timesheets,
    decode_users,
    extract_timesheet_id,
)
from .envelopes import (
    TIMESHEET_QUERY,
    TIMESHEET_SAVE,
    USER_QUERY,
    SoapOperation,
    SoapRequest,
    render_timesheet_query,
    render_timesheet_save,
    render_timesheet_submit,
    render_user_query,
)

__all__ = [
    "SoapOperation",
    "SoapRequest",
    "TIMESHEET_QUERY",
    "TIMESHEET_SAVE",
    "USER_QUERY",
    "decode_envelope",
    "decode_fault",
    "decode_records",
    "decode_timesheets",
    "decode_users",
    "extract_timesheet_id",
    "render_timesheet_query",
    "render_timesheet_save",
    "render_timesheet_submit",
    "render_user_query",
]

"""
Domain-specific exception hierarchy for the Astute Payroll client.
"""


class AstuteError(Exception):
    """Base class for all client-level errors."""


class TransportError(AstuteError):
    """Raised when a request could not be delivered to the web service."""


class RemoteFaultError(AstuteError):
    """Raised when the web service answers with a SOAP fault."""

    def __init__(self, fault_string: str):
        super().__init__(fault_string)
        self.fault_string = fault_string


class DecodeError(AstuteError):
    """Raised when a response document cannot be parsed into the expected shape."""


class SaveRejectedError(AstuteError):
    """Raised when a save response does not carry a timesheet identifier."""

    def __init__(self, response_text: str):
        super().__init__(response_text)
        self.response_text = response_text


class TimesheetValidationError(AstuteError, ValueError):
    """Raised when timesheet parameters are rejected before sending."""

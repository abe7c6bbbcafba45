"""
Application service exposing the Astute Payroll operations.

The client renders an envelope, hands it to a transport, checks for a SOAP
fault and decodes the answer. The transport, the transaction id generator and
the clock are injected, which keeps the client free of I/O of its own and
lets tests substitute any of them.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Protocol

import pendulum

from ..domain.exceptions import RemoteFaultError
from ..domain.models import (
    AuthParams,
    QueryTimesheetParams,
    QueryUserParams,
    SaveTimesheetParams,
    SubmitTimesheetParams,
    TransportResponse,
)
from ..domain.responses import (
    QueryTimesheetResponse,
    QueryUserResponse,
    SaveTimesheetResponse,
)
from ..soap.decoder import (
    decode_envelope,
    decode_fault,
    decode_timesheets,
    decode_users,
    extract_timesheet_id,
)
from ..soap.envelopes import (
    SoapRequest,
    render_timesheet_query,
    render_timesheet_save,
    render_timesheet_submit,
    render_user_query,
)

logger = logging.getLogger(__name__)

HTTP_OK = 200


class TransportProtocol(Protocol):
    """Protocol describing the transport behaviour needed by the client."""

    def send(self, url: str, action_name: str, action_uri: str, body: str) -> TransportResponse:
        """Deliver a rendered envelope and return the raw answer."""


def new_transaction_id() -> str:
    return str(uuid.uuid4())


class AstuteClient:
    """
    Typed operations of the Astute Payroll web service.

    Holds only immutable configuration, so one instance can serve concurrent
    callers.
    """

    def __init__(
        self,
        auth: AuthParams,
        transport: TransportProtocol,
        *,
        id_factory: Callable[[], str] = new_transaction_id,
        clock: Callable[[], datetime] = pendulum.now,
    ) -> None:
        self._auth = auth
        self._transport = transport
        self._id_factory = id_factory
        self._clock = clock

    def query_user(self, params: QueryUserParams) -> QueryUserResponse:
        """Find users whose job code contains ``params.job_code``."""
        request = render_user_query(self._auth, params.job_code)
        return decode_users(self._call(request))

    def query_timesheet_by_job(self, params: QueryTimesheetParams) -> QueryTimesheetResponse:
        """Find the timesheets of the user identified by ``params.uid``."""
        request = render_timesheet_query(self._auth, uid=params.uid)
        return decode_timesheets(self._call(request))

    def query_timesheet_by_id(self, tsid: str) -> QueryTimesheetResponse:
        """Fetch a timesheet by its identifier."""
        request = render_timesheet_query(self._auth, tsid=tsid)
        return decode_timesheets(self._call(request))

    def save_timesheet(self, params: SaveTimesheetParams) -> SaveTimesheetResponse:
        """
        Save a timesheet, submitting it as well when ``params.submit`` is set.

        Raises:
            TimesheetValidationError: If there are no days and did_not_work is unset
            SaveRejectedError: If the service did not return a timesheet identifier
        """
        request = render_timesheet_save(self._auth, params, self._id_factory(), self._clock)
        return SaveTimesheetResponse(timesheet_id=extract_timesheet_id(self._call(request)))

    def submit_timesheet(self, params: SubmitTimesheetParams) -> SaveTimesheetResponse:
        """Submit an already saved timesheet without resending its days."""
        request = render_timesheet_submit(self._auth, params, self._id_factory(), self._clock)
        return SaveTimesheetResponse(timesheet_id=extract_timesheet_id(self._call(request)))

    def _call(self, request: SoapRequest) -> str:
        """
        Send a request and return the Results text of the answer.

        Raises:
            TransportError: If the request could not be delivered
            RemoteFaultError: If the service answered with a fault
            DecodeError: If the answer could not be decoded
        """
        operation = request.operation
        response = self._transport.send(
            self._auth.api_url,
            operation.name,
            operation.uri,
            request.body,
        )

        if response.status_code != HTTP_OK:
            fault_string = decode_fault(response.content)
            logger.warning(
                "%s failed with HTTP %d: %s",
                operation.name,
                response.status_code,
                fault_string,
            )
            raise RemoteFaultError(fault_string)

        return decode_envelope(response.content, operation.name)

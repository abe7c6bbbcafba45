"""
SOAP request envelopes for the Astute Payroll web service.

Envelopes are rendered with Jinja2 using an autoescaping environment, so every
interpolated value is XML-escaped. The repeated per-day block of a timesheet
is the single trusted fragment: it is rendered by its own template and
injected into the envelope as ``Markup``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from jinja2 import DictLoader, Environment, StrictUndefined
from markupsafe import Markup

from ..domain.exceptions import TimesheetValidationError
from ..domain.models import AuthParams, SaveTimesheetParams, SubmitTimesheetParams
from ..domain.normalizer import (
    DATE_FORMAT,
    normalize_day,
    submission_timestamp,
    timesheet_date,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SoapOperation:
    """A remote operation: its name and the URI used as q1 namespace and SOAP action."""
    name: str
    uri: str


USER_QUERY = SoapOperation(name="UserQuery", uri="urn:UserQuery")
TIMESHEET_QUERY = SoapOperation(name="TimesheetQuery", uri="urn:TimesheetQuery")
TIMESHEET_SAVE = SoapOperation(name="TimesheetSave", uri="urn:TimesheetSave")


@dataclass(frozen=True)
class SoapRequest:
    """A rendered envelope ready to hand to a transport."""
    operation: SoapOperation
    body: str


_TEMPLATES = {
    "envelope.xml": (
        '<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/"'
        ' xmlns:tns="urn:tsoIntegrator"'
        ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">\n'
        "<soap:Body>\n"
        '<q1:{{ operation.name }} xmlns:q1="{{ operation.uri }}">\n'
        "{% block request %}{% endblock %}\n"
        "</q1:{{ operation.name }}>\n"
        "</soap:Body>\n"
        "</soap:Envelope>"
    ),
    "credentials.xml": (
        "    <api_key>{{ auth.api_key }}</api_key>\n"
        "    <api_username>{{ auth.api_username }}</api_username>\n"
        "    <api_password>{{ auth.api_password }}</api_password>\n"
    ),
    "user_query.xml": (
        '{% extends "envelope.xml" %}\n'
        "{% block request %}\n"
        "  <tns:userGet>\n"
        '{% include "credentials.xml" %}\n'
        "    <query>job_code like '%{{ job_code }}%'</query>\n"
        "  </tns:userGet>\n"
        "{% endblock %}"
    ),
    "timesheet_query.xml": (
        '{% extends "envelope.xml" %}\n'
        "{% block request %}\n"
        "  <tns:userGet>\n"
        '{% include "credentials.xml" %}\n'
        "    <query>{{ field }} = '{{ value }}'</query>\n"
        "  </tns:userGet>\n"
        "{% endblock %}"
    ),
    "timesheet_save.xml": (
        '{% extends "envelope.xml" %}\n'
        "{% block request %}\n"
        "  <tns:timesheetSave>\n"
        '{% include "credentials.xml" %}\n'
        "    <api_transaction_id>{{ transaction_id }}</api_transaction_id>\n"
        "    <UID>{{ user.uid }}</UID>\n"
        "    <user_id>{{ user.user_id }}</user_id>\n"
        "    <TSID>{{ tsid }}</TSID>\n"
        "{% block timesheet %}{% endblock %}\n"
        "  </tns:timesheetSave>\n"
        "{% endblock %}"
    ),
    "timesheet_save_full.xml": (
        '{% extends "timesheet_save.xml" %}\n'
        "{% block timesheet %}\n"
        "    <date>{{ date }}</date>\n"
        "{{ day_block }}"
        "{% if complete %}\n"
        "    <complete>{{ complete }}</complete>\n"
        "{% endif %}\n"
        "{% endblock %}"
    ),
    "timesheet_save_did_not_work.xml": (
        '{% extends "timesheet_save.xml" %}\n'
        "{% block timesheet %}\n"
        "    <did_not_work>1</did_not_work>\n"
        "{% endblock %}"
    ),
    "timesheet_submit.xml": (
        '{% extends "timesheet_save.xml" %}\n'
        "{% block timesheet %}\n"
        "    <date>{{ date }}</date>\n"
        "    <complete>{{ complete }}</complete>\n"
        "{% endblock %}"
    ),
    "timesheet_days.xml": (
        "{% for day in days %}\n"
        "    <{{ day.tag }}_start>{{ day.start }}</{{ day.tag }}_start>\n"
        "    <{{ day.tag }}_finish>{{ day.finish }}</{{ day.tag }}_finish>\n"
        "    <{{ day.tag }}_break>{{ day.break_time }}</{{ day.tag }}_break>\n"
        "    <{{ day.tag }}_notes>{{ day.notes }}</{{ day.tag }}_notes>\n"
        "{% endfor %}\n"
    ),
}

_environment = Environment(
    loader=DictLoader(_TEMPLATES),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def _render(template_name: str, operation: SoapOperation, **context) -> SoapRequest:
    body = _environment.get_template(template_name).render(operation=operation, **context)
    logger.debug("Rendered %s envelope from %s (%d chars)", operation.name, template_name, len(body))
    return SoapRequest(operation=operation, body=body)


def render_user_query(auth: AuthParams, job_code: str) -> SoapRequest:
    """Render a user query matching job codes that contain ``job_code``."""
    return _render("user_query.xml", USER_QUERY, auth=auth, job_code=job_code)


def render_timesheet_query(
    auth: AuthParams,
    *,
    uid: Optional[str] = None,
    tsid: Optional[str] = None,
) -> SoapRequest:
    """
    Render a timesheet query filtering by user or by timesheet identifier.

    Exactly one of ``uid`` and ``tsid`` must be given.
    """
    if (uid is None) == (tsid is None):
        raise ValueError("Exactly one of uid or tsid must be given")

    if uid is not None:
        field, value = "UID", uid
    else:
        field, value = "TSID", tsid

    return _render("timesheet_query.xml", TIMESHEET_QUERY, auth=auth, field=field, value=value)


def render_day_block(params: SaveTimesheetParams) -> Markup:
    """
    Render the repeated per-day elements, in the order the days were given.

    The result is marked safe so the envelope embeds it verbatim; all values
    inside it have already been escaped by this render.
    """
    days = [normalize_day(day) for day in params.days]
    return Markup(_environment.get_template("timesheet_days.xml").render(days=days))


def render_timesheet_save(
    auth: AuthParams,
    params: SaveTimesheetParams,
    transaction_id: str,
    clock: Callable[[], datetime],
) -> SoapRequest:
    """
    Render a timesheet save envelope.

    A did-not-work timesheet ignores its days and sends only the flag.
    Otherwise the days must not be empty.

    Raises:
        TimesheetValidationError: If there are no days to save
    """
    common = dict(
        auth=auth,
        transaction_id=transaction_id,
        user=params.user,
        tsid=params.tsid,
    )

    if params.did_not_work:
        return _render("timesheet_save_did_not_work.xml", TIMESHEET_SAVE, **common)

    if not params.days:
        raise TimesheetValidationError(
            f"Timesheet {params.tsid} has no days; mark it as did_not_work instead"
        )

    complete = None
    if params.submit:
        complete = submission_timestamp(params.submission_time, clock)

    return _render(
        "timesheet_save_full.xml",
        TIMESHEET_SAVE,
        date=timesheet_date(params.days),
        day_block=render_day_block(params),
        complete=complete,
        **common,
    )


def render_timesheet_submit(
    auth: AuthParams,
    params: SubmitTimesheetParams,
    transaction_id: str,
    clock: Callable[[], datetime],
) -> SoapRequest:
    """Render the envelope that submits an already saved timesheet."""
    return _render(
        "timesheet_submit.xml",
        TIMESHEET_SAVE,
        auth=auth,
        transaction_id=transaction_id,
        user=params.user,
        tsid=params.tsid,
        date=params.start_time.strftime(DATE_FORMAT),
        complete=submission_timestamp(params.submission_time, clock),
    )

"""
Mock transport that answers with canned Astute Payroll responses.
"""

from typing import Dict, List, Optional

from lxml import etree

from ..domain.models import TransportResponse

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"

MOCK_USERS = (
    "<users>"
    "<user><UID>1001</UID><user_id>jdoe</user_id><job_code>NURSE-01</job_code>"
    "<email>jane.doe@example.com</email></user>"
    "<user><UID>1002</UID><user_id>msmith</user_id><job_code>NURSE-02</job_code>"
    "<email>mark.smith@example.com</email></user>"
    "</users>"
)

MOCK_TIMESHEETS = (
    "<timesheets>"
    "<timesheet><TSID>50001</TSID><UID>1001</UID><user_id>jdoe</user_id>"
    "<date>2024-11-25</date><status>saved</status></timesheet>"
    "</timesheets>"
)

MOCK_SAVE_RESULT = "Timesheet saved TSID: 50001"


def build_results_envelope(operation_name: str, results_text: str) -> bytes:
    """
    Build a successful response envelope the way the service sends it.

    The results text is stored as element text, so any markup in it ends up
    escaped inside the envelope.
    """
    envelope = etree.Element(etree.QName(SOAP_ENV_NS, "Envelope"), nsmap={"SOAP-ENV": SOAP_ENV_NS})
    body = etree.SubElement(envelope, etree.QName(SOAP_ENV_NS, "Body"))
    response = etree.SubElement(body, f"{operation_name}Response")
    parms_out = etree.SubElement(response, "ParmsOut")
    results = etree.SubElement(parms_out, "Results")
    results.text = results_text
    return etree.tostring(envelope, xml_declaration=True, encoding="UTF-8")


def build_fault_envelope(fault_string: str, fault_code: str = "SOAP-ENV:Server") -> bytes:
    """Build a SOAP 1.1 fault response."""
    envelope = etree.Element(etree.QName(SOAP_ENV_NS, "Envelope"), nsmap={"SOAP-ENV": SOAP_ENV_NS})
    body = etree.SubElement(envelope, etree.QName(SOAP_ENV_NS, "Body"))
    fault = etree.SubElement(body, etree.QName(SOAP_ENV_NS, "Fault"))
    etree.SubElement(fault, "faultcode").text = fault_code
    etree.SubElement(fault, "faultstring").text = fault_string
    return etree.tostring(envelope, xml_declaration=True, encoding="UTF-8")


def default_responses() -> Dict[str, TransportResponse]:
    """Canned answers per remote operation."""
    return {
        "UserQuery": TransportResponse(200, build_results_envelope("UserQuery", MOCK_USERS)),
        "TimesheetQuery": TransportResponse(
            200, build_results_envelope("TimesheetQuery", MOCK_TIMESHEETS)
        ),
        "TimesheetSave": TransportResponse(
            200, build_results_envelope("TimesheetSave", MOCK_SAVE_RESULT)
        ),
    }


class MockTransport:
    """
    Transport that never touches the network.

    Answers are looked up by operation name; every request is recorded in
    ``calls`` so callers can inspect what would have been sent.
    """

    def __init__(self, responses: Optional[Dict[str, TransportResponse]] = None):
        """
        Initialize the mock transport.

        Args:
            responses: Answers keyed by operation name; defaults to canned sample data
        """
        self.responses = default_responses() if responses is None else responses
        self.calls: List[Dict[str, str]] = []

    def send(self, url: str, action_name: str, action_uri: str, body: str) -> TransportResponse:
        self.calls.append(
            {
                "url": url,
                "action_name": action_name,
                "action_uri": action_uri,
                "body": body,
            }
        )
        try:
            return self.responses[action_name]
        except KeyError:
            return TransportResponse(500, build_fault_envelope(f"Unknown operation {action_name}"))

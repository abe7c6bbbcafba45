"""
Response decoding for the Astute Payroll web service.

The service double-encodes its answers: the SOAP envelope carries the actual
result as an XML document serialized into the text of its ``Results``
element. Decoding therefore happens in two passes:

1. ``decode_envelope`` parses the outer envelope and returns the Results text
   (already unescaped by the XML parser).
2. ``decode_records`` parses that text a second time into flat records.

Elements are matched by local name so namespace prefixes chosen by the
service do not matter.
"""

import logging
from typing import Dict, List, Optional, Sequence, Type, TypeVar

from lxml import etree
from pydantic import BaseModel, ValidationError

from ..domain.exceptions import DecodeError, SaveRejectedError
from ..domain.responses import (
    QueryTimesheetResponse,
    QueryUserResponse,
    Timesheet,
    User,
)

logger = logging.getLogger(__name__)

TIMESHEET_ID_MARKER = "TSID:"

RecordModel = TypeVar("RecordModel", bound=BaseModel)


def _parse_xml(content: bytes, what: str, encoding: Optional[str] = None) -> etree._Element:
    """
    Parse untrusted XML without resolving entities or touching the network.

    When ``encoding`` is given it overrides any encoding the document declares.
    """
    parser = etree.XMLParser(encoding=encoding, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise DecodeError(f"Malformed {what}: {exc}") from exc
    return root


def _local_name(element: etree._Element) -> Optional[str]:
    # Comments and processing instructions have no usable tag
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _child(element: etree._Element, name: str) -> Optional[etree._Element]:
    for candidate in element:
        if _local_name(candidate) == name:
            return candidate
    return None


def _descend(root: etree._Element, path: Sequence[str], what: str) -> etree._Element:
    element = root
    for name in path:
        found = _child(element, name)
        if found is None:
            trail = "/".join([_local_name(root) or "?", *path])
            raise DecodeError(f"{what} has no {name} element (expected {trail})")
        element = found
    return element


def decode_envelope(content: bytes, operation_name: str) -> str:
    """
    First pass: extract the Results text from a successful response envelope.

    Args:
        content: Raw response body
        operation_name: Remote operation name, e.g. ``UserQuery``

    Returns:
        Text of Body/<operation>Response/ParmsOut/Results, empty if the element is empty

    Raises:
        DecodeError: If the body is not XML or lacks the expected elements
    """
    root = _parse_xml(content, f"{operation_name} response")
    results = _descend(
        root,
        ("Body", f"{operation_name}Response", "ParmsOut", "Results"),
        f"{operation_name} response",
    )
    text = results.text or ""
    logger.debug("Decoded %s envelope, results text is %d chars", operation_name, len(text))
    return text


def decode_fault(content: bytes) -> str:
    """
    Extract the fault string from a SOAP fault response.

    Raises:
        DecodeError: If the body is not a SOAP fault document
    """
    root = _parse_xml(content, "fault response")
    faultstring = _descend(root, ("Body", "Fault", "faultstring"), "Fault response")
    return faultstring.text or ""


def decode_records(text: str) -> List[Dict[str, str]]:
    """
    Second pass: parse the Results document into flat records.

    Each child of the document root is a record; the record's child elements
    become ``name -> text`` pairs.

    Raises:
        DecodeError: If the text is not an XML document
    """
    # The text is already decoded; its own encoding declaration no longer applies
    root = _parse_xml(text.encode("utf-8"), "results document", encoding="utf-8")

    records: List[Dict[str, str]] = []
    for record_element in root:
        if _local_name(record_element) is None:
            continue
        record: Dict[str, str] = {}
        for field_element in record_element:
            name = _local_name(field_element)
            if name is not None:
                record[name] = field_element.text or ""
        records.append(record)

    return records


def _build_records(text: str, model: Type[RecordModel]) -> List[RecordModel]:
    records = decode_records(text)
    try:
        return [model.model_validate(record) for record in records]
    except ValidationError as exc:
        raise DecodeError(f"Unexpected {model.__name__} record: {exc}") from exc


def decode_users(text: str) -> QueryUserResponse:
    """Decode the Results text of a user query."""
    return QueryUserResponse(users=_build_records(text, User))


def decode_timesheets(text: str) -> QueryTimesheetResponse:
    """Decode the Results text of a timesheet query."""
    return QueryTimesheetResponse(timesheets=_build_records(text, Timesheet))


def extract_timesheet_id(text: str) -> str:
    """
    Extract the timesheet identifier from a save result message.

    The service answers e.g. ``"Result: TSID: 98765"``; everything after the
    marker is the identifier.

    Raises:
        SaveRejectedError: If the message carries no identifier
    """
    _, marker, remainder = text.partition(TIMESHEET_ID_MARKER)
    if not marker:
        raise SaveRejectedError(text)
    return remainder.strip()

"""
Tests for the two-pass response decoder.
"""

import pytest

from astute.adapters.mock_transport import build_fault_envelope, build_results_envelope
from astute.domain.exceptions import DecodeError, SaveRejectedError
from astute.soap.decoder import (
    decode_envelope,
    decode_fault,
    decode_records,
    decode_timesheets,
    decode_users,
    extract_timesheet_id,
)

# Shaped like a real answer: the results document is escaped text
RAW_USER_QUERY_RESPONSE = b"""<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/" xmlns:ns1="urn:UserQuery">
<SOAP-ENV:Body>
<ns1:UserQueryResponse>
<ParmsOut>
<Results>&lt;users&gt;&lt;user&gt;&lt;UID&gt;7&lt;/UID&gt;&lt;user_id&gt;abc&lt;/user_id&gt;&lt;/user&gt;&lt;/users&gt;</Results>
</ParmsOut>
</ns1:UserQueryResponse>
</SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""


class TestDecodeEnvelope:
    """Tests for the outer decode pass."""

    def test_returns_results_text_unescaped(self):
        """The Results text is handed back exactly as the inner document."""
        content = build_results_envelope("UserQuery", "<Users><User><UID>1</UID></User></Users>")

        assert decode_envelope(content, "UserQuery") == "<Users><User><UID>1</UID></User></Users>"

    def test_namespaced_service_response(self):
        """Prefixes used by the service do not affect navigation."""
        text = decode_envelope(RAW_USER_QUERY_RESPONSE, "UserQuery")

        assert text == "<users><user><UID>7</UID><user_id>abc</user_id></user></users>"

    def test_empty_results(self):
        content = build_results_envelope("TimesheetSave", "")

        assert decode_envelope(content, "TimesheetSave") == ""

    def test_malformed_xml_raises(self):
        """Unparseable bodies are reported instead of yielding an empty result."""
        with pytest.raises(DecodeError, match="Malformed"):
            decode_envelope(b"<html><body>Bad gateway", "UserQuery")

    def test_empty_body_raises(self):
        with pytest.raises(DecodeError):
            decode_envelope(b"", "UserQuery")

    def test_unexpected_operation_raises(self):
        """An answer for another operation lacks the expected response element."""
        content = build_results_envelope("TimesheetQuery", "<timesheets/>")

        with pytest.raises(DecodeError, match="UserQueryResponse"):
            decode_envelope(content, "UserQuery")


class TestDecodeFault:
    """Tests for the fault decode path."""

    def test_returns_fault_string(self):
        content = build_fault_envelope("Invalid credentials")

        assert decode_fault(content) == "Invalid credentials"

    def test_fault_string_verbatim(self):
        """Escaped characters in the fault come back unescaped."""
        content = build_fault_envelope("Field <TSID> & <UID> mismatch")

        assert decode_fault(content) == "Field <TSID> & <UID> mismatch"

    def test_malformed_fault_raises(self):
        with pytest.raises(DecodeError):
            decode_fault(b"Internal Server Error")

    def test_non_fault_document_raises(self):
        content = build_results_envelope("UserQuery", "<users/>")

        with pytest.raises(DecodeError, match="Fault"):
            decode_fault(content)


class TestDecodeRecords:
    """Tests for the inner decode pass."""

    def test_single_user(self):
        """The inner document yields one record per child of its root."""
        result = decode_users("<Users><User><UID>1</UID></User></Users>")

        assert len(result.users) == 1
        assert result.users[0].uid == "1"

    def test_records_keep_all_fields(self):
        records = decode_records(
            "<users>"
            "<user><UID>1</UID><user_id>a</user_id><nameFirst>Ann</nameFirst></user>"
            "<user><UID>2</UID><user_id>b</user_id><job_code/></user>"
            "</users>"
        )

        assert records == [
            {"UID": "1", "user_id": "a", "nameFirst": "Ann"},
            {"UID": "2", "user_id": "b", "job_code": ""},
        ]

    def test_extra_fields_exposed(self):
        result = decode_users("<users><user><UID>1</UID><nameFirst>Ann</nameFirst></user></users>")

        assert result.users[0].model_extra == {"nameFirst": "Ann"}

    def test_empty_document(self):
        assert decode_users("<users/>").users == []

    def test_declared_encoding_ignored_for_decoded_text(self):
        """Non-ASCII values survive an inner document that declares a legacy encoding."""
        inner = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            "<users><user><UID>1</UID><name>José</name></user></users>"
        )
        text = decode_envelope(build_results_envelope("UserQuery", inner), "UserQuery")

        result = decode_users(text)

        assert result.users[0].model_extra["name"] == "José"

    def test_timesheets(self):
        result = decode_timesheets(
            "<timesheets><timesheet>"
            "<TSID>50001</TSID><UID>1001</UID><date>2024-11-25</date><status>saved</status>"
            "</timesheet></timesheets>"
        )

        timesheet = result.timesheets[0]
        assert timesheet.tsid == "50001"
        assert timesheet.uid == "1001"
        assert timesheet.date == "2024-11-25"
        assert timesheet.status == "saved"

    def test_malformed_inner_document_raises(self):
        with pytest.raises(DecodeError, match="results document"):
            decode_records("<users><user>")

    def test_plain_text_results_raise(self):
        with pytest.raises(DecodeError):
            decode_records("No records found")

    def test_record_missing_identifier_raises(self):
        with pytest.raises(DecodeError, match="User"):
            decode_users("<users><user><user_id>x</user_id></user></users>")


class TestExtractTimesheetId:
    """Tests for timesheet identifier extraction."""

    def test_identifier_after_marker(self):
        assert extract_timesheet_id("Result: TSID: 98765") == "98765"

    def test_prefix_length_does_not_matter(self):
        """Extraction relies on the marker, not on a fixed offset."""
        assert extract_timesheet_id("Timesheet saved successfully. TSID: 42") == "42"

    def test_missing_marker_raises_with_text(self):
        with pytest.raises(SaveRejectedError) as exc_info:
            extract_timesheet_id("Timesheet is locked")

        assert str(exc_info.value) == "Timesheet is locked"
        assert exc_info.value.response_text == "Timesheet is locked"

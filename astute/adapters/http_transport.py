"""
HTTP transport for the Astute Payroll SOAP endpoint.
"""

import logging

import requests

from ..domain.exceptions import TransportError
from ..domain.models import TransportResponse

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Posts rendered SOAP envelopes with ``requests``.

    Only the status code and body of the answer are handed back; interpreting
    them is up to the caller.
    """

    DEFAULT_TIMEOUT = 30

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        """
        Initialize the transport.

        Args:
            timeout: Seconds to wait for the service before giving up
            session: Optional requests session (a module-level request is used otherwise)
        """
        self.timeout = timeout
        self._http = session or requests

    def send(self, url: str, action_name: str, action_uri: str, body: str) -> TransportResponse:
        """
        Send one SOAP request.

        Args:
            url: Endpoint URL
            action_name: Remote operation name, used for logging
            action_uri: Value of the SOAPAction header
            body: Rendered envelope

        Returns:
            TransportResponse with status code and raw body

        Raises:
            TransportError: If the request could not be completed
        """
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": action_uri,
        }
        payload = body.encode("utf-8")
        logger.debug("POST %s action=%s (%d bytes)", url, action_name, len(payload))

        try:
            response = self._http.post(
                url,
                data=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Failed to call {action_name} at {url}: {e}") from e

        logger.debug(
            "%s answered with HTTP %d (%d bytes)",
            action_name,
            response.status_code,
            len(response.content),
        )
        return TransportResponse(status_code=response.status_code, content=response.content)

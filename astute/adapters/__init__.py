"""
Adapters layer - Transports to the Astute Payroll web service.
"""

from .http_transport import HttpTransport
from .mock_transport import MockTransport, build_fault_envelope, build_results_envelope

__all__ = ["HttpTransport", "MockTransport", "build_fault_envelope", "build_results_envelope"]

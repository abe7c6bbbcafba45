"""
Service layer orchestrating envelope rendering, transports and decoding.
"""

from .astute_client import AstuteClient, TransportProtocol

__all__ = ["AstuteClient", "TransportProtocol"]

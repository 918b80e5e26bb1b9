"""
Test fixtures package.

Provides builders for XML-RPC payloads and doubles for the Revive API.
"""

from .builders import WireRecordBuilder, xmlrpc_fault_body, xmlrpc_response_body
from .mocks import RpcRouter

__all__ = [
    "RpcRouter",
    "WireRecordBuilder",
    "xmlrpc_fault_body",
    "xmlrpc_response_body",
]

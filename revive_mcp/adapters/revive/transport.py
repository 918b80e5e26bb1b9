"""
XML-RPC transport for the Revive Adserver API.

One ``call`` is exactly one HTTP round trip. Encoding and decoding use the standard
library XML-RPC codec; the HTTP exchange goes through ``requests`` so timeouts, TLS
verification and headers are configured in one place.
"""

import logging
import xmlrpc.client
from typing import Any
from xml.parsers.expat import ExpatError

import requests

from revive_mcp.adapters.revive.errors import (
    ReviveFaultError,
    ReviveProtocolError,
    ReviveTransportError,
    ReviveValidationError,
)
from revive_mcp.core.logging_config import sanitize_params

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Revive Adserver MCP Client/1.0"


class XmlRpcTransport:
    """Executes XML-RPC method calls against a single Revive endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        verify_ssl: bool = True,
        http: requests.Session | None = None,
    ):
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.headers = {"Content-Type": "text/xml", "User-Agent": user_agent}
        self._http = http or requests.Session()

    def call(self, method: str, params: list | tuple = ()) -> Any:
        """Invoke ``method`` with positional ``params`` and return the decoded result.

        Raises:
            ReviveValidationError: params cannot be encoded (nothing is sent)
            ReviveTransportError: network failure, timeout or non-200 status
            ReviveFaultError: the server answered with an XML-RPC fault
            ReviveProtocolError: the body is not a single-value XML-RPC response
        """
        body = self._encode(method, params)

        logger.debug(f"XML-RPC call {method}({sanitize_params(method, params)}) -> {self.endpoint_url}")
        try:
            response = self._http.post(
                self.endpoint_url,
                data=body,
                headers=self.headers,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            raise ReviveTransportError(
                f"Request to Revive timed out after {self.timeout}s",
                {"method": method, "timeout": self.timeout},
            ) from e
        except requests.exceptions.RequestException as e:
            raise ReviveTransportError(
                f"Could not reach Revive at {self.endpoint_url}: {e}",
                {"method": method, "url": self.endpoint_url},
            ) from e

        if response.status_code != 200:
            raise ReviveTransportError(
                f"Revive returned HTTP {response.status_code} for {method}",
                {"method": method, "status_code": response.status_code, "reason": response.reason},
            )

        return self._decode(method, response.content)

    def list_methods(self) -> list[str]:
        """Return the method names the server advertises via ``system.listMethods``."""
        methods = self.call("system.listMethods")
        if not isinstance(methods, list | tuple):
            raise ReviveProtocolError(
                "system.listMethods did not return an array",
                {"response_type": type(methods).__name__},
            )
        return [str(name) for name in methods]

    def close(self) -> None:
        self._http.close()

    @staticmethod
    def _encode(method: str, params: list | tuple) -> bytes:
        try:
            return xmlrpc.client.dumps(tuple(params), methodname=method, encoding="utf-8").encode("utf-8")
        except (TypeError, OverflowError) as e:
            raise ReviveValidationError(
                f"Cannot encode parameters for {method}: {e}",
                {"method": method},
            ) from e

    @staticmethod
    def _decode(method: str, content: bytes) -> Any:
        try:
            values, _ = xmlrpc.client.loads(content, use_builtin_types=True)
        except xmlrpc.client.Fault as fault:
            raise ReviveFaultError(fault.faultString, fault.faultCode, {"method": method}) from fault
        except (ExpatError, xmlrpc.client.ResponseError, ValueError, IndexError, TypeError) as e:
            raise ReviveProtocolError(
                f"Malformed XML-RPC response for {method}: {e}",
                {"method": method},
            ) from e

        if len(values) != 1:
            raise ReviveProtocolError(
                f"XML-RPC response for {method} carried {len(values)} values, expected 1",
                {"method": method, "value_count": len(values)},
            )
        return values[0]

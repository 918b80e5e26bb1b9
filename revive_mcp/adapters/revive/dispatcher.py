"""Authenticated call dispatch: session injection and the retry-once policy."""

import logging
from typing import Any

from revive_mcp.adapters.revive.errors import ReviveError, is_authentication_failure
from revive_mcp.adapters.revive.session import SessionManager
from revive_mcp.adapters.revive.transport import XmlRpcTransport

logger = logging.getLogger(__name__)


class AuthenticatedDispatcher:
    """Runs ``<Service>.<method>`` calls with the current session id as first parameter.

    A call rejected with an authentication-failure signature is retried exactly once
    after a forced logon. Whatever the retry raises propagates unchanged.
    """

    def __init__(self, session_manager: SessionManager, transport: XmlRpcTransport):
        self.session_manager = session_manager
        self.transport = transport

    def invoke(self, service: str, method: str, params: list | tuple = ()) -> Any:
        method_name = f"{service}.{method}"
        session = self.session_manager.ensure_valid()
        try:
            return self.transport.call(method_name, [session.credential, *params])
        except ReviveError as e:
            if not is_authentication_failure(e):
                raise
            logger.info(f"Revive rejected the session on {method_name}, re-authenticating once: {e}")

        self.session_manager.invalidate()
        session = self.session_manager.ensure_valid()
        return self.transport.call(method_name, [session.credential, *params])

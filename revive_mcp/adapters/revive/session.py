"""Session management for the Revive XML-RPC API.

Revive's XML-RPC services are session based: ``LogonXmlRpcService.logon`` hands out
a session id that every other call takes as its first parameter. The manager holds
at most one session and replaces it lazily when it goes stale.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from revive_mcp.adapters.revive.errors import ReviveAuthenticationError, ReviveError
from revive_mcp.adapters.revive.normalizer import parse_int

if TYPE_CHECKING:
    from revive_mcp.adapters.revive.transport import XmlRpcTransport

logger = logging.getLogger(__name__)

LOGON_METHOD = "LogonXmlRpcService.logon"
LOGOFF_METHOD = "LogonXmlRpcService.logoff"

DEFAULT_SESSION_LIFETIME = timedelta(hours=24)

_CREDENTIAL_KEYS = ("sessionId", "sessionID", "session_id")
_LIFETIME_KEYS = ("lifetime", "expiresIn", "expires_in")


@dataclass(frozen=True)
class ReviveSession:
    """A session credential and the moment it stops being usable."""

    credential: str
    expires_at: datetime | None = None

    def is_valid(self, now: datetime | None = None) -> bool:
        if not self.credential:
            return False
        if self.expires_at is None:
            return True
        return (now or datetime.now(UTC)) < self.expires_at


class SessionManager:
    """Owns the single Revive session of one client.

    States: no session -> valid session -> stale session. ``ensure_valid`` moves any
    state to "valid" (or raises), ``invalidate`` moves any state to "no session".
    """

    def __init__(
        self,
        transport: "XmlRpcTransport",
        username: str,
        password: str,
        default_lifetime: timedelta = DEFAULT_SESSION_LIFETIME,
    ):
        self.transport = transport
        self.username = username
        self.password = password
        self.default_lifetime = default_lifetime
        self._session: ReviveSession | None = None

    @property
    def session(self) -> ReviveSession | None:
        return self._session

    @property
    def session_id(self) -> str | None:
        return self._session.credential if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.is_valid()

    def ensure_valid(self) -> ReviveSession:
        """Return a usable session, logging on when none is held or the held one is stale."""
        if self._session is not None and self._session.is_valid():
            return self._session
        if self._session is not None:
            logger.info("Revive session expired, authenticating again")
        return self._authenticate()

    def invalidate(self) -> None:
        if self._session is not None:
            logger.debug("Invalidating Revive session")
        self._session = None

    def logout(self) -> None:
        """End the remote session if one is held. The local session is always cleared."""
        if self._session is None:
            return
        credential = self._session.credential
        self._session = None
        try:
            self.transport.call(LOGOFF_METHOD, [credential])
            logger.info("Logged off from Revive")
        except ReviveError as e:
            logger.warning(f"Revive logoff failed: {e}")

    def _authenticate(self) -> ReviveSession:
        """Log on to Revive and store the new session."""
        logger.info(f"Authenticating with Revive as {self.username}")
        try:
            response = self.transport.call(LOGON_METHOD, [self.username, self.password])
        except ReviveAuthenticationError:
            raise
        except ReviveError as e:
            logger.error(f"Revive authentication error: {e}")
            raise ReviveAuthenticationError(f"Authentication failed: {e}", {"cause": e.to_dict()}) from e

        credential, lifetime = self._parse_logon_response(response)
        if not credential:
            raise ReviveAuthenticationError(
                "Authentication failed: logon response carried no session id",
                {"response_type": type(response).__name__},
            )

        now = datetime.now(UTC)
        expires_at = now + (timedelta(seconds=lifetime) if lifetime else self.default_lifetime)
        self._session = ReviveSession(credential=credential, expires_at=expires_at)
        logger.info("Successfully authenticated with Revive")
        return self._session

    @staticmethod
    def _parse_logon_response(response: Any) -> tuple[str | None, int | None]:
        """Extract (credential, lifetime seconds) from the logon response shapes Revive uses."""
        credential: Any = None
        lifetime: Any = None
        if isinstance(response, str):
            credential = response
        elif isinstance(response, Mapping):
            credential = next((response[k] for k in _CREDENTIAL_KEYS if response.get(k)), None)
            lifetime = next((response[k] for k in _LIFETIME_KEYS if response.get(k) is not None), None)
        elif isinstance(response, list | tuple) and response:
            credential = response[0]
            lifetime = response[1] if len(response) > 1 else None

        if credential is not None and not isinstance(credential, str):
            credential = str(credential)
        seconds = parse_int(lifetime, None)
        return (credential or None), (seconds if seconds and seconds > 0 else None)

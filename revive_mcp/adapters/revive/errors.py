"""
Error handling for the Revive Adserver XML-RPC adapter.

This module provides:
- Structured exception hierarchy
- Mapping of low-level exceptions onto that hierarchy
- Detection of authentication-failure signatures for the retry-once policy
"""

import logging
import re
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ReviveErrorType(Enum):
    """Categorized error types for Revive operations."""

    AUTHENTICATION = "authentication_error"
    TRANSPORT = "transport_error"
    PROTOCOL = "protocol_error"
    REMOTE_FAULT = "remote_fault"
    VALIDATION = "validation_error"
    UNKNOWN = "unknown_error"


class ReviveError(Exception):
    """Base exception for all Revive adapter errors."""

    def __init__(
        self,
        message: str,
        error_type: ReviveErrorType = ReviveErrorType.UNKNOWN,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}
        self.recoverable = recoverable
        self.timestamp = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/monitoring."""
        return {
            "error_type": self.error_type.value,
            "message": str(self),
            "details": self.details,
            "recoverable": self.recoverable,
            "timestamp": self.timestamp.isoformat(),
        }


class ReviveAuthenticationError(ReviveError):
    """Raised when logging on to Revive fails. Never retried."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ReviveErrorType.AUTHENTICATION, details, recoverable=False)


class ReviveTransportError(ReviveError):
    """Raised for network failures, timeouts and non-200 HTTP responses."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ReviveErrorType.TRANSPORT, details, recoverable=False)

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")


class ReviveProtocolError(ReviveError):
    """Raised when the response body is not a usable XML-RPC response."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ReviveErrorType.PROTOCOL, details, recoverable=False)


class ReviveFaultError(ReviveError):
    """Raised when the server answers with an XML-RPC fault."""

    def __init__(self, fault_string: str, fault_code: int | None = None, details: dict[str, Any] | None = None):
        details = dict(details or {})
        details.setdefault("fault_code", fault_code)
        super().__init__(fault_string, ReviveErrorType.REMOTE_FAULT, details, recoverable=False)
        self.fault_code = fault_code
        self.fault_string = fault_string


class ReviveValidationError(ReviveError):
    """Raised when caller input violates a documented constraint. Raised before any network call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ReviveErrorType.VALIDATION, details, recoverable=False)


# Fault strings Revive uses for a missing, expired or foreign session
AUTH_FAILURE_PATTERN = re.compile(
    r"authenticat|session (id )?(is )?(invalid|expired|not valid)|invalid session|not logged in",
    re.IGNORECASE,
)


def is_authentication_failure(error: BaseException) -> bool:
    """Return True when an RPC failure means the session credential was rejected.

    Matches XML-RPC faults whose fault string looks like a session/auth problem,
    and HTTP 401 responses surfaced by the transport.
    """
    if isinstance(error, ReviveFaultError):
        return bool(AUTH_FAILURE_PATTERN.search(error.fault_string or ""))
    if isinstance(error, ReviveTransportError):
        return error.status_code == 401
    return False


def map_pydantic_error(exception: Exception, model_name: str) -> ReviveValidationError:
    """Map a pydantic ValidationError raised while parsing caller arguments.

    Args:
        exception: The pydantic ValidationError
        model_name: Name of the argument model, for the message

    Returns:
        ReviveValidationError with one line per failing field
    """
    problems: list[str] = []
    errors = getattr(exception, "errors", None)
    if callable(errors):
        for err in errors():
            location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
            problems.append(f"{location}: {err.get('msg', 'invalid value')}")
    if not problems:
        problems.append(str(exception))
    return ReviveValidationError(
        f"Invalid {model_name}: " + "; ".join(problems),
        {"model": model_name, "problems": problems},
    )

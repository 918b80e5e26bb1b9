"""Tests for session injection and the retry-once policy."""

from datetime import timedelta

import pytest
from freezegun import freeze_time

from revive_mcp.adapters.revive.dispatcher import AuthenticatedDispatcher
from revive_mcp.adapters.revive.errors import (
    ReviveAuthenticationError,
    ReviveFaultError,
    ReviveProtocolError,
    ReviveTransportError,
    is_authentication_failure,
)
from revive_mcp.adapters.revive.session import LOGON_METHOD, SessionManager

pytestmark = pytest.mark.unit


class ScriptedTransport:
    """Answers logons with sess-1, sess-2, ... and RPCs from a script."""

    def __init__(self, rpc_outcomes):
        self.rpc_outcomes = list(rpc_outcomes)
        self.logons = 0
        self.rpc_calls = []

    def call(self, method, params=()):
        if method == LOGON_METHOD:
            self.logons += 1
            return f"sess-{self.logons}"
        self.rpc_calls.append((method, list(params)))
        outcome = self.rpc_outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _dispatcher(transport):
    session_manager = SessionManager(transport, "admin", "secret")
    return AuthenticatedDispatcher(session_manager, transport), session_manager


class TestInvoke:
    def test_first_call_logs_on_then_calls(self):
        transport = ScriptedTransport([{"zoneId": 7}])
        dispatcher, _ = _dispatcher(transport)

        result = dispatcher.invoke("ZoneXmlRpcService", "getZone", [7])

        assert result == {"zoneId": 7}
        assert transport.logons == 1
        assert transport.rpc_calls == [("ZoneXmlRpcService.getZone", ["sess-1", 7])]

    def test_valid_session_means_zero_logons(self):
        transport = ScriptedTransport(["a", "b"])
        dispatcher, _ = _dispatcher(transport)
        dispatcher.invoke("ZoneXmlRpcService", "getZone", [1])
        logons_before = transport.logons

        dispatcher.invoke("ZoneXmlRpcService", "getZone", [2])

        assert transport.logons == logons_before
        assert len(transport.rpc_calls) == 2

    def test_stale_session_means_one_logon_and_one_rpc(self):
        transport = ScriptedTransport(["a", "b"])
        dispatcher, _ = _dispatcher(transport)

        with freeze_time("2025-01-01") as frozen:
            dispatcher.invoke("ZoneXmlRpcService", "getZone", [1])
            frozen.tick(timedelta(hours=25))
            dispatcher.invoke("ZoneXmlRpcService", "getZone", [2])

        assert transport.logons == 2
        assert transport.rpc_calls[1] == ("ZoneXmlRpcService.getZone", ["sess-2", 2])

    def test_auth_failure_reauthenticates_and_retries_once(self):
        transport = ScriptedTransport([ReviveFaultError("Session ID is invalid", 3), {"zoneId": 7}])
        dispatcher, session_manager = _dispatcher(transport)

        result = dispatcher.invoke("ZoneXmlRpcService", "getZone", [7])

        assert result == {"zoneId": 7}
        assert transport.logons == 2
        assert transport.rpc_calls == [
            ("ZoneXmlRpcService.getZone", ["sess-1", 7]),
            ("ZoneXmlRpcService.getZone", ["sess-2", 7]),
        ]
        assert session_manager.session_id == "sess-2"

    def test_http_401_counts_as_auth_failure(self):
        transport = ScriptedTransport([ReviveTransportError("HTTP 401", {"status_code": 401}), True])
        dispatcher, _ = _dispatcher(transport)

        assert dispatcher.invoke("BannerXmlRpcService", "modifyBanner", [{}]) is True
        assert transport.logons == 2

    def test_second_auth_failure_propagates_unchanged(self):
        second = ReviveFaultError("Session expired", 3)
        transport = ScriptedTransport([ReviveFaultError("Session ID is invalid", 3), second])
        dispatcher, _ = _dispatcher(transport)

        with pytest.raises(ReviveFaultError) as exc_info:
            dispatcher.invoke("ZoneXmlRpcService", "getZone", [7])

        assert exc_info.value is second
        assert len(transport.rpc_calls) == 2
        assert transport.logons == 2

    @pytest.mark.parametrize(
        "error",
        [
            ReviveFaultError("Unknown zoneId Error", 3),
            ReviveTransportError("HTTP 500", {"status_code": 500}),
            ReviveProtocolError("Malformed XML-RPC response"),
        ],
    )
    def test_non_auth_failure_is_not_retried(self, error):
        transport = ScriptedTransport([error])
        dispatcher, _ = _dispatcher(transport)

        with pytest.raises(type(error)) as exc_info:
            dispatcher.invoke("ZoneXmlRpcService", "getZone", [7])

        assert exc_info.value is error
        assert len(transport.rpc_calls) == 1
        assert transport.logons == 1

    def test_logon_failure_during_retry_propagates(self, mock_transport):
        mock_transport.call.side_effect = [
            "sess-1",
            ReviveFaultError("Session ID is invalid", 3),
            ReviveFaultError("Username or password is not correct", 801),
        ]
        dispatcher = AuthenticatedDispatcher(SessionManager(mock_transport, "admin", "secret"), mock_transport)

        with pytest.raises(ReviveAuthenticationError):
            dispatcher.invoke("ZoneXmlRpcService", "getZone", [7])

        assert mock_transport.call.call_count == 3


class TestAuthFailureSignature:
    @pytest.mark.parametrize(
        "message",
        [
            "Session ID is invalid",
            "session expired",
            "Session is not valid",
            "Invalid session",
            "User not logged in",
            "Authentication required",
            "Not authenticated",
        ],
    )
    def test_matching_faults(self, message):
        assert is_authentication_failure(ReviveFaultError(message, 3))

    @pytest.mark.parametrize("message", ["Unknown campaignId Error", "Field 'zoneName' is required", ""])
    def test_other_faults(self, message):
        assert not is_authentication_failure(ReviveFaultError(message, 3))

    def test_only_401_transport_errors(self):
        assert is_authentication_failure(ReviveTransportError("x", {"status_code": 401}))
        assert not is_authentication_failure(ReviveTransportError("x", {"status_code": 403}))
        assert not is_authentication_failure(ReviveProtocolError("x"))
        assert not is_authentication_failure(ValueError("authentication"))

"""Tests for the Revive session state machine."""

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from revive_mcp.adapters.revive.errors import (
    ReviveAuthenticationError,
    ReviveFaultError,
    ReviveTransportError,
)
from revive_mcp.adapters.revive.session import LOGOFF_METHOD, LOGON_METHOD, ReviveSession, SessionManager

pytestmark = pytest.mark.unit


class TestReviveSession:
    def test_session_without_expiry_is_valid(self):
        assert ReviveSession("abc").is_valid()

    def test_empty_credential_is_never_valid(self):
        assert not ReviveSession("", expires_at=None).is_valid()

    def test_expiry_boundary(self):
        expires = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
        session = ReviveSession("abc", expires_at=expires)
        assert session.is_valid(expires - timedelta(seconds=1))
        assert not session.is_valid(expires)


class TestEnsureValid:
    def test_first_use_authenticates(self, session_manager, mock_transport):
        mock_transport.call.return_value = "sess-1"

        session = session_manager.ensure_valid()

        assert session.credential == "sess-1"
        mock_transport.call.assert_called_once_with(LOGON_METHOD, ["admin", "secret"])
        assert session_manager.is_authenticated
        assert session_manager.session_id == "sess-1"

    def test_valid_session_is_reused(self, session_manager, mock_transport):
        mock_transport.call.return_value = "sess-1"
        session_manager.ensure_valid()
        session_manager.ensure_valid()
        session_manager.ensure_valid()

        assert mock_transport.call.call_count == 1

    def test_stale_session_is_replaced(self, session_manager, mock_transport):
        mock_transport.call.side_effect = ["sess-1", "sess-2"]

        with freeze_time("2025-01-01 00:00:00") as frozen:
            assert session_manager.ensure_valid().credential == "sess-1"
            frozen.tick(timedelta(hours=23, minutes=59))
            assert session_manager.ensure_valid().credential == "sess-1"
            frozen.tick(timedelta(minutes=1))
            assert session_manager.ensure_valid().credential == "sess-2"

        assert mock_transport.call.call_count == 2

    @freeze_time("2025-01-01 00:00:00")
    def test_default_lifetime_is_24_hours(self, session_manager, mock_transport):
        mock_transport.call.return_value = "sess-1"

        session = session_manager.ensure_valid()

        assert session.expires_at == datetime(2025, 1, 2, tzinfo=UTC)

    @freeze_time("2025-01-01 00:00:00")
    def test_configured_default_lifetime(self, mock_transport):
        manager = SessionManager(mock_transport, "admin", "secret", default_lifetime=timedelta(minutes=30))
        mock_transport.call.return_value = "sess-1"

        assert manager.ensure_valid().expires_at == datetime(2025, 1, 1, 0, 30, tzinfo=UTC)

    def test_invalidate_forces_new_logon(self, session_manager, mock_transport):
        mock_transport.call.side_effect = ["sess-1", "sess-2"]
        session_manager.ensure_valid()

        session_manager.invalidate()

        assert session_manager.session is None
        assert not session_manager.is_authenticated
        assert session_manager.ensure_valid().credential == "sess-2"


class TestLogonResponseShapes:
    @freeze_time("2025-01-01 00:00:00")
    @pytest.mark.parametrize(
        "response,credential,lifetime",
        [
            ("plain-id", "plain-id", timedelta(hours=24)),
            ({"sessionId": "s1", "lifetime": 600}, "s1", timedelta(seconds=600)),
            ({"sessionID": "s2"}, "s2", timedelta(hours=24)),
            ({"session_id": "s3", "expires_in": "120"}, "s3", timedelta(seconds=120)),
            (["s4", 3600], "s4", timedelta(hours=1)),
            (("s5",), "s5", timedelta(hours=24)),
            ({"sessionId": "s6", "expiresIn": 0}, "s6", timedelta(hours=24)),
        ],
    )
    def test_supported_shapes(self, session_manager, mock_transport, response, credential, lifetime):
        mock_transport.call.return_value = response

        session = session_manager.ensure_valid()

        assert session.credential == credential
        assert session.expires_at == datetime(2025, 1, 1, tzinfo=UTC) + lifetime

    @pytest.mark.parametrize("response", ["", {}, {"sessionId": ""}, [], 0, None])
    def test_missing_credential_is_an_authentication_error(self, session_manager, mock_transport, response):
        mock_transport.call.return_value = response

        with pytest.raises(ReviveAuthenticationError, match="no session id"):
            session_manager.ensure_valid()

        assert session_manager.session is None


class TestAuthenticationFailures:
    def test_bad_credentials_fault(self, session_manager, mock_transport):
        mock_transport.call.side_effect = ReviveFaultError("Username or password is not correct", 801)

        with pytest.raises(ReviveAuthenticationError) as exc_info:
            session_manager.ensure_valid()

        assert "Username or password is not correct" in str(exc_info.value)
        assert exc_info.value.details["cause"]["error_type"] == "remote_fault"
        assert mock_transport.call.call_count == 1

    def test_unreachable_host(self, session_manager, mock_transport):
        mock_transport.call.side_effect = ReviveTransportError("Could not reach Revive")

        with pytest.raises(ReviveAuthenticationError):
            session_manager.ensure_valid()

        assert not session_manager.is_authenticated


class TestLogout:
    def test_logout_calls_logoff_and_clears(self, session_manager, mock_transport):
        mock_transport.call.return_value = "sess-1"
        session_manager.ensure_valid()
        mock_transport.call.reset_mock()
        mock_transport.call.return_value = True

        session_manager.logout()

        mock_transport.call.assert_called_once_with(LOGOFF_METHOD, ["sess-1"])
        assert session_manager.session is None

    def test_logout_failure_still_clears(self, session_manager, mock_transport, caplog):
        mock_transport.call.return_value = "sess-1"
        session_manager.ensure_valid()
        mock_transport.call.side_effect = ReviveTransportError("connection reset")

        session_manager.logout()

        assert session_manager.session is None
        assert "Revive logoff failed" in caplog.text

    def test_logout_without_session_is_a_no_op(self, session_manager, mock_transport):
        session_manager.logout()

        mock_transport.call.assert_not_called()

"""Tests for logging setup and secret masking."""

import json
import logging
import sys

import pytest

from revive_mcp.core.logging_config import MASK, JSONFormatter, sanitize_params, setup_logging

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)
    for name in ["uvicorn", "uvicorn.access", "uvicorn.error", "fastmcp"]:
        lib_logger = logging.getLogger(name)
        lib_logger.handlers = []
        lib_logger.propagate = True


class TestSanitizeParams:
    def test_logon_keeps_username_masks_password(self):
        assert sanitize_params("LogonXmlRpcService.logon", ["admin", "secret"]) == ["admin", MASK]

    def test_session_id_is_masked(self):
        params = sanitize_params("ZoneXmlRpcService.getZone", ["a1b2c3", 7])
        assert params == [MASK, 7]

    def test_sensitive_struct_keys_are_masked(self):
        params = sanitize_params(
            "AdvertiserXmlRpcService.addAdvertiser",
            ["sess", {"advertiserName": "Acme", "password": "hunter2", "nested": [{"token": "t"}]}],
        )
        assert params == [MASK, {"advertiserName": "Acme", "password": MASK, "nested": [{"token": MASK}]}]

    def test_system_methods_carry_no_session(self):
        assert sanitize_params("system.listMethods", []) == []
        assert sanitize_params("system.methodHelp", ["ZoneXmlRpcService.getZone"]) == ["ZoneXmlRpcService.getZone"]

    def test_does_not_mutate_input(self):
        params = ["sess", {"password": "p"}]
        sanitize_params("PublisherXmlRpcService.modifyPublisher", params)
        assert params == ["sess", {"password": "p"}]


class TestJSONFormatter:
    def _record(self, **extra):
        record = logging.LogRecord("revive_mcp.test", logging.WARNING, __file__, 10, "hello %s", ("world",), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_single_line_json(self):
        line = JSONFormatter().format(self._record())

        assert "\n" not in line
        entry = json.loads(line)
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "revive_mcp.test"
        assert entry["message"] == "hello world"
        assert "extra" not in entry

    def test_extra_fields_are_masked(self):
        entry = json.loads(JSONFormatter().format(self._record(tool="revive_zone_list", credential="abc")))

        assert entry["extra"] == {"tool": "revive_zone_list", "credential": MASK}

    def test_exception_is_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = self._record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in entry["exception"]


class TestSetupLogging:
    def test_development_uses_plain_text(self, restore_root_logger):
        setup_logging("debug")

        assert restore_root_logger.level == logging.DEBUG
        assert not any(isinstance(h.formatter, JSONFormatter) for h in restore_root_logger.handlers)

    def test_production_uses_json_on_stderr(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("PRODUCTION", "true")

        setup_logging("WARNING")

        [handler] = restore_root_logger.handlers
        assert isinstance(handler.formatter, JSONFormatter)
        assert handler.stream is sys.stderr
        assert restore_root_logger.level == logging.WARNING
        assert logging.getLogger("fastmcp").propagate is False

    def test_environment_production_uses_json(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        setup_logging()

        [handler] = restore_root_logger.handlers
        assert isinstance(handler.formatter, JSONFormatter)

    def test_level_from_environment(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        setup_logging()

        assert restore_root_logger.level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging("chatty")

        assert restore_root_logger.level == logging.INFO

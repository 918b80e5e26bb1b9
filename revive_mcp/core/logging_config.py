"""Logging configuration for the Revive Adserver MCP server.

Supports two modes:
- Production: JSON format for log aggregation
- Development: Human-readable format

Logs always go to stderr; stdout belongs to the stdio MCP transport.
"""

import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from revive_mcp.core.config import is_production

MASK = "***"

# Struct keys whose values never reach the logs
SENSITIVE_KEYS = {"password", "api_password", "sessionid", "session_id", "credential", "token"}

# Methods whose positional parameters are (username, password) / (session id,)
_LOGON_METHODS = {"LogonXmlRpcService.logon"}
_UNAUTHENTICATED_PREFIXES = ("system.",)

# Standard LogRecord attributes, excluded from the JSON "extra" block
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "exc_info",
    "exc_text",
    "thread",
    "threadName",
    "taskName",
    "message",
}


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production environments.

    Outputs single-line JSON that log aggregators handle correctly.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Non-standard attributes passed via extra={}
        extra_fields = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra_fields:
            log_entry["extra"] = _mask_struct(extra_fields)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once at start-up.

    Args:
        level: Log level name; falls back to LOG_LEVEL, then INFO
    """
    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if is_production():
        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        root_logger.addHandler(handler)

        # Library loggers that install their own handlers
        for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error", "fastmcp"]:
            lib_logger = logging.getLogger(logger_name)
            lib_logger.handlers = []
            lib_logger.addHandler(handler)
            lib_logger.propagate = False

        logging.info("JSON structured logging enabled for production")
    else:
        # force=True ensures configuration is applied even if logging was already configured
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
            force=True,
        )


def _mask_struct(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: MASK if str(k).lower() in SENSITIVE_KEYS else _mask_struct(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_mask_struct(item) for item in value]
    return value


def sanitize_params(method: str, params: Sequence[Any]) -> list[Any]:
    """Return a copy of XML-RPC params that is safe to log.

    The password of a logon call and the session id leading every authenticated call
    are masked, as are sensitive keys inside structs.
    """
    params = list(params)
    if method in _LOGON_METHODS:
        return [params[0], *[MASK for _ in params[1:]]] if params else []
    if method.startswith(_UNAUTHENTICATED_PREFIXES):
        return _mask_struct(params)
    if params:
        return [MASK, *_mask_struct(params[1:])]
    return []

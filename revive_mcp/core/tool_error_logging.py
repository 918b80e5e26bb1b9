"""Centralized error logging for MCP tools.

This module provides a decorator that wraps MCP tools to log their duration and
any exception they raise, so failures are visible in the server logs.
"""

import functools
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any

from fastmcp.exceptions import ToolError

from revive_mcp.adapters.revive.errors import ReviveError

logger = logging.getLogger(__name__)


def extract_error_info(error: Exception) -> tuple[str, str]:
    """Extract error code and message from an exception.

    ReviveError carries its own category. For ToolError, attempts to parse the
    structured ``ToolError("CODE", "message")`` format. Falls back to the exception
    type as code and str(error) as message.

    Args:
        error: The exception to extract info from

    Returns:
        Tuple of (error_code, error_message)
    """
    if isinstance(error, ReviveError):
        return error.error_type.value.upper(), str(error)
    if isinstance(error, ToolError):
        if error.args:
            first_arg = str(error.args[0])
            is_error_code = (
                len(first_arg) <= 50
                and first_arg.isupper()
                and " " not in first_arg
                and first_arg.replace("_", "").isalnum()
            )
            if is_error_code and len(error.args) > 1:
                return first_arg, str(error.args[1])
        return "TOOL_ERROR", str(error)
    return type(error).__name__, str(error)


def _log_tool_error(tool_name: str, error: Exception, duration_ms: float) -> None:
    error_code, error_message = extract_error_info(error)
    logger.error(
        f"Tool {tool_name} failed after {duration_ms:.1f}ms: [{error_code}] {error_message}",
        extra={"tool": tool_name, "error_code": error_code, "duration_ms": round(duration_ms, 1)},
    )


def with_error_logging(tool_func: Callable) -> Callable:
    """Decorator to add centralized error logging to an MCP tool.

    The error is logged and then re-raised so MCP handles it normally.

    Usage:
        mcp.tool()(with_error_logging(my_tool))

    Args:
        tool_func: The tool function to wrap

    Returns:
        Wrapped function with error logging
    """
    tool_name = tool_func.__name__

    if inspect.iscoroutinefunction(tool_func):

        @functools.wraps(tool_func)
        async def async_wrapper(*args, **kwargs) -> Any:
            started = time.perf_counter()
            try:
                result = await tool_func(*args, **kwargs)
            except Exception as e:
                _log_tool_error(tool_name, e, (time.perf_counter() - started) * 1000)
                raise
            logger.debug(f"Tool {tool_name} completed in {(time.perf_counter() - started) * 1000:.1f}ms")
            return result

        return async_wrapper

    @functools.wraps(tool_func)
    def sync_wrapper(*args, **kwargs) -> Any:
        started = time.perf_counter()
        try:
            result = tool_func(*args, **kwargs)
        except Exception as e:
            _log_tool_error(tool_name, e, (time.perf_counter() - started) * 1000)
            raise
        logger.debug(f"Tool {tool_name} completed in {(time.perf_counter() - started) * 1000:.1f}ms")
        return result

    return sync_wrapper

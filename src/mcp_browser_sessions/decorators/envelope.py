# mcp_browser_sessions/decorators/envelope.py

import os
import json
import asyncio
import inspect
import datetime
import functools
import traceback
from typing import Any, Callable

from ..errors import BrowserSessionsError

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "tool_envelope",
    "error_payload",
]


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except Exception:
            return value.decode("utf-8", "replace")
    try:
        return json.dumps(value, ensure_ascii=False, default=lambda o: getattr(o, "__dict__", repr(o)))
    except Exception:
        # Fallback to a best-effort string
        try:
            return str(value)
        except Exception:
            return ""


def error_payload(err: Exception, include_tb: bool = False) -> dict:
    """
    Uniform failure result.

    Known errors (BrowserSessionsError subclasses) report their code and
    message only; anything else is an internal error and may carry a traceback.
    """
    known = isinstance(err, BrowserSessionsError)
    payload = {
        "ok": False,
        "summary": str(err) if known else f"{err.__class__.__name__}: {err}",
        "error": {
            "code": err.code if known else "internal_error",
            "type": err.__class__.__name__,
            "message": str(err),
        },
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    if include_tb and not known:
        payload["error"]["traceback"] = traceback.format_exc()
    return payload


def tool_envelope(func: Callable):
    """
    Minimal decorator for MCP tool functions:
      - Works with both async and sync callables.
      - On success: ensures the return value is a string (json.dumps for non-strings).
      - On error: returns a uniform JSON string with an error code and summary.
    Environment:
      - Set MBS_TOOL_ERRORS_TRACEBACK=1 to include tracebacks for unexpected errors.
    """
    include_tb = os.getenv("MBS_TOOL_ERRORS_TRACEBACK", "0") in ("1", "true", "True")

    def _fail(err: Exception) -> str:
        if isinstance(err, BrowserSessionsError):
            logger.warning(f"{func.__name__} failed: {err}")
        else:
            logger.exception(f"{func.__name__} raised an unexpected error")
        return json.dumps(error_payload(err, include_tb), ensure_ascii=False)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                # Preserve cooperative cancellation semantics
                raise
            except Exception as e:
                return _fail(e)
            return _normalize(result)
        return wrapper
    else:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                return _fail(e)
            return _normalize(result)
        return wrapper

"""
Tool dispatch boundary.

Every tool is either a session-management tool, which operates on the
SessionManager directly, or a session-scoped tool, which needs a
``session_id`` and runs its browser action through
SessionManager.with_session(). Session-scoped calls without a session id
fail here, before the manager is touched.
"""

import asyncio
from typing import Any, Callable, Optional

from .errors import BrowserSessionsError, InvalidArgumentError, ToolError
from .sessions.manager import SessionManager
from .utils.diagnostics import collect_diagnostics

import logging
logger = logging.getLogger(__name__)


SESSION_MANAGEMENT = "session_management"
SESSION_SCOPED = "session_scoped"

SESSION_MANAGEMENT_TOOLS = frozenset({
    "create_session",
    "list_sessions",
    "close_session",
    "get_session_info",
})


def classify(tool_name: str) -> str:
    """Return SESSION_MANAGEMENT or SESSION_SCOPED for a tool name."""
    return SESSION_MANAGEMENT if tool_name in SESSION_MANAGEMENT_TOOLS else SESSION_SCOPED


def require_session_id(session_id: Optional[str], tool: Optional[str] = None) -> str:
    """Fail fast on a missing/blank session id."""
    if not isinstance(session_id, str) or not session_id.strip():
        where = f" for '{tool}'" if tool else ""
        raise InvalidArgumentError(
            f"session_id is required{where}. Call 'create_session' first and pass the returned session_id."
        )
    return session_id.strip()


def run_session_action(
    manager: SessionManager,
    session_id: str,
    action: Callable[..., dict],
    /,
    tool: Optional[str] = None,
    **params: Any,
) -> dict:
    """
    Run action(driver, **params) with exclusive access to the session's browser.

    Session errors (unknown id, browser failed to start, bad arguments)
    propagate. Failures of the action itself, ToolError included, come back
    as an ``ok: False`` result carrying diagnostics.
    """
    session_id = require_session_id(session_id, tool)

    def _work(handle):
        driver = handle.driver
        try:
            return action(driver, **params)
        except Exception as e:
            if isinstance(e, BrowserSessionsError) and not isinstance(e, ToolError):
                raise
            logger.error(f"{tool or getattr(action, '__name__', 'action')} failed in session {session_id}: {e}")
            return {
                "ok": False,
                "error": {
                    "code": ToolError.code,
                    "type": e.__class__.__name__,
                    "message": str(e),
                },
                "session_id": session_id,
                "diagnostics": collect_diagnostics(driver, e, handle.config),
            }

    result = manager.with_session(session_id, _work)
    if isinstance(result, dict):
        result.setdefault("session_id", session_id)
    return result


async def run_in_session(
    manager: SessionManager,
    session_id: str,
    action: Callable[..., dict],
    /,
    tool: Optional[str] = None,
    **params: Any,
) -> dict:
    """
    Async front of run_session_action().

    The blocking browser work runs on a worker thread so that one slow
    session never stalls the event loop or the other sessions.
    """
    session_id = require_session_id(session_id, tool)
    return await asyncio.to_thread(run_session_action, manager, session_id, action, tool, **params)


__all__ = [
    "SESSION_MANAGEMENT",
    "SESSION_SCOPED",
    "SESSION_MANAGEMENT_TOOLS",
    "classify",
    "require_session_id",
    "run_session_action",
    "run_in_session",
]

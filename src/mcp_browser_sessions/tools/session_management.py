"""Session management tool implementations.

These operate on the SessionManager directly and never touch a browser
(except close_session, which stops one).
"""

from typing import Any, Dict, Optional

from ..config.models import Configuration
from ..config.resolver import SessionOptions
from ..errors import InvalidArgumentError, SessionError
from ..sessions.manager import SessionManager

import logging
logger = logging.getLogger(__name__)


def _apply_container_rules(options: Dict[str, Any], config: Configuration) -> Dict[str, Any]:
    """Inside a container there is no display: headless is mandatory."""
    if not config.docker:
        return options
    if options.get("headless") is False:
        raise InvalidArgumentError(
            "Headless mode is required when running in Docker. "
            "Cannot create a non-headless session in a containerized environment."
        )
    return {**options, "headless": True}


def create_session(manager: SessionManager, config: Configuration, **params: Any) -> dict:
    """
    Create a session and return its id.

    params are SessionOptions fields (browser_id, user_profile_id,
    bot_profile_id, browser_path, botbrowser_profile, headless, timeout,
    browser_options, metadata); None values are ignored.
    """
    logger.info("Creating new browser session")
    options = {k: v for k, v in params.items() if v is not None}
    options = SessionOptions.from_mapping(_apply_container_rules(options, config))

    session_id = manager.create_session(options)
    return {
        "ok": True,
        "session_id": session_id,
        "message": "Session created successfully",
        "options": options.to_dict(exclude_metadata=True),
    }


def list_sessions(manager: SessionManager) -> dict:
    sessions = [info.to_dict() for info in manager.list_sessions()]
    return {
        "ok": True,
        "count": len(sessions),
        "max_sessions": manager.max_sessions,
        "sessions": sessions,
    }


def close_session(manager: SessionManager, session_id: Optional[str]) -> dict:
    if not session_id:
        raise InvalidArgumentError("session_id is required")
    if not manager.close_session(session_id):
        raise SessionError(f"Session not found: {session_id}")
    return {"ok": True, "session_id": session_id, "message": "Session closed successfully"}


def get_session_info(manager: SessionManager, session_id: Optional[str]) -> dict:
    session = manager.get_session(session_id)
    if session is None:
        raise SessionError(f"Session not found: {session_id}")
    return {"ok": True, **session.describe().to_dict()}


__all__ = [
    'create_session',
    'list_sessions',
    'close_session',
    'get_session_info',
]

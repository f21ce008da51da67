"""Session lifecycle and concurrency management."""

from .session import Session, SessionInfo
from .manager import SessionManager

__all__ = [
    "Session",
    "SessionInfo",
    "SessionManager",
]

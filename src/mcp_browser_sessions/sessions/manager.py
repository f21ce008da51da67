"""
Registry of browser sessions.

Thread Safety:
    Two lock tiers, never nested the wrong way round:

    1. The structural lock (one per SessionManager) guards the session map.
       It is held only for map mutation and snapshot copies, never while a
       browser is started, used or stopped.
    2. The per-session lock (one per Session) guards that session's browser
       for the duration of a unit of work. It is acquired without holding
       the structural lock, so different sessions run fully in parallel.

A daemon thread closes sessions that stayed idle longer than
``session_timeout``. It waits on a threading.Event between passes, so
shutdown() can interrupt and join it within a bounded time.
"""

import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from ..browser.handle import BrowserHandle
from ..browser.launcher import Launcher
from ..config.models import Configuration
from ..config.resolver import SessionOptions
from ..constants import SHUTDOWN_JOIN_TIMEOUT
from ..errors import (
    ConfigurationInvalidError,
    InvalidArgumentError,
    ResourceExhaustedError,
    SessionError,
)
from .session import Session, SessionInfo

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionManager:
    """
    Creates, looks up and closes sessions; reclaims idle ones in the background.

    Args:
        config: Process-wide configuration (max_sessions, idle timeout, cleanup interval)
        launcher: Browser launcher passed down to every BrowserHandle (defaults to Selenium)
        autostart_cleanup: Start the reclamation thread immediately
    """

    def __init__(
        self,
        config: Configuration,
        launcher: Optional[Launcher] = None,
        autostart_cleanup: bool = True,
    ):
        self.config = config
        self.max_sessions = config.max_sessions
        self.cleanup_interval = config.cleanup_interval
        self._launcher = launcher
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._session_timeout = config.session_idle_timeout
        self._stop_event = threading.Event()
        self._cleanup_thread: Optional[threading.Thread] = None

        if autostart_cleanup:
            self.start_reclamation()

    # ------------------------------------------------------------------
    # Registry operations
    # ------------------------------------------------------------------

    def create_session(self, options: Union[SessionOptions, Mapping[str, Any], None] = None) -> str:
        """
        Create a session (browser not started yet) and return its id.

        Raises:
            ResourceExhaustedError: If max_sessions sessions already exist
            ConfigurationInvalidError: If an explicit browser/profile id is unknown
        """
        options = SessionOptions.from_mapping(options)

        # Resolution touches the filesystem; only the bound check and insert are locked
        session = Session(self.config, options, launcher=self._launcher)
        missing = session.config.missing_references()
        if missing:
            raise ConfigurationInvalidError(f"Unknown {', '.join(missing)}")

        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise ResourceExhaustedError(
                    f"Maximum concurrent sessions reached ({self.max_sessions}). "
                    f"Close an existing session before creating a new one."
                )
            self._sessions[session.id] = session

        logger.info(f"Created session {session.id} ({session.browser_type})")
        return session.id

    def get_session(self, session_id: Optional[str]) -> Optional[Session]:
        """
        Look up a session.

        Raises:
            InvalidArgumentError: If session_id is None or empty

        Returns:
            The Session, or None (logged) if it does not exist
        """
        if not session_id:
            raise InvalidArgumentError("session_id is required")

        with self._lock:
            session = self._sessions.get(session_id)

        if session is None:
            logger.warning(f"Session not found: {session_id}")
        return session

    def close_session(self, session_id: Optional[str]) -> bool:
        """Stop and remove a session. Returns False if it does not exist; never raises."""
        if not session_id:
            return False

        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        logger.info(f"Closing session {session_id}")
        self._stop_quietly(session)
        return True

    def list_sessions(self) -> List[SessionInfo]:
        with self._lock:
            sessions = list(self._sessions.values())
        return [s.describe() for s in sessions]

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def close_all_sessions(self) -> int:
        """Stop and remove every session, even if some stop() calls fail."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()

        logger.info(f"Closing all {len(sessions)} sessions")
        for session in sessions:
            self._stop_quietly(session)
        return len(sessions)

    def with_session(self, session_id: Optional[str], fn: Callable[[BrowserHandle], T]) -> T:
        """
        Run fn(handle) with exclusive access to the session's browser,
        starting the browser first if needed.

        Raises:
            InvalidArgumentError: If session_id is None or empty
            SessionError: If the session does not exist
            BrowserError: If the browser fails to start
        """
        session = self.get_session(session_id)
        if session is None:
            raise SessionError(f"Session not found: {session_id}")

        session.ensure_started()
        return session.with_exclusive_access(fn)

    @property
    def session_timeout(self) -> float:
        return self._session_timeout

    @session_timeout.setter
    def session_timeout(self, timeout: float) -> None:
        with self._lock:
            self._session_timeout = timeout
        logger.info(f"Session timeout set to {timeout} seconds")

    # ------------------------------------------------------------------
    # Idle reclamation
    # ------------------------------------------------------------------

    def reclaim_idle_sessions(self) -> List[str]:
        """Close every session idle for longer than session_timeout. Returns the closed ids."""
        with self._lock:
            timeout = self._session_timeout
            idle_ids = [sid for sid, s in self._sessions.items() if s.is_idle(timeout)]

        for session_id in idle_ids:
            logger.info(f"Cleaning up idle session {session_id}")
            self.close_session(session_id)

        if idle_ids:
            logger.debug(f"Cleaned up {len(idle_ids)} idle sessions")
        return idle_ids

    def start_reclamation(self) -> None:
        if self._cleanup_thread is not None and self._cleanup_thread.is_alive():
            return

        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(
            target=self._reclamation_loop,
            name="session-cleanup",
            daemon=True,
        )
        self._cleanup_thread.start()
        logger.debug("Started session cleanup thread")

    def stop_reclamation(self, timeout: float = SHUTDOWN_JOIN_TIMEOUT) -> None:
        thread = self._cleanup_thread
        if thread is None:
            return

        self._stop_event.set()
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.warning(f"Session cleanup thread did not stop within {timeout}s")
        self._cleanup_thread = None
        logger.debug("Stopped session cleanup thread")

    @property
    def reclamation_running(self) -> bool:
        return self._cleanup_thread is not None and self._cleanup_thread.is_alive()

    def _reclamation_loop(self) -> None:
        # wait() returns True as soon as the stop event is set
        while not self._stop_event.wait(self.cleanup_interval):
            try:
                self.reclaim_idle_sessions()
            except Exception as e:
                logger.error(f"Cleanup thread error: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        logger.info("Shutting down SessionManager")
        self.stop_reclamation()
        self.close_all_sessions()

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    @staticmethod
    def _stop_quietly(session: Session) -> None:
        try:
            session.stop(close=True)
        except Exception as e:
            logger.error(f"Error stopping session {session.id}: {e}")


__all__ = [
    "SessionManager",
]

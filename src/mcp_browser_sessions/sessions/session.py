"""
A single browser session.

A Session couples one resolved configuration with one BrowserHandle and a
lock. with_exclusive_access() is the only sanctioned way to touch the
browser from outside: it guarantees that at most one unit of work runs
against the browser at any instant.
"""

import uuid
import datetime
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar

from ..browser.handle import BrowserHandle
from ..browser.launcher import Launcher
from ..config.models import Configuration
from ..config.resolver import SessionOptions, ResolvedSessionConfig, resolve
from ..constants import SYSTEM_BROWSER_ID
from ..errors import SessionError

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

SYSTEM_BROWSER_LABEL = "System browser"


def _now() -> datetime.datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class SessionInfo:
    """Point-in-time snapshot of a session, safe to hand to callers."""

    id: str
    active: bool
    created_at: datetime.datetime
    last_used_at: datetime.datetime
    idle_seconds: int
    browser_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "active": self.active,
            "created_at": self.created_at.isoformat(),
            "last_used_at": self.last_used_at.isoformat(),
            "idle_seconds": self.idle_seconds,
            "metadata": dict(self.metadata),
            "browser_type": self.browser_type,
            "options": dict(self.options),
        }


class Session:
    """
    An isolated browser-automation context.

    Attributes:
        id: Opaque unique identifier (uuid4)
        options: The options the session was created with
        config: Resolved configuration (immutable)
        handle: BrowserHandle, created but not started
        created_at: Creation time (UTC)
        last_used_at: Last exclusive access (UTC); read without locking
        metadata: Caller-supplied free-form metadata
    """

    def __init__(
        self,
        config: Configuration,
        options: Optional[SessionOptions] = None,
        launcher: Optional[Launcher] = None,
    ):
        self.id = str(uuid.uuid4())
        self.options = SessionOptions.from_mapping(options)
        self.config: ResolvedSessionConfig = resolve(config, self.options)
        self.handle = BrowserHandle(self.config, launcher=launcher)
        self.created_at = _now()
        self.last_used_at = self.created_at
        self.metadata = dict(self.options.metadata)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def with_exclusive_access(self, fn: Callable[[BrowserHandle], T]) -> T:
        """Run fn(handle) while holding this session's lock."""
        with self._lock:
            self._ensure_open()
            self.last_used_at = _now()
            return fn(self.handle)

    def is_active(self) -> bool:
        return self.handle.is_active()

    def ensure_started(self) -> None:
        if self.is_active():
            return
        with self._lock:
            self._ensure_open()
            # Re-check: another caller may have started it while we waited
            if not self.handle.is_active():
                self.handle.start()
            self.last_used_at = _now()

    def stop(self, close: bool = False) -> None:
        """Stop the browser; with close=True the session becomes unusable."""
        with self._lock:
            if close:
                self._closed = True
            if self.handle.is_active():
                self.handle.stop()

    def is_idle(self, threshold: float) -> bool:
        return (_now() - self.last_used_at).total_seconds() > threshold

    @property
    def browser_type(self) -> str:
        bot_profile = self.config.bot_profile
        browser = self.config.browser
        if bot_profile is not None:
            return f"AntiDetectBrowser ({bot_profile.name})"
        if browser is None or browser.id == SYSTEM_BROWSER_ID:
            return SYSTEM_BROWSER_LABEL
        if browser.is_botbrowser:
            return f"AntiDetectBrowser ({browser.name})"
        return browser.name

    def describe(self) -> SessionInfo:
        last_used_at = self.last_used_at
        return SessionInfo(
            id=self.id,
            active=self.is_active(),
            created_at=self.created_at,
            last_used_at=last_used_at,
            idle_seconds=int((_now() - last_used_at).total_seconds()),
            browser_type=self.browser_type,
            metadata=dict(self.metadata),
            options=self.options.to_dict(exclude_metadata=True),
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionError(f"Session closed: {self.id}")

    def __repr__(self) -> str:
        return f"<Session {self.id} active={self.is_active()} browser={self.browser_type!r}>"


__all__ = [
    "Session",
    "SessionInfo",
]

"""Immutable configuration value types."""

from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple

import logging
logger = logging.getLogger(__name__)

from ..constants import (
    DEFAULT_HEADLESS,
    DEFAULT_BROWSER_TIMEOUT,
    DEFAULT_MAX_SESSIONS,
    DEFAULT_SESSION_IDLE_TIMEOUT,
    DEFAULT_CLEANUP_INTERVAL,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    DEFAULT_TRANSPORT,
    DEFAULT_LOG_LEVEL,
    SYSTEM_BROWSER_ID,
    BOTBROWSER_TYPE,
)


@dataclass(frozen=True)
class BrowserDefinition:
    """A registered browser executable."""

    id: str
    name: str
    path: Optional[str] = None
    type: str = "chrome"
    description: Optional[str] = None

    @property
    def is_botbrowser(self) -> bool:
        return self.type == BOTBROWSER_TYPE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UserProfile:
    """A Chrome user data directory."""

    id: str
    name: str
    path: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BotProfile:
    """An anti-detection fingerprint profile for BotBrowser."""

    id: str
    name: str
    path: str
    description: Optional[str] = None
    encrypted: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


SYSTEM_BROWSER = BrowserDefinition(
    id=SYSTEM_BROWSER_ID,
    name="System Chrome",
    path=None,
    type="chrome",
    description="Auto-detected Chrome/Chromium installation",
)


@dataclass(frozen=True)
class Configuration:
    """
    Process-wide settings, built once at startup and read-only thereafter.

    Attributes:
        headless: Default headless flag for new sessions
        timeout: Default browser timeout in seconds
        max_sessions: Maximum number of concurrent sessions
        session_idle_timeout: Idle threshold (seconds) used by reclamation
        cleanup_interval: Seconds between two reclamation passes
        browsers: Registered browsers; never empty
        user_profiles: Registered Chrome user profiles
        bot_profiles: Registered anti-detection profiles
        ci: Running in a CI environment (adds --disable-setuid-sandbox)
        docker: Running in a container (headless is mandatory)
    """

    headless: bool = DEFAULT_HEADLESS
    timeout: int = DEFAULT_BROWSER_TIMEOUT
    max_sessions: int = DEFAULT_MAX_SESSIONS
    session_idle_timeout: float = DEFAULT_SESSION_IDLE_TIMEOUT
    cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL
    browsers: Tuple[BrowserDefinition, ...] = (SYSTEM_BROWSER,)
    user_profiles: Tuple[UserProfile, ...] = ()
    bot_profiles: Tuple[BotProfile, ...] = ()
    ci: bool = False
    docker: bool = False
    server_host: str = DEFAULT_SERVER_HOST
    server_port: int = DEFAULT_SERVER_PORT
    transport: str = DEFAULT_TRANSPORT
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = field(default=None)

    def __post_init__(self):
        # Frozen: normalise through object.__setattr__
        browsers = _unique_by_id(self.browsers) or (SYSTEM_BROWSER,)
        object.__setattr__(self, "browsers", browsers)
        object.__setattr__(self, "user_profiles", _unique_by_id(self.user_profiles))
        object.__setattr__(self, "bot_profiles", _unique_by_id(self.bot_profiles))

    @property
    def default_browser(self) -> BrowserDefinition:
        return self.browsers[0]

    @property
    def using_botbrowser(self) -> bool:
        return bool(self.bot_profiles)

    def find_browser(self, browser_id: Optional[str]) -> Optional[BrowserDefinition]:
        return _find(self.browsers, browser_id)

    def find_user_profile(self, profile_id: Optional[str]) -> Optional[UserProfile]:
        return _find(self.user_profiles, profile_id)

    def find_bot_profile(self, profile_id: Optional[str]) -> Optional[BotProfile]:
        return _find(self.bot_profiles, profile_id)


def _find(items, item_id):
    if not item_id:
        return None
    for item in items:
        if item.id == item_id:
            return item
    return None


def _unique_by_id(items) -> tuple:
    seen = set()
    unique = []
    for item in items or ():
        if item.id in seen:
            logger.warning(f"Ignoring duplicate definition with id {item.id!r}")
            continue
        seen.add(item.id)
        unique.append(item)
    return tuple(unique)


__all__ = [
    "BrowserDefinition",
    "UserProfile",
    "BotProfile",
    "Configuration",
    "SYSTEM_BROWSER",
]

"""Environment configuration and validation."""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv

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
    LEGACY_DEFAULT_ID,
    BOTBROWSER_TYPE,
    ENCRYPTED_PROFILE_SUFFIX,
)
from ..errors import ConfigurationInvalidError
from .models import BrowserDefinition, UserProfile, BotProfile, Configuration

import logging
logger = logging.getLogger(__name__)


BROWSER_PREFIX = "BROWSER_"
USER_PROFILE_PREFIX = "USER_PROFILE_"
BOT_PROFILE_PREFIX = "BOT_PROFILE_"

# BROWSER_* variables that are settings rather than browser definitions
RESERVED_BROWSER_KEYS = {"BROWSER_HEADLESS", "BROWSER_TIMEOUT", "BROWSER_PATH"}

TRUTHY = ("1", "true", "yes", "on")


def load_configuration(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> Configuration:
    """
    Build the process-wide Configuration from environment variables.

    Browsers are declared as BROWSER_<ID>=type:path:name:description,
    user profiles as USER_PROFILE_<ID>=path:name:description and
    anti-detection profiles as BOT_PROFILE_<ID>=path:name:description.
    The legacy BROWSER_PATH / BOTBROWSER_PATH / BOTBROWSER_PROFILE variables
    register an extra entry with id "default".

    Args:
        environ: Mapping to read from (defaults to os.environ)
        dotenv: Load a .env file into os.environ first (ignored when environ is given)

    Raises:
        ConfigurationInvalidError: If a numeric setting cannot be parsed
    """
    if environ is None:
        if dotenv:
            load_dotenv()
        environ = os.environ

    browsers = _load_browsers(environ)
    user_profiles = _load_user_profiles(environ)
    bot_profiles = _load_bot_profiles(environ)

    max_sessions = _int_setting(environ, "MAX_CONCURRENT_SESSIONS", DEFAULT_MAX_SESSIONS)
    if max_sessions < 1:
        raise ConfigurationInvalidError("MAX_CONCURRENT_SESSIONS must be at least 1.")

    config = Configuration(
        headless=_bool_setting(environ, "BROWSER_HEADLESS", DEFAULT_HEADLESS),
        timeout=_int_setting(environ, "BROWSER_TIMEOUT", DEFAULT_BROWSER_TIMEOUT),
        max_sessions=max_sessions,
        session_idle_timeout=_int_setting(environ, "SESSION_IDLE_TIMEOUT", DEFAULT_SESSION_IDLE_TIMEOUT),
        cleanup_interval=_int_setting(environ, "SESSION_CLEANUP_INTERVAL", DEFAULT_CLEANUP_INTERVAL),
        browsers=tuple(browsers),
        user_profiles=tuple(user_profiles),
        bot_profiles=tuple(bot_profiles),
        ci=bool((environ.get("CI") or "").strip()),
        docker=_bool_setting(environ, "DOCKER", False),
        server_host=(environ.get("MCP_SERVER_HOST") or "").strip() or DEFAULT_SERVER_HOST,
        server_port=_int_setting(environ, "MCP_SERVER_PORT", DEFAULT_SERVER_PORT),
        transport=(environ.get("MCP_TRANSPORT") or "").strip().lower() or DEFAULT_TRANSPORT,
        log_level=(environ.get("LOG_LEVEL") or "").strip().lower() or DEFAULT_LOG_LEVEL,
        log_file=(environ.get("LOG_FILE") or "").strip() or None,
    )
    logger.debug(
        f"Loaded configuration: {len(config.browsers)} browser(s), "
        f"{len(config.user_profiles)} user profile(s), {len(config.bot_profiles)} bot profile(s)"
    )
    return config


def _load_browsers(environ: Mapping[str, str]) -> list:
    browsers = []
    for key in sorted(environ):
        if not key.startswith(BROWSER_PREFIX) or key in RESERVED_BROWSER_KEYS:
            continue
        browser_id = _id_from_key(key, BROWSER_PREFIX)
        if not browser_id:
            continue
        parts = _split(environ[key], 4)
        browsers.append(BrowserDefinition(
            id=browser_id,
            type=parts[0] if parts[0] is not None else "chrome",
            path=parts[1] or None,
            name=parts[2] or browser_id.capitalize(),
            description=parts[3] or None,
        ))

    legacy_path = (environ.get("BROWSER_PATH") or "").strip()
    legacy_bot_path = (environ.get("BOTBROWSER_PATH") or "").strip()
    if legacy_path or legacy_bot_path:
        is_bot = not legacy_path
        browsers.append(BrowserDefinition(
            id=LEGACY_DEFAULT_ID,
            name="BotBrowser" if is_bot else "Default Browser",
            path=legacy_path or legacy_bot_path,
            type=BOTBROWSER_TYPE if is_bot else "chrome",
            description="Configured via BOTBROWSER_PATH" if is_bot else "Configured via BROWSER_PATH",
        ))
    return browsers


def _load_user_profiles(environ: Mapping[str, str]) -> list:
    profiles = []
    for key in sorted(environ):
        if not key.startswith(USER_PROFILE_PREFIX):
            continue
        profile_id = _id_from_key(key, USER_PROFILE_PREFIX)
        path, name, description = _split(environ[key], 3)
        if not profile_id or not path:
            logger.debug(f"Skipping user profile {key}: empty path")
            continue
        profiles.append(UserProfile(
            id=profile_id,
            name=name or profile_id.capitalize(),
            path=path,
            description=description or None,
        ))
    return profiles


def _load_bot_profiles(environ: Mapping[str, str]) -> list:
    profiles = []
    for key in sorted(environ):
        if not key.startswith(BOT_PROFILE_PREFIX):
            continue
        profile_id = _id_from_key(key, BOT_PROFILE_PREFIX)
        path, name, description = _split(environ[key], 3)
        if not profile_id or not path:
            logger.debug(f"Skipping bot profile {key}: empty path")
            continue
        profiles.append(BotProfile(
            id=profile_id,
            name=name or profile_id.capitalize(),
            path=path,
            description=description or None,
            encrypted=path.endswith(ENCRYPTED_PROFILE_SUFFIX),
        ))

    legacy_profile = (environ.get("BOTBROWSER_PROFILE") or "").strip()
    if legacy_profile:
        profiles.append(BotProfile(
            id=LEGACY_DEFAULT_ID,
            name="Default Profile",
            path=legacy_profile,
            description="Configured via BOTBROWSER_PROFILE",
            encrypted=legacy_profile.endswith(ENCRYPTED_PROFILE_SUFFIX),
        ))
    return profiles


def _id_from_key(key: str, prefix: str) -> str:
    return key[len(prefix):].strip().lower()


def _split(raw: str, count: int) -> list:
    """Split a colon-separated definition; the last field keeps any extra colons."""
    parts = [p.strip() for p in (raw or "").split(":", count - 1)]
    parts += [None] * (count - len(parts))
    return parts


def _int_setting(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = (environ.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationInvalidError(f"{key} must be an integer, got {raw!r}.")


def _bool_setting(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = (environ.get(key) or "").strip().lower()
    if not raw:
        return default
    return raw in TRUTHY


__all__ = [
    "load_configuration",
]

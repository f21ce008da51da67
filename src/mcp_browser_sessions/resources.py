"""
Read-only MCP resources describing what a session can be created with.

Each function returns a plain dict; __main__ registers them on FastMCP
under the browsers:// scheme and serializes them as pretty JSON.
"""

import os

from . import __version__
from .config.models import Configuration
from .errors import InvalidArgumentError


RESOURCE_URIS = {
    "browsers": "browsers://list",
    "user_profiles": "browsers://user-profiles",
    "bot_profiles": "browsers://bot-profiles",
    "capabilities": "browsers://capabilities",
    "browser": "browsers://browser/{browser_id}",
    "user_profile": "browsers://user-profile/{profile_id}",
    "bot_profile": "browsers://bot-profile/{profile_id}",
}


def _usage(param: str, value: str) -> dict:
    return {"session_param": param, "example": f"create_session({param}='{value}')"}


def list_browsers(config: Configuration) -> dict:
    return {
        "browsers": [b.to_dict() for b in config.browsers],
        "default": config.default_browser.id,
        "total": len(config.browsers),
    }


def browser_detail(config: Configuration, browser_id: str) -> dict:
    browser = config.find_browser(browser_id)
    if browser is None:
        raise InvalidArgumentError(f"Unknown browser: {browser_id}")
    return {
        **browser.to_dict(),
        "is_default": browser == config.default_browser,
        "exists": browser.path is None or os.path.exists(browser.path),
        "usage": _usage("browser_id", browser.id),
    }


def list_user_profiles(config: Configuration) -> dict:
    return {
        "profiles": [p.to_dict() for p in config.user_profiles],
        "total": len(config.user_profiles),
        "note": "User profiles are standard Chrome user data directories",
    }


def user_profile_detail(config: Configuration, profile_id: str) -> dict:
    profile = config.find_user_profile(profile_id)
    if profile is None:
        raise InvalidArgumentError(f"Unknown user profile: {profile_id}")
    return {
        **profile.to_dict(),
        "exists": os.path.isdir(profile.path),
        "usage": _usage("user_profile_id", profile.id),
    }


def list_bot_profiles(config: Configuration) -> dict:
    return {
        "profiles": [p.to_dict() for p in config.bot_profiles],
        "total": len(config.bot_profiles),
        "note": "BotBrowser profiles contain anti-detection fingerprints",
        "using_botbrowser": config.using_botbrowser,
    }


def bot_profile_detail(config: Configuration, profile_id: str) -> dict:
    profile = config.find_bot_profile(profile_id)
    if profile is None:
        raise InvalidArgumentError(f"Unknown bot profile: {profile_id}")
    return {
        **profile.to_dict(),
        "exists": os.path.exists(profile.path),
        "usage": _usage("bot_profile_id", profile.id),
    }


def capabilities(config: Configuration) -> dict:
    return {
        "version": __version__,
        "features": {
            "multi_browser": len(config.browsers) > 1,
            "user_profiles": bool(config.user_profiles),
            "bot_profiles": bool(config.bot_profiles),
            "botbrowser_integration": config.using_botbrowser,
            "session_management": True,
            "screenshot": True,
            "javascript_execution": True,
            "cookie_management": True,
            "form_interaction": True,
        },
        "transport": config.transport,
        "max_sessions": config.max_sessions,
        "session_idle_timeout": config.session_idle_timeout,
        "browsers_count": len(config.browsers),
        "user_profiles_count": len(config.user_profiles),
        "bot_profiles_count": len(config.bot_profiles),
    }


__all__ = [
    "RESOURCE_URIS",
    "list_browsers",
    "browser_detail",
    "list_user_profiles",
    "user_profile_detail",
    "list_bot_profiles",
    "bot_profile_detail",
    "capabilities",
]

"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.

Values here are only defaults; the effective values live on the immutable
Configuration built by config.environment.load_configuration().
"""

# ============================================================================
# Session Registry Defaults
# ============================================================================

DEFAULT_MAX_SESSIONS = 10
"""Maximum number of concurrent sessions held by the SessionManager."""

DEFAULT_SESSION_IDLE_TIMEOUT = 30 * 60
"""Sessions unused for longer than this (seconds) are reclaimed."""

DEFAULT_CLEANUP_INTERVAL = 5 * 60
"""Interval (seconds) between two idle-reclamation passes."""

SHUTDOWN_JOIN_TIMEOUT = 5.0
"""How long shutdown waits for the reclamation thread to exit."""


# ============================================================================
# Browser Defaults
# ============================================================================

DEFAULT_HEADLESS = False

DEFAULT_BROWSER_TIMEOUT = 60
"""Page-load and script timeout in seconds."""

SYSTEM_BROWSER_ID = "system"
"""Id of the implicit browser entry used when no browser is configured."""

CUSTOM_ID = "custom"
"""Id given to ad-hoc definitions synthesized from legacy path options."""

LEGACY_DEFAULT_ID = "default"
"""Id given to definitions read from the legacy BROWSER_PATH variables."""

BOTBROWSER_TYPE = "botbrowser"
"""Type tag marking a browser definition as an anti-detection browser."""

ENCRYPTED_PROFILE_SUFFIX = ".enc"

DEFAULT_LAUNCH_OPTIONS = {
    "--no-sandbox": None,
    "--disable-dev-shm-usage": None,
    "--disable-blink-features": "AutomationControlled",
    "--disable-gpu": None,
}
"""Launch flags applied to every session; None means a bare flag."""

CI_LAUNCH_OPTIONS = {
    "--disable-setuid-sandbox": None,
}

BOT_PROFILE_FLAG = "--bot-profile"


# ============================================================================
# Server Defaults
# ============================================================================

DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 3000
DEFAULT_TRANSPORT = "stdio"
DEFAULT_LOG_LEVEL = "info"


__all__ = [
    "DEFAULT_MAX_SESSIONS",
    "DEFAULT_SESSION_IDLE_TIMEOUT",
    "DEFAULT_CLEANUP_INTERVAL",
    "SHUTDOWN_JOIN_TIMEOUT",
    "DEFAULT_HEADLESS",
    "DEFAULT_BROWSER_TIMEOUT",
    "SYSTEM_BROWSER_ID",
    "CUSTOM_ID",
    "LEGACY_DEFAULT_ID",
    "BOTBROWSER_TYPE",
    "ENCRYPTED_PROFILE_SUFFIX",
    "DEFAULT_LAUNCH_OPTIONS",
    "CI_LAUNCH_OPTIONS",
    "BOT_PROFILE_FLAG",
    "DEFAULT_SERVER_HOST",
    "DEFAULT_SERVER_PORT",
    "DEFAULT_TRANSPORT",
    "DEFAULT_LOG_LEVEL",
]

"""Exception types raised by the session core and the tool layer.

Every error carries a short machine-readable ``code`` that the tool
envelope copies into failed tool results.
"""


class BrowserSessionsError(Exception):
    """Base class for all errors raised by this package."""

    code = "error"


class InvalidArgumentError(BrowserSessionsError, ValueError):
    """A required argument (typically session_id) is missing, empty or malformed."""

    code = "invalid_argument"


class ResourceExhaustedError(BrowserSessionsError):
    """The maximum number of concurrent sessions has been reached."""

    code = "max_sessions_reached"


class SessionError(BrowserSessionsError):
    """The referenced session does not exist (or has already been closed)."""

    code = "session_not_found"


class BrowserError(BrowserSessionsError):
    """The browser process failed to launch or to communicate."""

    code = "browser_error"


class ConfigurationInvalidError(BrowserSessionsError):
    """The configuration (or a resolved session configuration) is invalid."""

    code = "invalid_configuration"


class ToolError(BrowserSessionsError):
    """A browser action could not be completed (element not found, ...)."""

    code = "tool_error"


__all__ = [
    "BrowserSessionsError",
    "InvalidArgumentError",
    "ResourceExhaustedError",
    "SessionError",
    "BrowserError",
    "ConfigurationInvalidError",
    "ToolError",
]

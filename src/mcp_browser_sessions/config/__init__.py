"""Configuration management for browser sessions."""

from .models import (
    BrowserDefinition,
    UserProfile,
    BotProfile,
    Configuration,
    SYSTEM_BROWSER,
)

from .environment import load_configuration

from .resolver import (
    SessionOptions,
    ResolvedSessionConfig,
    resolve,
)

__all__ = [
    "BrowserDefinition",
    "UserProfile",
    "BotProfile",
    "Configuration",
    "SYSTEM_BROWSER",
    "load_configuration",
    "SessionOptions",
    "ResolvedSessionConfig",
    "resolve",
]

"""
Per-session configuration resolution.

resolve() merges the process-wide Configuration with the options a caller
supplied to create_session and returns an immutable ResolvedSessionConfig.
It never raises: references that cannot be resolved come back as None and
are reported later by ResolvedSessionConfig.validate().
"""

import os
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional

from ..constants import (
    DEFAULT_LAUNCH_OPTIONS,
    CI_LAUNCH_OPTIONS,
    BOT_PROFILE_FLAG,
    CUSTOM_ID,
    BOTBROWSER_TYPE,
    ENCRYPTED_PROFILE_SUFFIX,
)
from ..errors import ConfigurationInvalidError, InvalidArgumentError
from .models import BrowserDefinition, UserProfile, BotProfile, Configuration


def _positive_timeout(value: Any) -> int:
    # bool is an int subclass; True is not a timeout
    if isinstance(value, bool):
        raise InvalidArgumentError(f"timeout must be a positive number of seconds, got {value!r}")
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"timeout must be a positive number of seconds, got {value!r}")
    if seconds <= 0:
        raise InvalidArgumentError(f"timeout must be a positive number of seconds, got {value!r}")
    return seconds


@dataclass(frozen=True)
class SessionOptions:
    """Overrides supplied by the caller when a session is created."""

    browser_id: Optional[str] = None
    user_profile_id: Optional[str] = None
    bot_profile_id: Optional[str] = None
    browser_path: Optional[str] = None
    botbrowser_profile: Optional[str] = None
    headless: Optional[bool] = None
    timeout: Optional[int] = None
    browser_options: Dict[str, Optional[str]] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.headless is not None and not isinstance(self.headless, bool):
            raise InvalidArgumentError(f"headless must be true or false, got {self.headless!r}")
        if self.timeout is not None:
            object.__setattr__(self, "timeout", _positive_timeout(self.timeout))

    @classmethod
    def from_mapping(cls, params: Optional[Mapping[str, Any]]) -> "SessionOptions":
        """Build options from tool parameters, ignoring unknown keys and None values."""
        if params is None:
            return cls()
        if isinstance(params, cls):
            return params
        known = cls.__dataclass_fields__
        kwargs = {k: v for k, v in dict(params).items() if k in known and v is not None}
        kwargs["browser_options"] = dict(kwargs.get("browser_options") or {})
        kwargs["metadata"] = dict(kwargs.get("metadata") or {})
        return cls(**kwargs)

    def to_dict(self, exclude_metadata: bool = False) -> dict:
        """Compact form: unset fields and empty mappings are omitted."""
        data = {k: v for k, v in asdict(self).items() if v is not None and v != {}}
        if exclude_metadata:
            data.pop("metadata", None)
        return data


@dataclass(frozen=True)
class ResolvedSessionConfig:
    """The concrete launch parameters of one session."""

    browser: Optional[BrowserDefinition]
    user_profile: Optional[UserProfile]
    bot_profile: Optional[BotProfile]
    headless: bool
    timeout: int
    browser_options: Dict[str, Optional[str]]
    requested_browser_id: Optional[str] = None
    requested_user_profile_id: Optional[str] = None
    requested_bot_profile_id: Optional[str] = None

    @property
    def browser_path(self) -> Optional[str]:
        return self.browser.path if self.browser else None

    @property
    def botbrowser_profile(self) -> Optional[str]:
        return self.bot_profile.path if self.bot_profile else None

    @property
    def user_data_dir(self) -> Optional[str]:
        return self.user_profile.path if self.user_profile else None

    @property
    def using_botbrowser(self) -> bool:
        return self.bot_profile is not None or bool(self.browser and self.browser.is_botbrowser)

    def launch_arguments(self) -> List[str]:
        """Render the launch-option map as command-line switches."""
        args = []
        for flag, value in self.browser_options.items():
            args.append(flag if value is None or value == "" else f"{flag}={value}")
        return args

    def missing_references(self) -> List[str]:
        """Explicitly requested ids that did not resolve to a registered definition."""
        missing = []
        if self.requested_browser_id and self.browser is None:
            missing.append(f"browser '{self.requested_browser_id}'")
        if self.requested_user_profile_id and self.user_profile is None:
            missing.append(f"user profile '{self.requested_user_profile_id}'")
        if self.requested_bot_profile_id and self.bot_profile is None:
            missing.append(f"bot profile '{self.requested_bot_profile_id}'")
        return missing

    def problems(self) -> List[str]:
        problems = [f"Unknown {ref}" for ref in self.missing_references()]
        if self.browser_path and not os.path.exists(self.browser_path):
            problems.append(f"Browser path does not exist: {self.browser_path}")
        return problems

    def is_valid(self) -> bool:
        return not self.problems()

    def validate(self) -> None:
        """Raise ConfigurationInvalidError if the session cannot be launched as configured."""
        problems = self.problems()
        if problems:
            raise ConfigurationInvalidError("; ".join(problems))


def resolve(base: Configuration, options: Optional[SessionOptions] = None) -> ResolvedSessionConfig:
    """Merge base configuration and session options. Never raises."""
    options = options or SessionOptions()

    bot_profile = _resolve_bot_profile(base, options)
    return ResolvedSessionConfig(
        browser=_resolve_browser(base, options),
        user_profile=base.find_user_profile(options.user_profile_id),
        bot_profile=bot_profile,
        headless=base.headless if options.headless is None else options.headless,
        timeout=base.timeout if options.timeout is None else options.timeout,
        browser_options=_merge_launch_options(base, options, bot_profile),
        requested_browser_id=options.browser_id,
        requested_user_profile_id=options.user_profile_id,
        requested_bot_profile_id=options.bot_profile_id,
    )


def _resolve_browser(base: Configuration, options: SessionOptions) -> Optional[BrowserDefinition]:
    if options.browser_id:
        # Unknown id stays None; it does not fall back to the default
        return base.find_browser(options.browser_id)
    if options.browser_path:
        wants_bot = bool(options.bot_profile_id or options.botbrowser_profile)
        return BrowserDefinition(
            id=CUSTOM_ID,
            name="Custom Browser",
            path=options.browser_path,
            type=BOTBROWSER_TYPE if wants_bot else "chrome",
            description="Custom browser path",
        )
    return base.default_browser


def _resolve_bot_profile(base: Configuration, options: SessionOptions) -> Optional[BotProfile]:
    if options.bot_profile_id:
        return base.find_bot_profile(options.bot_profile_id)
    if options.botbrowser_profile:
        return BotProfile(
            id=CUSTOM_ID,
            name="Custom Profile",
            path=options.botbrowser_profile,
            description="Custom BotBrowser profile",
            encrypted=options.botbrowser_profile.endswith(ENCRYPTED_PROFILE_SUFFIX),
        )
    return None


def _merge_launch_options(base: Configuration, options: SessionOptions, bot_profile: Optional[BotProfile]) -> dict:
    merged = dict(DEFAULT_LAUNCH_OPTIONS)
    if base.ci:
        merged.update(CI_LAUNCH_OPTIONS)
    if bot_profile is not None and os.path.exists(bot_profile.path):
        merged[BOT_PROFILE_FLAG] = bot_profile.path
    merged.update(options.browser_options or {})
    return merged


__all__ = [
    "SessionOptions",
    "ResolvedSessionConfig",
    "resolve",
]

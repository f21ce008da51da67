"""Tests for merging base configuration and per-session options."""

import pytest

from mcp_browser_sessions.config import (
    BrowserDefinition,
    BotProfile,
    UserProfile,
    SessionOptions,
    resolve,
)
from mcp_browser_sessions.constants import BOT_PROFILE_FLAG
from mcp_browser_sessions.errors import ConfigurationInvalidError, InvalidArgumentError

from _utils import make_config


@pytest.fixture
def chrome_path(tmp_path):
    path = tmp_path / "chrome"
    path.write_text("#!/bin/sh\n")
    return str(path)


@pytest.fixture
def config(chrome_path, tmp_path):
    bot_profile = tmp_path / "us.enc"
    bot_profile.write_text("{}")
    return make_config(
        browsers=(
            BrowserDefinition(id="chrome", name="Google Chrome", path=chrome_path),
            BrowserDefinition(id="bot", name="BotBrowser", path=chrome_path, type="botbrowser"),
        ),
        user_profiles=(UserProfile(id="work", name="Work", path=str(tmp_path)),),
        bot_profiles=(BotProfile(id="us", name="US", path=str(bot_profile), encrypted=True),),
    )


class TestSessionOptions:

    def test_from_mapping_drops_unknown_keys_and_none(self):
        options = SessionOptions.from_mapping({"browser_id": "chrome", "headless": None, "bogus": 1})
        assert options.browser_id == "chrome"
        assert options.headless is None
        assert options.browser_options == {}

    def test_from_mapping_accepts_none_and_instances(self):
        assert SessionOptions.from_mapping(None) == SessionOptions()
        options = SessionOptions(browser_id="x")
        assert SessionOptions.from_mapping(options) is options

    def test_timeout_is_coerced_to_whole_seconds(self):
        assert SessionOptions.from_mapping({"timeout": "30"}).timeout == 30
        assert SessionOptions(timeout=12.7).timeout == 12

    @pytest.mark.parametrize("timeout", ["soon", 0, -5, True, [1]])
    def test_bad_timeout_is_an_argument_error(self, timeout):
        with pytest.raises(InvalidArgumentError) as exc_info:
            SessionOptions.from_mapping({"timeout": timeout})
        assert "timeout" in str(exc_info.value)

    @pytest.mark.parametrize("headless", ["yes", 1, "false"])
    def test_non_boolean_headless_is_an_argument_error(self, headless):
        with pytest.raises(InvalidArgumentError):
            SessionOptions.from_mapping({"headless": headless})

    def test_to_dict_is_compact(self):
        options = SessionOptions(headless=False, metadata={"purpose": "test"})
        assert options.to_dict() == {"headless": False, "metadata": {"purpose": "test"}}
        assert options.to_dict(exclude_metadata=True) == {"headless": False}


def test_defaults_come_from_base_configuration(config):
    resolved = resolve(config)
    assert resolved.browser.id == "chrome"
    assert resolved.user_profile is None
    assert resolved.bot_profile is None
    assert resolved.headless is True
    assert resolved.timeout == config.timeout
    assert "--no-sandbox" in resolved.launch_arguments()
    assert "--disable-blink-features=AutomationControlled" in resolved.launch_arguments()


def test_options_override_headless_and_timeout(config):
    resolved = resolve(config, SessionOptions(headless=False, timeout=5))
    assert resolved.headless is False
    assert resolved.timeout == 5


def test_browser_id_wins_over_browser_path(config):
    resolved = resolve(config, SessionOptions(browser_id="bot", browser_path="/y"))
    assert resolved.browser.id == "bot"
    assert resolved.browser_path != "/y"


def test_browser_path_synthesizes_custom_browser(config, chrome_path):
    resolved = resolve(config, SessionOptions(browser_path=chrome_path))
    assert resolved.browser.id == "custom"
    assert resolved.browser.name == "Custom Browser"
    assert resolved.browser_path == chrome_path
    assert resolved.using_botbrowser is False


def test_browser_path_with_bot_profile_is_botbrowser(config, chrome_path):
    resolved = resolve(config, SessionOptions(browser_path=chrome_path, botbrowser_profile="/p/x.enc"))
    assert resolved.browser.is_botbrowser
    assert resolved.bot_profile.id == "custom"
    assert resolved.bot_profile.encrypted is True


def test_bot_profile_id_wins_over_botbrowser_profile(config):
    resolved = resolve(config, SessionOptions(bot_profile_id="us", botbrowser_profile="/other.enc"))
    assert resolved.bot_profile.id == "us"
    # The profile file exists, so the launch flag is added
    assert resolved.browser_options[BOT_PROFILE_FLAG] == resolved.bot_profile.path


def test_missing_bot_profile_file_adds_no_flag(config):
    resolved = resolve(config, SessionOptions(botbrowser_profile="/does/not/exist.enc"))
    assert BOT_PROFILE_FLAG not in resolved.browser_options


def test_user_profile_becomes_user_data_dir(config, tmp_path):
    resolved = resolve(config, SessionOptions(user_profile_id="work"))
    assert resolved.user_data_dir == str(tmp_path)


def test_ci_flags_and_caller_overrides(config):
    ci_config = make_config(ci=True, browsers=config.browsers)
    resolved = resolve(ci_config, SessionOptions(browser_options={"--disable-gpu": "0", "--mute-audio": None}))
    args = resolved.launch_arguments()
    assert "--disable-setuid-sandbox" in args
    assert "--disable-gpu=0" in args
    assert "--mute-audio" in args


def test_known_browser_is_valid(config):
    resolved = resolve(config, SessionOptions(browser_id="chrome"))
    assert resolved.browser.name == "Google Chrome"
    assert resolved.is_valid()
    resolved.validate()


def test_unknown_browser_id_does_not_fall_back(config):
    resolved = resolve(config, SessionOptions(browser_id="missing"))
    assert resolved.browser is None
    assert resolved.missing_references() == ["browser 'missing'"]
    assert not resolved.is_valid()
    with pytest.raises(ConfigurationInvalidError):
        resolved.validate()


def test_unknown_profile_ids_are_reported(config):
    resolved = resolve(config, SessionOptions(user_profile_id="nope", bot_profile_id="gone"))
    assert resolved.missing_references() == ["user profile 'nope'", "bot profile 'gone'"]


def test_nonexistent_browser_path_is_invalid(config):
    resolved = resolve(config, SessionOptions(browser_path="/no/such/chrome"))
    assert resolved.missing_references() == []
    assert any("does not exist" in p for p in resolved.problems())


def test_system_browser_has_no_path_and_is_valid():
    resolved = resolve(make_config())
    assert resolved.browser.id == "system"
    assert resolved.browser_path is None
    assert resolved.is_valid()

"""Tests for a single session."""

import datetime
import threading
import time

import pytest

from mcp_browser_sessions.config import BrowserDefinition, BotProfile
from mcp_browser_sessions.errors import SessionError
from mcp_browser_sessions.sessions import Session

from _utils import FakeLauncher, make_config


@pytest.fixture
def chrome_path(tmp_path):
    path = tmp_path / "chrome"
    path.write_text("")
    return str(path)


@pytest.fixture
def config(chrome_path):
    return make_config(
        browsers=(
            BrowserDefinition(id="chrome", name="Google Chrome", path=chrome_path),
            BrowserDefinition(id="bot", name="BotBrowser 130", path=chrome_path, type="botbrowser"),
            BrowserDefinition(id="system", name="System Chrome"),
        ),
        bot_profiles=(BotProfile(id="us", name="US Desktop", path="/profiles/us.enc", encrypted=True),),
    )


class TestBrowserType:

    def test_named_browser(self, config):
        assert Session(config, {"browser_id": "chrome"}).browser_type == "Google Chrome"

    def test_botbrowser_type(self, config):
        assert Session(config, {"browser_id": "bot"}).browser_type == "AntiDetectBrowser (BotBrowser 130)"

    def test_bot_profile_takes_precedence(self, config):
        session = Session(config, {"browser_id": "chrome", "bot_profile_id": "us"})
        assert session.browser_type == "AntiDetectBrowser (US Desktop)"

    def test_system_browser(self, config):
        assert Session(config, {"browser_id": "system"}).browser_type == "System browser"

    def test_unresolved_browser_reads_as_system(self, config):
        assert Session(config, {"browser_id": "missing"}).browser_type == "System browser"


def test_new_session_is_not_started(config):
    launcher = FakeLauncher()
    session = Session(config, {"metadata": {"purpose": "test"}}, launcher=launcher)

    assert session.id
    assert not session.is_active()
    assert launcher.launch_count == 0
    assert session.created_at == session.last_used_at
    assert session.metadata == {"purpose": "test"}


def test_ids_are_unique(config):
    ids = {Session(config).id for _ in range(50)}
    assert len(ids) == 50


def test_ensure_started_launches_once(config):
    launcher = FakeLauncher()
    session = Session(config, launcher=launcher)

    session.ensure_started()
    session.ensure_started()

    assert launcher.launch_count == 1
    assert session.is_active()


def test_concurrent_ensure_started_launches_once(config):
    launcher = FakeLauncher(delay=0.05)
    session = Session(config, launcher=launcher)

    threads = [threading.Thread(target=session.ensure_started) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert launcher.launch_count == 1


def test_with_exclusive_access_passes_handle_and_touches(config):
    session = Session(config, launcher=FakeLauncher())
    session.last_used_at = session.created_at - datetime.timedelta(hours=1)
    before = session.last_used_at

    result = session.with_exclusive_access(lambda handle: handle is session.handle)

    assert result is True
    assert session.last_used_at > before


def test_with_exclusive_access_serializes_work(config):
    session = Session(config, launcher=FakeLauncher())
    intervals = []
    lock = threading.Lock()

    def work(_handle):
        start = time.monotonic()
        time.sleep(0.02)
        end = time.monotonic()
        with lock:
            intervals.append((start, end))

    threads = [threading.Thread(target=session.with_exclusive_access, args=(work,)) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    intervals.sort()
    assert len(intervals) == 6
    for (_, prev_end), (next_start, _) in zip(intervals, intervals[1:]):
        assert next_start >= prev_end


def test_exceptions_from_work_propagate_and_release_the_lock(config):
    session = Session(config, launcher=FakeLauncher())

    def boom(_handle):
        raise ValueError("boom")

    with pytest.raises(ValueError):
        session.with_exclusive_access(boom)
    assert session.with_exclusive_access(lambda h: "still usable") == "still usable"


def test_closed_session_rejects_work(config):
    launcher = FakeLauncher()
    session = Session(config, launcher=launcher)
    session.ensure_started()
    driver = launcher.launched[0]

    session.stop(close=True)

    assert driver.quit_calls == 1
    assert session.closed
    with pytest.raises(SessionError):
        session.with_exclusive_access(lambda h: None)
    with pytest.raises(SessionError):
        session.ensure_started()
    assert launcher.launch_count == 1


def test_stop_without_close_allows_restart(config):
    launcher = FakeLauncher()
    session = Session(config, launcher=launcher)
    session.ensure_started()
    session.stop()
    session.ensure_started()
    assert launcher.launch_count == 2


def test_is_idle(config):
    session = Session(config)
    assert not session.is_idle(60)
    session.last_used_at = session.last_used_at - datetime.timedelta(seconds=120)
    assert session.is_idle(60)


def test_describe(config):
    session = Session(config, {"browser_id": "chrome", "headless": False, "metadata": {"a": 1}})
    info = session.describe()

    assert info.id == session.id
    assert info.active is False
    assert info.browser_type == "Google Chrome"
    assert info.metadata == {"a": 1}
    assert info.options == {"browser_id": "chrome", "headless": False}

    data = info.to_dict()
    assert data["created_at"] == session.created_at.isoformat()
    assert data["idle_seconds"] >= 0
    assert "metadata" not in data["options"]

"""Tests for routing tool calls to sessions."""

import asyncio
import threading

import pytest

from mcp_browser_sessions.dispatch import (
    SESSION_MANAGEMENT,
    SESSION_SCOPED,
    classify,
    require_session_id,
    run_in_session,
    run_session_action,
)
from mcp_browser_sessions.errors import InvalidArgumentError, SessionError, ToolError
from mcp_browser_sessions.sessions import SessionManager

from _utils import FakeLauncher, make_config


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def manager(launcher):
    manager = SessionManager(make_config(), launcher=launcher, autostart_cleanup=False)
    yield manager
    manager.shutdown()


@pytest.mark.parametrize("name", ["create_session", "list_sessions", "close_session", "get_session_info"])
def test_session_management_tools(name):
    assert classify(name) == SESSION_MANAGEMENT


@pytest.mark.parametrize("name", ["navigate", "click", "get_html", "screenshot", "evaluate_js"])
def test_everything_else_is_session_scoped(name):
    assert classify(name) == SESSION_SCOPED


@pytest.mark.parametrize("bad", [None, "", "  ", 42])
def test_require_session_id_rejects_missing_ids(bad):
    with pytest.raises(InvalidArgumentError) as exc_info:
        require_session_id(bad, tool="navigate")
    assert "'navigate'" in str(exc_info.value)
    assert "create_session" in str(exc_info.value)


def test_require_session_id_strips():
    assert require_session_id(" abc ") == "abc"


def test_missing_session_id_never_reaches_the_manager():
    class ExplodingManager:
        def with_session(self, *args, **kwargs):
            raise AssertionError("manager must not be called")

    with pytest.raises(InvalidArgumentError):
        run_session_action(ExplodingManager(), "", lambda driver: {"ok": True})


def test_action_receives_driver_and_params(manager, launcher):
    session_id = manager.create_session()

    def action(driver, url):
        driver.get(url)
        return {"ok": True, "url": driver.current_url}

    result = run_session_action(manager, session_id, action, url="https://example.com")

    assert result == {"ok": True, "url": "https://example.com", "session_id": session_id}
    assert launcher.launched[0].history == ["https://example.com"]


def test_action_failure_is_reported_with_diagnostics(manager):
    session_id = manager.create_session()

    def action(driver):
        raise RuntimeError("element vanished")

    result = run_session_action(manager, session_id, action, tool="click")

    assert result["ok"] is False
    assert result["error"]["code"] == "tool_error"
    assert result["error"]["type"] == "RuntimeError"
    assert result["session_id"] == session_id
    assert "element vanished" in result["diagnostics"]
    assert "Driver initialized: True" in result["diagnostics"]


def test_tool_error_is_reported_not_raised(manager):
    session_id = manager.create_session()

    def action(driver):
        raise ToolError("Element not found: #nope")

    result = run_session_action(manager, session_id, action)
    assert result["ok"] is False
    assert result["error"]["message"] == "Element not found: #nope"


def test_argument_errors_propagate(manager):
    session_id = manager.create_session()

    def action(driver):
        raise InvalidArgumentError("selector is required")

    with pytest.raises(InvalidArgumentError):
        run_session_action(manager, session_id, action)


def test_unknown_session_propagates(manager):
    with pytest.raises(SessionError):
        run_session_action(manager, "unknown-id", lambda driver: {"ok": True})


def test_run_in_session_does_not_block_the_event_loop(manager, event_loop):
    a = manager.create_session()
    b = manager.create_session()
    barrier = threading.Barrier(2, timeout=2)

    def action(driver):
        barrier.wait()
        return {"ok": True}

    async def test_logic():
        return await asyncio.gather(
            run_in_session(manager, a, action),
            run_in_session(manager, b, action),
        )

    results = event_loop.run_until_complete(test_logic())
    assert [r["session_id"] for r in results] == [a, b]


def test_run_in_session_validates_first(manager, event_loop):
    with pytest.raises(InvalidArgumentError):
        event_loop.run_until_complete(run_in_session(manager, None, lambda driver: {"ok": True}))

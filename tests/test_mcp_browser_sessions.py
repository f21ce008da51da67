import asyncio
import json

import pytest
from selenium.webdriver.common.by import By

from mcp_browser_sessions import __main__ as server
from mcp_browser_sessions.context import ServerContext, reset_context, set_context
from mcp_browser_sessions.sessions import SessionManager

from _utils import FakeElement, FakeLauncher, FakeShadowRoot, make_config


##
## We DO NOT want to use pytest-asyncio.
##

@pytest.fixture
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def ctx(launcher):
    config = make_config(max_sessions=2)
    ctx = set_context(ServerContext(config=config, manager=SessionManager(config, launcher=launcher, autostart_cleanup=False)))
    yield ctx
    reset_context()


@pytest.fixture
def call(event_loop):
    """Run a tool coroutine and decode its JSON result."""
    def _call(tool, *args, **kwargs):
        return json.loads(event_loop.run_until_complete(tool(*args, **kwargs)))
    return _call


class TestSessionTools:

    def test_create_and_list(self, ctx, call, launcher):
        created = call(server.create_session, metadata={"agent": "a"})

        assert created["ok"] is True
        assert created["options"] == {}
        listed = call(server.list_sessions)
        assert listed["count"] == 1
        assert listed["max_sessions"] == 2
        assert listed["sessions"][0]["id"] == created["session_id"]
        assert listed["sessions"][0]["metadata"] == {"agent": "a"}
        assert launcher.launch_count == 0

    def test_limit_is_reported(self, ctx, call):
        call(server.create_session)
        call(server.create_session)
        result = call(server.create_session)

        assert result["ok"] is False
        assert result["error"]["code"] == "max_sessions_reached"
        assert "Maximum concurrent sessions reached (2)" in result["error"]["message"]

    def test_unknown_browser_is_reported(self, ctx, call):
        result = call(server.create_session, browser_id="missing")
        assert result["error"]["code"] == "invalid_configuration"

    def test_malformed_timeout_is_an_argument_error(self, ctx, call):
        result = call(server.create_session, timeout="soon")
        assert result["error"]["code"] == "invalid_argument"
        assert ctx.manager.session_count() == 0

    def test_get_session_info(self, ctx, call):
        session_id = call(server.create_session, headless=True)["session_id"]
        info = call(server.get_session_info, session_id)
        assert info["ok"] is True
        assert info["id"] == session_id
        assert info["active"] is False
        assert info["options"] == {"headless": True}

    def test_close_session(self, ctx, call, launcher):
        session_id = call(server.create_session)["session_id"]
        call(server.navigate, session_id, "https://example.com")

        closed = call(server.close_session, session_id)

        assert closed["ok"] is True
        assert launcher.launched[0].quit_calls == 1
        again = call(server.close_session, session_id)
        assert again["error"]["code"] == "session_not_found"

    @pytest.mark.parametrize("tool", ["get_session_info", "close_session"])
    def test_unknown_session(self, ctx, call, tool):
        result = call(getattr(server, tool), "unknown-id")
        assert result["error"]["code"] == "session_not_found"


class TestDocker:

    @pytest.fixture
    def ctx(self, launcher):
        config = make_config(docker=True, headless=False)
        ctx = set_context(ServerContext(config=config, manager=SessionManager(config, launcher=launcher, autostart_cleanup=False)))
        yield ctx
        reset_context()

    def test_headless_is_forced(self, ctx, call):
        result = call(server.create_session)
        assert result["options"]["headless"] is True

    def test_headed_session_is_rejected(self, ctx, call):
        result = call(server.create_session, headless=False)
        assert result["error"]["code"] == "invalid_argument"
        assert "Headless mode is required when running in Docker" in result["error"]["message"]
        assert ctx.manager.session_count() == 0


class TestSessionScopedTools:

    @pytest.mark.parametrize("session_id", [None, "", "   "])
    def test_missing_session_id(self, ctx, call, launcher, session_id):
        result = call(server.navigate, session_id, "https://example.com")

        assert result["ok"] is False
        assert result["error"]["code"] == "invalid_argument"
        assert "create_session" in result["error"]["message"]
        assert launcher.launch_count == 0

    def test_unknown_session(self, ctx, call):
        result = call(server.get_title, "unknown-id")
        assert result["error"]["code"] == "session_not_found"

    def test_browser_starts_on_first_use(self, ctx, call, launcher):
        session_id = call(server.create_session)["session_id"]

        result = call(server.navigate, session_id, "https://example.com")

        assert result["ok"] is True
        assert result["session_id"] == session_id
        assert result["title"] == "Title of https://example.com"
        assert launcher.launch_count == 1
        assert call(server.get_url, session_id)["url"] == "https://example.com"
        assert launcher.launch_count == 1

    def test_sessions_are_isolated(self, ctx, call, launcher):
        a = call(server.create_session)["session_id"]
        b = call(server.create_session)["session_id"]

        call(server.navigate, a, "https://a.example")
        call(server.navigate, b, "https://b.example")

        assert call(server.get_url, a)["url"] == "https://a.example"
        assert call(server.get_url, b)["url"] == "https://b.example"
        assert launcher.launch_count == 2

    def test_page_failure_carries_diagnostics(self, ctx, call):
        session_id = call(server.create_session)["session_id"]

        result = call(server.get_text, session_id, "#missing")

        assert result["ok"] is False
        assert result["error"]["code"] == "tool_error"
        assert "Element not found: #missing" in result["error"]["message"]
        assert "Driver initialized: True" in result["diagnostics"]

    def test_argument_error_inside_a_session(self, ctx, call):
        session_id = call(server.create_session)["session_id"]
        result = call(server.navigate, session_id, "example.com")
        assert result["error"]["code"] == "invalid_argument"

    def test_click(self, ctx, call, launcher):
        session_id = call(server.create_session)["session_id"]
        call(server.navigate, session_id, "https://example.com")
        button = launcher.launched[0].add_element(By.CSS_SELECTOR, "#go", FakeElement("button"))

        result = call(server.click, session_id, "#go")

        assert result["ok"] is True
        assert button.clicks == 1

    def test_query_shadow_dom(self, ctx, call, launcher):
        session_id = call(server.create_session)["session_id"]
        call(server.navigate, session_id, "https://example.com")
        root = FakeShadowRoot()
        root.add_element(".label", FakeElement("span", text="inside"))
        launcher.launched[0].add_element(By.CSS_SELECTOR, "my-widget", FakeElement("my-widget", shadow=root))

        result = call(server.query_shadow_dom, session_id, "my-widget", ".label")

        assert result["ok"] is True
        assert result["text"] == "inside"
        assert result["session_id"] == session_id

    def test_drag_and_drop_without_target(self, ctx, call):
        session_id = call(server.create_session)["session_id"]
        result = call(server.drag_and_drop, session_id, "#card")
        assert result["error"]["code"] == "invalid_argument"

    def test_screenshot(self, ctx, call):
        session_id = call(server.create_session)["session_id"]
        result = call(server.screenshot, session_id)
        assert result["type"] == "image"
        assert result["data"]

    def test_concurrent_calls_on_two_sessions(self, ctx, event_loop, launcher):
        a = json.loads(event_loop.run_until_complete(server.create_session()))["session_id"]
        b = json.loads(event_loop.run_until_complete(server.create_session()))["session_id"]

        async def test_logic():
            return await asyncio.gather(
                server.navigate(a, "https://a.example"),
                server.navigate(b, "https://b.example"),
            )

        results = [json.loads(r) for r in event_loop.run_until_complete(test_logic())]
        assert [r["url"] for r in results] == ["https://a.example", "https://b.example"]
        assert launcher.launch_count == 2


class TestResources:

    def test_browsers(self, ctx):
        data = json.loads(server.browsers_resource())
        assert data["default"] == "system"
        assert data["total"] == 1

    def test_capabilities(self, ctx):
        data = json.loads(server.capabilities_resource())
        assert data["max_sessions"] == 2
        assert data["features"]["session_management"] is True


def test_parse_args():
    args = server._parse_args(["--transport", "http", "--port", "8080", "--log-level", "debug"])
    assert args.transport == "http"
    assert args.port == 8080
    assert args.log_level == "debug"


def test_invalid_transport_exits_with_error(monkeypatch):
    monkeypatch.setenv("MCP_TRANSPORT", "carrier-pigeon")
    monkeypatch.setattr(server, "configure_logging", lambda *args, **kwargs: None)
    assert server.main([]) == 2

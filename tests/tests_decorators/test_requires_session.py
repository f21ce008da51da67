# tests/tests_decorators/test_requires_session.py
import json
import asyncio
import inspect
import pytest

from mcp_browser_sessions.decorators import requires_session, tool_envelope
from mcp_browser_sessions.errors import InvalidArgumentError

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


def test_missing_session_id_fails_before_the_body(event_loop):
    calls = []

    @requires_session
    async def navigate(session_id: str, url: str) -> str:
        calls.append(session_id)
        return "done"

    for bad in (None, "", "   "):
        with pytest.raises(InvalidArgumentError) as exc_info:
            event_loop.run_until_complete(navigate(bad, "https://example.com"))
        assert "navigate" in str(exc_info.value)
    assert calls == []


def test_valid_session_id_passes_through(event_loop):
    @requires_session
    async def get_title(session_id: str) -> str:
        return f"title of {session_id}"

    assert event_loop.run_until_complete(get_title(session_id="abc")) == "title of abc"


def test_sync_functions_are_supported():
    @requires_session
    def f(session_id, value=1):
        return value

    assert f("abc", value=2) == 2
    with pytest.raises(InvalidArgumentError):
        f("")


def test_signature_is_preserved_under_the_envelope():
    @tool_envelope
    @requires_session
    async def click(session_id: str, selector: str, force: bool = False) -> str:
        return "ok"

    assert list(inspect.signature(click).parameters) == ["session_id", "selector", "force"]


def test_envelope_reports_invalid_argument(event_loop):
    @tool_envelope
    @requires_session
    async def refresh(session_id: str) -> str:
        return "never"

    payload = json.loads(event_loop.run_until_complete(refresh(session_id="")))
    assert payload["ok"] is False
    assert payload["error"]["code"] == "invalid_argument"


def test_function_without_session_id_is_rejected():
    with pytest.raises(TypeError):
        @requires_session
        def list_everything():
            return []

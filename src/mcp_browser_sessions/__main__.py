#region Overview
"""
## Sessions

Every browser interaction happens inside a session. An agent first calls
`create_session` (optionally choosing a browser, a Chrome user profile or
an anti-detection bot profile) and passes the returned `session_id` to
every other tool. The browser is launched on the first tool call that needs
it, not at creation time.

Several agents can work at the same time, each in its own session: tool
calls against different sessions run in parallel, calls against the same
session wait for each other. Sessions that stay unused for
SESSION_IDLE_TIMEOUT seconds are closed automatically. At most
MAX_CONCURRENT_SESSIONS sessions exist at any time.

## Selectors

Element tools accept CSS selectors by default. Prefix a selector with
`xpath:` (or start it with `//`) to use XPath, or pass `selector_type`
("css", "xpath", "id", "name", "tag", "class", "link_text").

## Results

Every tool returns a JSON object with an `ok` flag. Failures carry an
`error` object with a machine-readable `code` (`invalid_argument`,
`session_not_found`, `max_sessions_reached`, `browser_error`,
`invalid_configuration`, `tool_error`) and, for failed page actions, a
`diagnostics` block.
"""
#endregion

#region Imports
import sys
import signal
import logging
import argparse
import asyncio
import json
from typing import Any, Dict, List, Optional
from mcp.server.fastmcp import FastMCP
#endregion

#region Import from your package __init__.py
from mcp_browser_sessions import __version__
from mcp_browser_sessions import resources
from mcp_browser_sessions.config import load_configuration
from mcp_browser_sessions.context import ServerContext, get_context, set_context, reset_context
from mcp_browser_sessions.decorators import tool_envelope, requires_session
from mcp_browser_sessions.dispatch import run_in_session
from mcp_browser_sessions.sessions import SessionManager
from mcp_browser_sessions.tools import (
    session_management,
    navigation,
    interaction,
    extraction,
    screenshots,
    waiting,
    advanced,
)
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion

#region Helper Functions
async def _in_session(session_id: str, action, /, **params) -> dict:
    """Run one tool implementation against the session's browser."""
    ctx = get_context()
    return await run_in_session(ctx.manager, session_id, action, tool=action.__name__, **params)


def _as_json(payload: dict) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
#endregion

#region Logging
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "info", log_file: Optional[str] = None) -> None:
    """
    Send log records to stderr (stdout carries the stdio transport) and,
    optionally, to a file.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(getattr(logging, (level or "info").upper(), logging.INFO))
#endregion

#region FastMCP Initialization
mcp = FastMCP("mcp_browser_sessions")
#endregion

#region Tools -- Session management
@mcp.tool()
@tool_envelope
async def create_session(
    browser_id: Optional[str] = None,
    user_profile_id: Optional[str] = None,
    bot_profile_id: Optional[str] = None,
    browser_path: Optional[str] = None,
    botbrowser_profile: Optional[str] = None,
    headless: Optional[bool] = None,
    timeout: Optional[int] = None,
    browser_options: Optional[Dict[str, Optional[str]]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a new isolated browser session and return its session_id.

    The browser starts lazily on the first session-scoped tool call.

    Args:
        browser_id: Id of a configured browser (see browsers://list). Defaults to the first configured browser.
        user_profile_id: Id of a configured Chrome user profile (see browsers://user-profiles).
        bot_profile_id: Id of a configured anti-detection profile (see browsers://bot-profiles).
        browser_path: Explicit browser executable; used only when browser_id is not given.
        botbrowser_profile: Explicit bot profile path; used only when bot_profile_id is not given.
        headless: Run without a window. Mandatory (and the default) inside Docker.
        timeout: Page load / script timeout in seconds.
        browser_options: Extra Chrome switches, e.g. {"--window-size": "1280,800", "--mute-audio": null}.
        metadata: Free-form data stored with the session (e.g. {"purpose": "checkout test"}).

    Returns:
        JSON with ok, session_id and the effective options.
    """
    ctx = get_context()
    return session_management.create_session(
        ctx.manager,
        ctx.config,
        browser_id=browser_id,
        user_profile_id=user_profile_id,
        bot_profile_id=bot_profile_id,
        browser_path=browser_path,
        botbrowser_profile=botbrowser_profile,
        headless=headless,
        timeout=timeout,
        browser_options=browser_options,
        metadata=metadata,
    )

@mcp.tool()
@tool_envelope
async def list_sessions() -> str:
    """List all sessions (id, active, created/last used, idle seconds, browser type, metadata)."""
    return session_management.list_sessions(get_context().manager)

@mcp.tool()
@tool_envelope
async def close_session(session_id: str) -> str:
    """Close a session: its browser is stopped and the session_id becomes invalid."""
    manager = get_context().manager
    return await asyncio.to_thread(session_management.close_session, manager, session_id)

@mcp.tool()
@tool_envelope
async def get_session_info(session_id: str) -> str:
    """Describe one session without touching its browser."""
    return session_management.get_session_info(get_context().manager, session_id)
#endregion

#region Tools -- Navigation
@mcp.tool()
@tool_envelope
@requires_session
async def navigate(session_id: str, url: str, wait_for: str = "load", timeout: float = 30.0) -> str:
    """
    Navigate the session's browser to a URL.

    Args:
        session_id: Session returned by create_session.
        url: Absolute URL including the protocol (e.g. "https://example.com").
        wait_for: "load" (document interactive) or "complete".
        timeout: Seconds to wait for the document to become ready.

    Returns:
        JSON with ok, url and title.
    """
    return await _in_session(session_id, navigation.navigate, url=url, wait_for=wait_for, timeout=timeout)

@mcp.tool()
@tool_envelope
@requires_session
async def go_back(session_id: str) -> str:
    """Go back in the session's browser history."""
    return await _in_session(session_id, navigation.go_back)

@mcp.tool()
@tool_envelope
@requires_session
async def go_forward(session_id: str) -> str:
    """Go forward in the session's browser history."""
    return await _in_session(session_id, navigation.go_forward)

@mcp.tool()
@tool_envelope
@requires_session
async def refresh(session_id: str) -> str:
    """Reload the current page."""
    return await _in_session(session_id, navigation.refresh)
#endregion

#region Tools -- Interaction
@mcp.tool()
@tool_envelope
@requires_session
async def click(
    session_id: str,
    selector: str,
    selector_type: str = "css",
    timeout: float = 5.0,
    force: bool = False,
) -> str:
    """
    Click an element.

    Args:
        session_id: Session returned by create_session.
        selector: CSS selector, or XPath with the "xpath:" prefix.
        selector_type: Selector type when no prefix is used.
        timeout: Seconds to wait for the element.
        force: Click through JavaScript when the native click is blocked or the element is hidden.
    """
    return await _in_session(
        session_id, interaction.click,
        selector=selector, selector_type=selector_type, timeout=timeout, force=force,
    )

@mcp.tool()
@tool_envelope
@requires_session
async def fill_form(
    session_id: str,
    fields: List[Dict[str, str]],
    clear_first: bool = True,
    timeout: float = 5.0,
) -> str:
    """
    Fill one or more form fields.

    Args:
        session_id: Session returned by create_session.
        fields: List of {"selector": "...", "value": "..."} objects (optional "selector_type").
        clear_first: Clear each field before typing.
        timeout: Seconds to wait for each field.
    """
    return await _in_session(session_id, interaction.fill_form, fields=fields, clear_first=clear_first, timeout=timeout)

@mcp.tool()
@tool_envelope
@requires_session
async def press_key(
    session_id: str,
    key: str,
    selector: Optional[str] = None,
    selector_type: str = "css",
) -> str:
    """
    Press a key (Enter, Tab, Escape, ArrowDown, F5, ...) on an element or on the focused element.
    """
    return await _in_session(session_id, interaction.press_key, key=key, selector=selector, selector_type=selector_type)

@mcp.tool()
@tool_envelope
@requires_session
async def hover(session_id: str, selector: str, selector_type: str = "css") -> str:
    """Move the mouse over an element."""
    return await _in_session(session_id, interaction.hover, selector=selector, selector_type=selector_type)

@mcp.tool()
@tool_envelope
@requires_session
async def drag_and_drop(
    session_id: str,
    source_selector: str,
    target_selector: Optional[str] = None,
    target_x: Optional[float] = None,
    target_y: Optional[float] = None,
    steps: int = 10,
    selector_type: str = "css",
) -> str:
    """
    Drag an element and drop it onto another element or onto viewport coordinates.

    Args:
        session_id: Session returned by create_session.
        source_selector: Element to drag.
        target_selector: Drop target element (or give target_x and target_y instead).
        target_x: Drop X coordinate in the viewport.
        target_y: Drop Y coordinate in the viewport.
        steps: Number of intermediate pointer moves (default 10).
        selector_type: Selector type when no prefix is used.
    """
    return await _in_session(
        session_id, interaction.drag_and_drop,
        source_selector=source_selector, target_selector=target_selector,
        target_x=target_x, target_y=target_y, steps=steps, selector_type=selector_type,
    )

@mcp.tool()
@tool_envelope
@requires_session
async def query_shadow_dom(
    session_id: str,
    host_selector: str,
    selector: str,
    action: str = "get_text",
    attribute: Optional[str] = None,
    multiple: bool = False,
) -> str:
    """
    Click or read elements inside a web component's open shadow root.

    Args:
        session_id: Session returned by create_session.
        host_selector: Selector of the shadow host element.
        selector: CSS selector evaluated inside the shadow root.
        action: "click", "get_text", "get_html" or "get_attribute".
        attribute: Attribute name (required for get_attribute).
        multiple: Return every match instead of the first one (not for click).
    """
    return await _in_session(
        session_id, interaction.query_shadow_dom,
        host_selector=host_selector, selector=selector, action=action, attribute=attribute, multiple=multiple,
    )
#endregion

#region Tools -- Extraction
@mcp.tool()
@tool_envelope
@requires_session
async def get_text(session_id: str, selector: str, selector_type: str = "css", multiple: bool = False) -> str:
    """Text content of the first matching element, or of all matches with multiple=True."""
    return await _in_session(session_id, extraction.get_text, selector=selector, selector_type=selector_type, multiple=multiple)

@mcp.tool()
@tool_envelope
@requires_session
async def get_html(
    session_id: str,
    selector: Optional[str] = None,
    selector_type: str = "css",
    clean: bool = False,
    max_chars: Optional[int] = None,
) -> str:
    """
    HTML of the whole page or of one element.

    Args:
        session_id: Session returned by create_session.
        selector: Optional element selector.
        selector_type: Selector type when no prefix is used.
        clean: Remove scripts, styles, comments and other non-content tags.
        max_chars: Truncate the returned HTML to this many characters.
    """
    return await _in_session(
        session_id, extraction.get_html,
        selector=selector, selector_type=selector_type, clean=clean, max_chars=max_chars,
    )

@mcp.tool()
@tool_envelope
@requires_session
async def get_title(session_id: str) -> str:
    """Title of the current page."""
    return await _in_session(session_id, extraction.get_title)

@mcp.tool()
@tool_envelope
@requires_session
async def get_url(session_id: str) -> str:
    """URL of the current page."""
    return await _in_session(session_id, extraction.get_url)

@mcp.tool()
@tool_envelope
@requires_session
async def get_attribute(session_id: str, selector: str, attribute: str, selector_type: str = "css") -> str:
    """Value of one attribute (or DOM property) of an element."""
    return await _in_session(
        session_id, extraction.get_attribute,
        selector=selector, attribute=attribute, selector_type=selector_type,
    )

@mcp.tool()
@tool_envelope
@requires_session
async def find_by_text(
    session_id: str,
    text: str,
    tag: str = "*",
    exact: bool = False,
    multiple: bool = False,
) -> str:
    """
    Find elements by their visible text.

    Returns a CSS selector for each match that can be passed to click, hover, etc.

    Args:
        session_id: Session returned by create_session.
        text: Text to search for.
        tag: Restrict to one tag ("button", "a", ...); "*" for any.
        exact: Match the whole text instead of a substring.
        multiple: Return every match instead of the first visible one.
    """
    return await _in_session(session_id, extraction.find_by_text, text=text, tag=tag, exact=exact, multiple=multiple)
#endregion

#region Tools -- Screenshots
@mcp.tool()
@tool_envelope
@requires_session
async def screenshot(
    session_id: str,
    selector: Optional[str] = None,
    selector_type: str = "css",
    save_to: Optional[str] = None,
) -> str:
    """
    Capture the viewport, or one element, as a base64-encoded PNG.

    Args:
        session_id: Session returned by create_session.
        selector: Optional element to capture.
        selector_type: Selector type when no prefix is used.
        save_to: Optional file path to also write the PNG to.
    """
    return await _in_session(session_id, screenshots.screenshot, selector=selector, selector_type=selector_type, save_to=save_to)
#endregion

#region Tools -- Waiting
@mcp.tool()
@tool_envelope
@requires_session
async def wait_for_element(
    session_id: str,
    selector: str,
    state: str = "visible",
    selector_type: str = "css",
    timeout: float = 30.0,
) -> str:
    """Wait until an element is "exists", "visible", "hidden" or "clickable"."""
    return await _in_session(
        session_id, waiting.wait_for_element,
        selector=selector, state=state, selector_type=selector_type, timeout=timeout,
    )

@mcp.tool()
@tool_envelope
@requires_session
async def wait_for_navigation(session_id: str, timeout: float = 30.0, wait_until: str = "load") -> str:
    """Wait for the current URL to change (e.g. after a form submit), then for the page to load."""
    return await _in_session(session_id, waiting.wait_for_navigation, timeout=timeout, wait_until=wait_until)

@mcp.tool()
@tool_envelope
@requires_session
async def wait(session_id: str, seconds: float) -> str:
    """Pause for a number of seconds (max 60). The session is busy meanwhile."""
    return await _in_session(session_id, waiting.wait, seconds=seconds)
#endregion

#region Tools -- Advanced
@mcp.tool()
@tool_envelope
@requires_session
async def execute_script(session_id: str, script: str) -> str:
    """Run JavaScript in the page for its side effects."""
    return await _in_session(session_id, advanced.execute_script, script=script)

@mcp.tool()
@tool_envelope
@requires_session
async def evaluate_js(session_id: str, expression: str) -> str:
    """Evaluate a JavaScript expression and return its value (e.g. "document.links.length")."""
    return await _in_session(session_id, advanced.evaluate_js, expression=expression)

@mcp.tool()
@tool_envelope
@requires_session
async def get_cookies(session_id: str, domain: Optional[str] = None) -> str:
    """Cookies visible to the current page, optionally filtered by domain."""
    return await _in_session(session_id, advanced.get_cookies, domain=domain)

@mcp.tool()
@tool_envelope
@requires_session
async def set_cookie(
    session_id: str,
    name: str,
    value: str,
    domain: Optional[str] = None,
    path: str = "/",
    secure: bool = False,
    http_only: bool = False,
    expiry: Optional[int] = None,
) -> str:
    """Set a cookie. Navigate to the cookie's domain first."""
    return await _in_session(
        session_id, advanced.set_cookie,
        name=name, value=value, domain=domain, path=path, secure=secure, http_only=http_only, expiry=expiry,
    )

@mcp.tool()
@tool_envelope
@requires_session
async def clear_cookies(session_id: str, domain: Optional[str] = None) -> str:
    """Delete all cookies, or only those of one domain."""
    return await _in_session(session_id, advanced.clear_cookies, domain=domain)
#endregion

#region Resources
@mcp.resource("browsers://list", mime_type="application/json")
def browsers_resource() -> str:
    """All configured browsers and the default one."""
    return _as_json(resources.list_browsers(get_context().config))

@mcp.resource("browsers://user-profiles", mime_type="application/json")
def user_profiles_resource() -> str:
    """All configured Chrome user profiles."""
    return _as_json(resources.list_user_profiles(get_context().config))

@mcp.resource("browsers://bot-profiles", mime_type="application/json")
def bot_profiles_resource() -> str:
    """All configured anti-detection profiles."""
    return _as_json(resources.list_bot_profiles(get_context().config))

@mcp.resource("browsers://capabilities", mime_type="application/json")
def capabilities_resource() -> str:
    """Server version, limits and feature flags."""
    return _as_json(resources.capabilities(get_context().config))

@mcp.resource("browsers://browser/{browser_id}", mime_type="application/json")
def browser_resource(browser_id: str) -> str:
    """One configured browser, with an existence check of its executable."""
    return _as_json(resources.browser_detail(get_context().config, browser_id))

@mcp.resource("browsers://user-profile/{profile_id}", mime_type="application/json")
def user_profile_resource(profile_id: str) -> str:
    """One configured Chrome user profile."""
    return _as_json(resources.user_profile_detail(get_context().config, profile_id))

@mcp.resource("browsers://bot-profile/{profile_id}", mime_type="application/json")
def bot_profile_resource(profile_id: str) -> str:
    """One configured anti-detection profile."""
    return _as_json(resources.bot_profile_detail(get_context().config, profile_id))
#endregion

#region Entry point
TRANSPORTS = {"stdio": "stdio", "http": "streamable-http"}


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mcp-browser-sessions",
        description="MCP server for multi-session browser automation.",
    )
    parser.add_argument("--transport", choices=sorted(TRANSPORTS), help="Transport (default: MCP_TRANSPORT or stdio)")
    parser.add_argument("--host", help="HTTP bind address (default: MCP_SERVER_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="HTTP port (default: MCP_SERVER_PORT or 3000)")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], help="Log level (default: LOG_LEVEL or info)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _log_startup(ctx: ServerContext, transport: str) -> None:
    config = ctx.config
    logger.info(f"Starting mcp_browser_sessions {__version__} (transport: {transport})")
    logger.info(
        f"Max sessions: {config.max_sessions}, idle timeout: {config.session_idle_timeout}s, "
        f"cleanup interval: {config.cleanup_interval}s, headless: {config.headless}"
    )
    for browser in config.browsers:
        logger.info(f"Browser '{browser.id}': {browser.name} ({browser.type}) {browser.path or '<system>'}")
    for profile in config.user_profiles:
        logger.info(f"User profile '{profile.id}': {profile.path}")
    for profile in config.bot_profiles:
        logger.info(f"Bot profile '{profile.id}': {profile.path}{' (encrypted)' if profile.encrypted else ''}")


def _terminate(signum, frame):
    raise SystemExit(0)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    config = load_configuration()
    configure_logging(args.log_level or config.log_level, config.log_file)

    transport = args.transport or config.transport
    if transport not in TRANSPORTS:
        logger.error(f"Unsupported transport {transport!r}; expected one of {sorted(TRANSPORTS)}")
        return 2

    ctx = set_context(ServerContext(config=config, manager=SessionManager(config)))
    _log_startup(ctx, transport)
    signal.signal(signal.SIGTERM, _terminate)

    try:
        if transport == "http":
            mcp.settings.host = args.host or config.server_host
            mcp.settings.port = args.port or config.server_port
        mcp.run(transport=TRANSPORTS[transport])
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        reset_context()
    return 0
#endregion


if __name__ == "__main__":
    sys.exit(main())

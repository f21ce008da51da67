# mcp_browser_sessions/tools/__init__.py
"""
Tool implementations.

Session management tools take the SessionManager; every other tool takes
the Selenium driver of one session as its first argument and returns a
plain dict. The MCP layer (__main__) wires them to sessions through
mcp_browser_sessions.dispatch.
"""

from .session_management import (
    create_session,
    list_sessions,
    close_session,
    get_session_info,
)

from .navigation import (
    navigate,
    go_back,
    go_forward,
    refresh,
)

from .interaction import (
    click,
    fill_form,
    press_key,
    hover,
    drag_and_drop,
    query_shadow_dom,
)

from .extraction import (
    get_text,
    get_html,
    get_title,
    get_url,
    get_attribute,
    find_by_text,
)

from .screenshots import (
    screenshot,
)

from .waiting import (
    wait_for_element,
    wait_for_navigation,
    wait,
)

from .advanced import (
    execute_script,
    evaluate_js,
    get_cookies,
    set_cookie,
    clear_cookies,
)

__all__ = [
    # Session management
    'create_session',
    'list_sessions',
    'close_session',
    'get_session_info',
    # Navigation
    'navigate',
    'go_back',
    'go_forward',
    'refresh',
    # Interaction
    'click',
    'fill_form',
    'press_key',
    'hover',
    'drag_and_drop',
    'query_shadow_dom',
    # Extraction
    'get_text',
    'get_html',
    'get_title',
    'get_url',
    'get_attribute',
    'find_by_text',
    # Screenshots
    'screenshot',
    # Waiting
    'wait_for_element',
    'wait_for_navigation',
    'wait',
    # Advanced
    'execute_script',
    'evaluate_js',
    'get_cookies',
    'set_cookie',
    'clear_cookies',
]

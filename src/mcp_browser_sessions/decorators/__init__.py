# mcp_browser_sessions/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .envelope import tool_envelope, error_payload
from .session import requires_session

__all__ = [
    "tool_envelope",
    "error_payload",
    "requires_session",
]

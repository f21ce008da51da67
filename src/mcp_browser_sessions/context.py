"""
Centralized server state.

The MCP tool functions are plain module-level callables, so they reach the
configuration and the SessionManager through one lazily created context
object instead of module-level globals. Components below this layer never
call get_context(): they receive the Configuration and the manager
explicitly.

Usage:
    from mcp_browser_sessions.context import get_context

    ctx = get_context()
    session_id = ctx.manager.create_session({"headless": True})
"""

from dataclasses import dataclass
from typing import Optional

from .config.environment import load_configuration
from .config.models import Configuration
from .sessions.manager import SessionManager


@dataclass
class ServerContext:
    """
    Everything a tool invocation needs.

    Attributes:
        config: Immutable process-wide configuration
        manager: The session registry
    """

    config: Configuration
    manager: SessionManager

    def shutdown(self) -> None:
        self.manager.shutdown()


# ============================================================================
# Global Context Management
# ============================================================================

_global_context: Optional[ServerContext] = None


def get_context() -> ServerContext:
    """
    Get or create the global server context.

    This is a singleton pattern - all calls return the same context instance.
    Use reset_context() to clear the singleton (mainly for testing).
    """
    global _global_context

    if _global_context is None:
        config = load_configuration()
        _global_context = ServerContext(config=config, manager=SessionManager(config))

    return _global_context


def set_context(ctx: ServerContext) -> ServerContext:
    """Install an explicitly built context (CLI startup and tests)."""
    global _global_context
    _global_context = ctx
    return ctx


def reset_context() -> None:
    """
    Shut down and drop the global context.

    All sessions are closed and the cleanup thread is stopped.
    """
    global _global_context
    ctx, _global_context = _global_context, None
    if ctx is not None:
        ctx.shutdown()


__all__ = [
    "ServerContext",
    "get_context",
    "set_context",
    "reset_context",
]

# mcp_browser_sessions/decorators/session.py
import inspect
import functools

from ..dispatch import require_session_id


def requires_session(fn):
    """
    Reject calls without a usable ``session_id`` before the tool body runs.

    Raises InvalidArgumentError, which tool_envelope turns into an
    ``invalid_argument`` result. The wrapped signature is preserved so MCP
    schema generation still sees every parameter.
    """
    sig = inspect.signature(fn)
    if "session_id" not in sig.parameters:
        raise TypeError(f"{fn.__name__} has no session_id parameter")

    def _check(args, kwargs):
        bound = sig.bind_partial(*args, **kwargs)
        require_session_id(bound.arguments.get("session_id"), tool=fn.__name__)

    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            _check(args, kwargs)
            return await fn(*args, **kwargs)
        return wrapper
    else:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            _check(args, kwargs)
            return fn(*args, **kwargs)
        return wrapper

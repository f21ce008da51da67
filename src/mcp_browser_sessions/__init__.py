"""
MCP server for browser automation with many isolated sessions.

Each session owns one Selenium-driven Chrome/Chromium (or BotBrowser)
process, started lazily on first use and reclaimed after a period of
inactivity. Tool calls address a session by id; calls against different
sessions run in parallel, calls against the same session are serialized.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

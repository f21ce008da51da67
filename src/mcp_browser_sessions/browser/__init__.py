"""Browser process lifecycle."""

from .handle import BrowserHandle, BrowserState
from .launcher import Launcher, build_chrome_options, launch_webdriver

__all__ = [
    "BrowserHandle",
    "BrowserState",
    "Launcher",
    "build_chrome_options",
    "launch_webdriver",
]

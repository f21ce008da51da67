"""WebDriver creation from a resolved session configuration."""

import os
import tempfile
from typing import Callable

from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service as ChromeService

from ..config.resolver import ResolvedSessionConfig

import logging
logger = logging.getLogger(__name__)


Launcher = Callable[[ResolvedSessionConfig], object]
"""launcher(config) -> driver; the driver must expose quit()."""


def chromedriver_log_path() -> str:
    """Get the ChromeDriver log file path shared by every browser this process launches."""
    return os.path.join(tempfile.gettempdir(), f"chromedriver_sessions_{os.getpid()}.log")


def build_chrome_options(config: ResolvedSessionConfig) -> Options:
    """
    Build Selenium ChromeOptions for one session.

    Args:
        config: Resolved session configuration

    Returns:
        Options: binary location, launch switches, headless mode and user data dir applied
    """
    options = Options()
    if config.browser_path:
        options.binary_location = config.browser_path

    for arg in config.launch_arguments():
        options.add_argument(arg)

    if config.user_data_dir:
        options.add_argument(f"--user-data-dir={config.user_data_dir}")

    if config.headless:
        options.add_argument("--headless=new")

    return options


def launch_webdriver(config: ResolvedSessionConfig) -> webdriver.Chrome:
    """Launch a new Chrome/Chromium (or BotBrowser) process driven by ChromeDriver."""
    options = build_chrome_options(config)

    # Handle differing Selenium versions that accept log_output vs. log_path
    log_file = chromedriver_log_path()
    try:
        service = ChromeService(log_output=log_file)  # newer Selenium
    except TypeError:
        service = ChromeService(log_path=log_file)    # older Selenium

    driver = webdriver.Chrome(service=service, options=options)
    try:
        driver.set_page_load_timeout(config.timeout)
        driver.set_script_timeout(config.timeout)
    except Exception:
        driver.quit()
        raise

    logger.debug(f"ChromeDriver log: {log_file}")
    return driver


__all__ = [
    "Launcher",
    "chromedriver_log_path",
    "build_chrome_options",
    "launch_webdriver",
]

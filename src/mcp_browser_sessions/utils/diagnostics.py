"""Diagnostics and debugging information utility functions."""

import sys
import platform
from typing import Optional

import psutil
import selenium

from ..config.resolver import ResolvedSessionConfig


def _driver_process_summary(driver) -> str:
    """ChromeDriver pid and the number of browser processes it spawned."""
    service = getattr(driver, "service", None)
    process = getattr(service, "process", None)
    pid = getattr(process, "pid", None)
    if not pid:
        return "<unknown>"
    try:
        proc = psutil.Process(pid)
        children = proc.children(recursive=True)
        return f"pid {pid} ({proc.status()}), {len(children)} child processes"
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return f"pid {pid} (gone)"


def collect_diagnostics(
    driver=None,
    exc: Optional[Exception] = None,
    config: Optional[ResolvedSessionConfig] = None,
) -> str:
    """
    Collect diagnostic information about the browser, driver, and environment.

    Args:
        driver: Selenium WebDriver instance of the session (can be None)
        exc: Exception that occurred (can be None)
        config: Resolved configuration of the session (can be None)

    Returns:
        str: Formatted diagnostic information
    """
    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"Selenium          : {getattr(selenium, '__version__', '?')}",
    ]

    if config is not None:
        parts += [
            f"Browser           : {config.browser.id if config.browser else '<none>'}",
            f"Browser binary    : {config.browser_path or '<system>'}",
            f"User-data dir     : {config.user_data_dir or '<temporary>'}",
            f"Bot profile       : {config.botbrowser_profile or '<none>'}",
            f"Headless          : {config.headless}",
        ]

    parts.append(f"Driver initialized: {driver is not None}")

    if driver is not None:
        try:
            parts.append(f"Current URL       : {driver.current_url}")
        except Exception:
            parts.append("Current URL       : <unknown>")

        cap = getattr(driver, "capabilities", None) or {}
        if not isinstance(cap, dict):
            cap = {}
        parts.append(f"Browser version   : {cap.get('browserVersion') or '<unknown>'}")
        chrome_cap = cap.get("chrome") or {}
        drv_ver = chrome_cap.get("chromedriverVersion") if isinstance(chrome_cap, dict) else None
        parts.append(f"Driver version    : {drv_ver or '<unknown>'}")
        parts.append(f"Driver process    : {_driver_process_summary(driver)}")

    if exc:
        parts += [
            "---- ERROR ----",
            f"Error type        : {type(exc).__name__}",
            f"Error message     : {exc}",
        ]

    return "\n".join(parts)


__all__ = ['collect_diagnostics']

"""Waiting tool implementations."""

import time
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC

from ..actions.elements import parse_selector
from ..actions.navigation import wait_document_ready, page_meta
from ..errors import InvalidArgumentError, ToolError

import logging
logger = logging.getLogger(__name__)


MAX_WAIT_SECONDS = 60.0

ELEMENT_CONDITIONS = {
    "exists": EC.presence_of_element_located,
    "visible": EC.visibility_of_element_located,
    "hidden": EC.invisibility_of_element_located,
    "clickable": EC.element_to_be_clickable,
}


def wait_for_element(driver, selector: str, state: str = "visible", selector_type: str = "css", timeout: float = 30.0) -> dict:
    """
    Wait until an element exists, is visible, is hidden or is clickable.
    """
    condition = ELEMENT_CONDITIONS.get((state or "").lower())
    if condition is None:
        raise InvalidArgumentError(f"state must be one of {sorted(ELEMENT_CONDITIONS)}, got {state!r}")

    locator = parse_selector(selector, selector_type)
    logger.info(f"Waiting for element ({state}): {selector}")
    started = time.monotonic()
    try:
        WebDriverWait(driver, timeout).until(condition(locator))
    except TimeoutException:
        raise ToolError(f"Timeout waiting for element to be {state}: {selector}")

    return {
        "ok": True,
        "selector": selector,
        "state": state,
        "elapsed_seconds": round(time.monotonic() - started, 2),
    }


def wait_for_navigation(driver, timeout: float = 30.0, wait_until: str = "load") -> dict:
    """Wait for the URL to change, then for the new document to load."""
    logger.info(f"Waiting for navigation ({wait_until})")
    started = time.monotonic()
    current_url = driver.current_url
    try:
        WebDriverWait(driver, timeout, poll_frequency=0.5).until(lambda d: d.current_url != current_url)
    except TimeoutException:
        raise ToolError("Timeout waiting for navigation")

    remaining = max(0.0, timeout - (time.monotonic() - started))
    wait_document_ready(driver, timeout=remaining, complete=(wait_until or "load").lower() != "domcontentloaded")
    return {
        "ok": True,
        **page_meta(driver),
        "elapsed_seconds": round(time.monotonic() - started, 2),
    }


def wait(driver, seconds: float) -> dict:
    """Sleep inside the session (the session stays locked meanwhile)."""
    if seconds is None or seconds < 0 or seconds > MAX_WAIT_SECONDS:
        raise InvalidArgumentError(f"seconds must be between 0 and {MAX_WAIT_SECONDS:g}")
    logger.info(f"Waiting for {seconds} seconds")
    time.sleep(seconds)
    return {"ok": True, "message": f"Waited {seconds} seconds"}


__all__ = ['wait_for_element', 'wait_for_navigation', 'wait', 'MAX_WAIT_SECONDS']

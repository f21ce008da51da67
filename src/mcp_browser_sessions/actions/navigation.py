"""Page readiness helpers."""

from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support.ui import WebDriverWait

import logging
logger = logging.getLogger(__name__)


def wait_document_ready(driver: WebDriver, timeout: float = 10.0, complete: bool = False) -> bool:
    """
    Wait until document.readyState is interactive (or complete).

    Returns False instead of raising when the page never gets there; a slow
    page is not a failed action.
    """
    states = ("complete",) if complete else ("interactive", "complete")
    try:
        WebDriverWait(driver, timeout).until(
            lambda d: d.execute_script("return document.readyState") in states
        )
        return True
    except Exception as e:
        logger.debug(f"Document not ready after {timeout}s: {e}")
        return False


def page_meta(driver: WebDriver) -> dict:
    return {"url": driver.current_url, "title": driver.title}


__all__ = [
    'wait_document_ready',
    'page_meta',
]

"""Navigation tool implementations."""

from ..actions.navigation import wait_document_ready, page_meta
from ..errors import InvalidArgumentError

import logging
logger = logging.getLogger(__name__)


def navigate(driver, url: str, wait_for: str = "load", timeout: float = 30.0) -> dict:
    """
    Navigate to a URL.

    Args:
        url: Absolute URL including the protocol
        wait_for: "load" (DOM interactive) or "complete"
        timeout: Seconds to wait for the document to become ready
    """
    if not url or not url.startswith(("http://", "https://", "file://", "about:", "data:")):
        raise InvalidArgumentError(f"url must include a protocol (http:// or https://): {url!r}")

    logger.info(f"Navigating to: {url}")
    driver.get(url)
    wait_document_ready(driver, timeout=timeout, complete=(wait_for or "load").lower() == "complete")
    return {"ok": True, "action": "navigate", **page_meta(driver)}


def go_back(driver) -> dict:
    driver.back()
    wait_document_ready(driver)
    return {"ok": True, "action": "go_back", **page_meta(driver)}


def go_forward(driver) -> dict:
    driver.forward()
    wait_document_ready(driver)
    return {"ok": True, "action": "go_forward", **page_meta(driver)}


def refresh(driver) -> dict:
    driver.refresh()
    wait_document_ready(driver)
    return {"ok": True, "action": "refresh", **page_meta(driver)}


__all__ = ['navigate', 'go_back', 'go_forward', 'refresh']

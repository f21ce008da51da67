"""Screenshot capture tool implementation."""

import base64
from typing import Optional
from selenium.common.exceptions import TimeoutException

from ..actions.elements import find_element
from ..errors import ToolError

import logging
logger = logging.getLogger(__name__)


def screenshot(driver, selector: Optional[str] = None, selector_type: str = "css", save_to: Optional[str] = None) -> dict:
    """
    Capture the viewport (or one element) as PNG.

    Args:
        selector: Optional element to capture instead of the viewport
        save_to: Optional path where the PNG is also written

    Returns:
        dict with the base64-encoded PNG under "data"
    """
    logger.info("Taking screenshot")
    if selector:
        try:
            el = find_element(driver, selector, selector_type, timeout=5.0)
        except TimeoutException:
            raise ToolError(f"Element not found: {selector}")
        driver.execute_script("arguments[0].scrollIntoView({block: 'center'});", el)
        png_bytes = el.screenshot_as_png
    else:
        png_bytes = driver.get_screenshot_as_png()

    if save_to:
        with open(save_to, "wb") as f:
            f.write(png_bytes)

    return {
        "ok": True,
        "type": "image",
        "mime_type": "image/png",
        "data": base64.b64encode(png_bytes).decode("ascii"),
        "saved_to": save_to,
        "selector": selector,
    }


__all__ = ['screenshot']

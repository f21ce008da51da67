"""Element interaction tool implementations."""

import time
from typing import Dict, List, Optional, Tuple
from selenium.common.exceptions import (
    TimeoutException,
    StaleElementReferenceException,
    ElementClickInterceptedException,
    ElementNotInteractableException,
    NoSuchShadowRootException,
)
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.actions.action_builder import ActionBuilder
from selenium.webdriver.common.by import By

from ..actions.elements import find_element, wait_clickable
from ..actions.keyboard import normalize_key
from ..actions.navigation import wait_document_ready
from ..errors import InvalidArgumentError, ToolError
from ..utils.retry import retry_op

import logging
logger = logging.getLogger(__name__)


JS_CLICK = "arguments[0].scrollIntoView({block: 'center'}); arguments[0].click();"
JS_HOVER = (
    "arguments[0].dispatchEvent(new MouseEvent('mouseover', "
    "{bubbles: true, cancelable: true, view: window}));"
)


def _locate(driver, selector: str, selector_type: str, timeout: float, visible_only: bool = True):
    try:
        return retry_op(lambda: find_element(
            driver=driver,
            selector=selector,
            selector_type=selector_type,
            timeout=timeout,
            visible_only=visible_only,
        ))
    except TimeoutException:
        raise ToolError(f"Element not found: {selector}")


def click(driver, selector: str, selector_type: str = "css", timeout: float = 5.0, force: bool = False) -> dict:
    """
    Click an element.

    With force=True the element only has to exist, and the click falls back
    to a JavaScript click when the native one is intercepted or the element
    is not interactable.
    """
    logger.info(f"Clicking element: {selector} (force: {force})")
    el = _locate(driver, selector, selector_type, timeout, visible_only=not force)

    try:
        if not force:
            wait_clickable(el=el, driver=driver, timeout=timeout)
        retry_op(el.click)
        forced = False
    except (ElementClickInterceptedException, ElementNotInteractableException,
            StaleElementReferenceException, TimeoutException) as e:
        if not force:
            raise ToolError(f"Failed to click {selector}: {e.__class__.__name__}. Try with force=true")
        logger.warning(f"Native click failed, retrying with JavaScript: {e.__class__.__name__}")
        el = _locate(driver, selector, selector_type, timeout, visible_only=False)
        driver.execute_script(JS_CLICK, el)
        forced = True

    wait_document_ready(driver, timeout=timeout)
    return {
        "ok": True,
        "action": "click",
        "selector": selector,
        "selector_type": selector_type,
        "forced": forced,
    }


def fill_form(driver, fields: List[Dict[str, str]], clear_first: bool = True, timeout: float = 5.0) -> dict:
    """
    Fill one or more form fields.

    Args:
        fields: [{"selector": ..., "value": ..., "selector_type": "css"}, ...]
        clear_first: Clear each field before typing
    """
    if not fields:
        raise InvalidArgumentError("fields must be a non-empty list of {selector, value} objects")

    results = []
    for index, field in enumerate(fields):
        selector = field.get("selector")
        value = field.get("value")
        if not selector or value is None:
            raise InvalidArgumentError(f"fields[{index}] needs both 'selector' and 'value'")

        logger.info(f"Filling field: {selector}")
        el = _locate(driver, selector, field.get("selector_type", "css"), timeout)
        if clear_first:
            try:
                el.clear()
            except ElementNotInteractableException:
                logger.debug(f"Could not clear {selector}")
        el.send_keys(str(value))
        results.append({"selector": selector, "filled": True})

    return {"ok": True, "action": "fill_form", "fields": results}


def press_key(driver, key: str, selector: Optional[str] = None, selector_type: str = "css", timeout: float = 5.0) -> dict:
    """Send a key to an element, or to the focused element when no selector is given."""
    if not key:
        raise InvalidArgumentError("key is required")

    selenium_key = normalize_key(key)
    logger.info(f"Pressing key: {key}")
    if selector:
        el = _locate(driver, selector, selector_type, timeout)
        el.send_keys(selenium_key)
    else:
        ActionChains(driver).send_keys(selenium_key).perform()

    time.sleep(0.2)  # let key handlers run
    return {"ok": True, "action": "press_key", "key": key, "selector": selector}


def hover(driver, selector: str, selector_type: str = "css", timeout: float = 5.0) -> dict:
    logger.info(f"Hovering over element: {selector}")
    el = _locate(driver, selector, selector_type, timeout)
    try:
        ActionChains(driver).move_to_element(el).perform()
    except (ElementNotInteractableException, StaleElementReferenceException):
        driver.execute_script(JS_HOVER, el)
    return {"ok": True, "action": "hover", "selector": selector}


# Viewport coordinates of an element's center
JS_CENTER = (
    "const r = arguments[0].getBoundingClientRect();"
    "return {x: r.left + r.width / 2, y: r.top + r.height / 2};"
)


def _center(driver, el) -> Tuple[float, float]:
    point = driver.execute_script(JS_CENTER, el)
    if not point:
        raise ToolError("Could not determine element position")
    return float(point["x"]), float(point["y"])


def drag_and_drop(
    driver,
    source_selector: str,
    target_selector: Optional[str] = None,
    target_x: Optional[float] = None,
    target_y: Optional[float] = None,
    steps: int = 10,
    selector_type: str = "css",
    timeout: float = 5.0,
) -> dict:
    """
    Drag an element onto another element or onto viewport coordinates.

    The pointer is pressed on the source's center, moved to the target in
    ``steps`` increments (so drag handlers see intermediate moves) and released.

    Args:
        source_selector: Element to drag
        target_selector: Drop target; alternatively pass target_x and target_y
        steps: Number of intermediate pointer moves
    """
    if target_selector is None and (target_x is None or target_y is None):
        raise InvalidArgumentError("Either target_selector or both target_x and target_y must be provided")
    if isinstance(steps, bool) or not isinstance(steps, int) or steps < 1:
        raise InvalidArgumentError(f"steps must be a positive integer, got {steps!r}")

    logger.info(f"Dragging {source_selector} to {target_selector or (target_x, target_y)}")
    source = _locate(driver, source_selector, selector_type, timeout)
    from_x, from_y = _center(driver, source)
    if target_selector is not None:
        to_x, to_y = _center(driver, _locate(driver, target_selector, selector_type, timeout))
    else:
        to_x, to_y = float(target_x), float(target_y)

    actions = ActionBuilder(driver, duration=max(300 // steps, 10))
    pointer = actions.pointer_action
    pointer.move_to_location(round(from_x), round(from_y))
    pointer.pointer_down()
    for step in range(1, steps + 1):
        pointer.move_to_location(
            round(from_x + (to_x - from_x) * step / steps),
            round(from_y + (to_y - from_y) * step / steps),
        )
    pointer.pointer_up()
    actions.perform()

    return {
        "ok": True,
        "action": "drag_and_drop",
        "source_selector": source_selector,
        "target_selector": target_selector,
        "from": {"x": round(from_x), "y": round(from_y)},
        "to": {"x": round(to_x), "y": round(to_y)},
        "message": f"Dragged from ({round(from_x)}, {round(from_y)}) to ({round(to_x)}, {round(to_y)})",
    }


SHADOW_ACTIONS = ("click", "get_text", "get_html", "get_attribute")


def query_shadow_dom(
    driver,
    host_selector: str,
    selector: str,
    action: str = "get_text",
    attribute: Optional[str] = None,
    multiple: bool = False,
    selector_type: str = "css",
    timeout: float = 5.0,
) -> dict:
    """
    Act on elements inside an open shadow root.

    ``selector`` is a CSS selector evaluated inside the shadow root of the
    element matched by ``host_selector``. ``click`` always acts on the
    first match; the other actions return every match with multiple=True.
    """
    action = (action or "").lower()
    if action not in SHADOW_ACTIONS:
        raise InvalidArgumentError(f"action must be one of {list(SHADOW_ACTIONS)}, got {action!r}")
    if action == "get_attribute" and not attribute:
        raise InvalidArgumentError("attribute is required for action 'get_attribute'")
    if not selector:
        raise InvalidArgumentError("selector is required")

    logger.info(f"Querying shadow DOM: {host_selector} -> {selector} ({action})")
    host = _locate(driver, host_selector, selector_type, timeout, visible_only=False)
    try:
        root = host.shadow_root
    except NoSuchShadowRootException:
        raise ToolError(f"Element has no shadow root: {host_selector}")

    elements = root.find_elements(By.CSS_SELECTOR, selector)
    if not elements:
        raise ToolError(f"Element not found in shadow DOM: {selector}")

    result = {"ok": True, "action": action, "host_selector": host_selector, "selector": selector}
    if action == "click":
        el = elements[0]
        driver.execute_script("arguments[0].scrollIntoView({block: 'center'});", el)
        retry_op(el.click)
        result["message"] = f"Clicked element in shadow DOM: {selector}"
        return result

    if action == "get_text":
        read, one, many = (lambda el: el.text), "text", "texts"
    elif action == "get_html":
        read, one, many = (lambda el: el.get_attribute("innerHTML")), "html", "html"
    else:
        read, one, many = (lambda el: el.get_attribute(attribute)), "value", "values"
        result["attribute"] = attribute

    if multiple:
        values = [read(el) for el in elements]
        result.update({many: values, "count": len(values)})
    else:
        result[one] = read(elements[0])
    return result


__all__ = ['click', 'fill_form', 'press_key', 'hover', 'drag_and_drop', 'query_shadow_dom']

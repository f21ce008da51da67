"""Element lookup."""

from typing import List, Optional, Tuple
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC

from ..errors import InvalidArgumentError


XPATH_PREFIX = "xpath:"


def get_by_selector(selector_type: str):
    return {
        'css': By.CSS_SELECTOR,
        'xpath': By.XPATH,
        'id': By.ID,
        'name': By.NAME,
        'tag': By.TAG_NAME,
        'class': By.CLASS_NAME,
        'link_text': By.LINK_TEXT,
        'partial_link_text': By.PARTIAL_LINK_TEXT
    }.get((selector_type or "").lower())


def parse_selector(selector: str, selector_type: str = "css") -> Tuple[str, str]:
    """
    Resolve a selector into a (By, value) locator.

    Selectors prefixed with ``xpath:`` or starting with ``//`` are XPath
    regardless of selector_type.
    """
    if not selector:
        raise InvalidArgumentError("selector is required")
    if selector.startswith(XPATH_PREFIX):
        return By.XPATH, selector[len(XPATH_PREFIX):]
    if selector.startswith("//"):
        return By.XPATH, selector

    by = get_by_selector(selector_type)
    if not by:
        raise InvalidArgumentError(f"Unsupported selector type: {selector_type}")
    return by, selector


def wait_clickable(el: WebElement, driver: WebDriver, timeout: float = 10.0) -> WebElement:
    """Wait for an element to be clickable (displayed and enabled)."""
    WebDriverWait(driver, timeout).until(lambda d: el.is_displayed() and el.is_enabled())
    return el


def find_element(
    driver: WebDriver,
    selector: str,
    selector_type: str = "css",
    timeout: float = 10.0,
    visible_only: bool = False,
) -> WebElement:
    """
    Wait for an element and return it.

    Raises:
        TimeoutException: If no matching element appears within timeout
    """
    locator = parse_selector(selector, selector_type)
    wait = WebDriverWait(driver, timeout)
    if visible_only:
        return wait.until(EC.visibility_of_element_located(locator))
    return wait.until(EC.presence_of_element_located(locator))


def find_elements(driver: WebDriver, selector: str, selector_type: str = "css") -> List[WebElement]:
    """All current matches, without waiting."""
    return driver.find_elements(*parse_selector(selector, selector_type))


def first_visible(elements: List[WebElement]) -> Optional[WebElement]:
    """The first displayed element, else the first one, else None."""
    for el in elements:
        try:
            if el.is_displayed():
                return el
        except Exception:
            continue
    return elements[0] if elements else None


__all__ = [
    'XPATH_PREFIX',
    'get_by_selector',
    'parse_selector',
    'wait_clickable',
    'find_element',
    'find_elements',
    'first_visible',
]

"""Content extraction tool implementations."""

from typing import Optional
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.common.by import By

from ..actions.elements import find_element, find_elements, first_visible
from ..cleaners import approx_token_count, clean_html
from ..errors import InvalidArgumentError, ToolError

import logging
logger = logging.getLogger(__name__)


# Builds a short, reasonably unique CSS path for an element.
JS_CSS_PATH = """
const el = arguments[0];
if (el.id) return '#' + CSS.escape(el.id);
const parts = [];
let node = el;
while (node && node.nodeType === 1 && parts.length < 5) {
  let part = node.tagName.toLowerCase();
  if (node.id) { parts.unshift('#' + CSS.escape(node.id)); break; }
  const parent = node.parentElement;
  if (parent) {
    const same = Array.from(parent.children).filter(c => c.tagName === node.tagName);
    if (same.length > 1) part += ':nth-of-type(' + (same.indexOf(node) + 1) + ')';
  }
  parts.unshift(part);
  node = parent;
}
return parts.join(' > ');
"""


def _xpath_literal(text: str) -> str:
    """Quote text for use inside an XPath expression."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    pieces = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in pieces) + ")"


def get_text(driver, selector: str, selector_type: str = "css", multiple: bool = False) -> dict:
    """Text of the first (or every) matching element."""
    logger.info(f"Extracting text from: {selector}")
    elements = find_elements(driver, selector, selector_type)
    if not elements:
        raise ToolError(f"Element not found: {selector}")

    if multiple:
        texts = [el.text for el in elements]
        return {"ok": True, "selector": selector, "texts": texts, "count": len(texts)}
    return {"ok": True, "selector": selector, "text": elements[0].text}


def get_html(
    driver,
    selector: Optional[str] = None,
    selector_type: str = "css",
    clean: bool = False,
    max_chars: Optional[int] = None,
) -> dict:
    """
    HTML of the page or of one element.

    Args:
        selector: Optional element selector; the whole page when omitted
        clean: Strip scripts, styles and comments
        max_chars: Truncate the returned HTML
    """
    if selector:
        try:
            el = find_element(driver, selector, selector_type, timeout=5.0)
        except TimeoutException:
            raise ToolError(f"Element not found: {selector}")
        html = el.get_attribute("outerHTML") or ""
    else:
        html = driver.page_source or ""

    payload = {"ok": True, "selector": selector, "url": driver.current_url}
    if clean:
        html, pruned = clean_html(html)
        payload["pruned"] = pruned

    truncated = max_chars is not None and max_chars >= 0 and len(html) > max_chars
    if truncated:
        html = html[:max_chars]

    payload.update({
        "html": html,
        "truncated": truncated,
        "approx_tokens": approx_token_count(html),
    })
    return payload


def get_title(driver) -> dict:
    return {"ok": True, "title": driver.title}


def get_url(driver) -> dict:
    return {"ok": True, "url": driver.current_url}


def get_attribute(driver, selector: str, attribute: str, selector_type: str = "css") -> dict:
    if not attribute:
        raise InvalidArgumentError("attribute is required")
    logger.info(f"Getting attribute '{attribute}' from: {selector}")
    try:
        el = find_element(driver, selector, selector_type, timeout=5.0)
    except TimeoutException:
        raise ToolError(f"Element not found: {selector}")
    return {
        "ok": True,
        "selector": selector,
        "attribute": attribute,
        "value": el.get_attribute(attribute),
    }


def find_by_text(driver, text: str, tag: str = "*", exact: bool = False, multiple: bool = False) -> dict:
    """
    Find elements by their text content.

    Returns the first visible match (or every match with multiple=True),
    each with a CSS selector usable by the other tools.
    """
    if not text:
        raise InvalidArgumentError("text is required")

    literal = _xpath_literal(text)
    tag = tag or "*"
    if exact:
        xpath = f"//{tag}[normalize-space(text())={literal}]"
    else:
        xpath = f"//{tag}[contains(normalize-space(.), {literal})]"

    logger.info(f"Finding elements with text {text!r} in <{tag}> (exact: {exact})")
    elements = driver.find_elements(By.XPATH, xpath)
    if not elements:
        raise ToolError(f"No elements found with text: {text!r}")

    def _describe(el, index=None):
        info = {
            "tag": el.tag_name,
            "text": (el.text or "").strip(),
            "visible": el.is_displayed(),
            "selector": driver.execute_script(JS_CSS_PATH, el),
        }
        if index is not None:
            info["index"] = index
        return info

    if multiple:
        results = [_describe(el, i) for i, el in enumerate(elements)]
        return {"ok": True, "found": len(results), "elements": results, "xpath": xpath}

    return {"ok": True, **_describe(first_visible(elements)), "xpath": xpath, "total_found": len(elements)}


__all__ = [
    'get_text',
    'get_html',
    'get_title',
    'get_url',
    'get_attribute',
    'find_by_text',
]

"""JavaScript and cookie tool implementations."""

from typing import Optional

from ..errors import InvalidArgumentError

import logging
logger = logging.getLogger(__name__)


def execute_script(driver, script: str) -> dict:
    """Run a script for its side effects; the return value is ignored."""
    if not script:
        raise InvalidArgumentError("script is required")
    logger.info("Executing JavaScript")
    driver.execute_script(script)
    return {"ok": True, "message": "Script executed successfully"}


def evaluate_js(driver, expression: str) -> dict:
    """Evaluate an expression and return its (JSON-serialisable) value."""
    if not expression:
        raise InvalidArgumentError("expression is required")
    logger.info("Evaluating JavaScript")
    result = driver.execute_script(f"return ({expression});")
    return {"ok": True, "result": result}


def _matches_domain(cookie: dict, domain: Optional[str]) -> bool:
    return not domain or domain in (cookie.get("domain") or "")


def get_cookies(driver, domain: Optional[str] = None) -> dict:
    cookies = [c for c in driver.get_cookies() if _matches_domain(c, domain)]
    return {"ok": True, "cookies": cookies, "count": len(cookies)}


def set_cookie(
    driver,
    name: str,
    value: str,
    domain: Optional[str] = None,
    path: str = "/",
    secure: bool = False,
    http_only: bool = False,
    expiry: Optional[int] = None,
) -> dict:
    """Add a cookie to the current document's domain (or the given one)."""
    if not name:
        raise InvalidArgumentError("name is required")

    cookie = {"name": name, "value": value, "path": path or "/", "secure": secure, "httpOnly": http_only}
    if domain:
        cookie["domain"] = domain
    if expiry is not None:
        cookie["expiry"] = int(expiry)

    logger.info(f"Setting cookie: {name}")
    driver.add_cookie(cookie)
    return {"ok": True, "message": f"Cookie set: {name}"}


def clear_cookies(driver, domain: Optional[str] = None) -> dict:
    """Delete all cookies, or only those whose domain contains ``domain``."""
    if not domain:
        logger.info("Clearing all cookies")
        driver.delete_all_cookies()
        return {"ok": True, "message": "All cookies cleared"}

    logger.info(f"Clearing cookies for: {domain}")
    removed = 0
    for cookie in driver.get_cookies():
        if _matches_domain(cookie, domain):
            driver.delete_cookie(cookie["name"])
            removed += 1
    return {"ok": True, "message": f"Cleared {removed} cookies for {domain}", "removed": removed}


__all__ = [
    'execute_script',
    'evaluate_js',
    'get_cookies',
    'set_cookie',
    'clear_cookies',
]

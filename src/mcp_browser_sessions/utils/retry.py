"""Retry logic for transient Selenium failures."""

import time
import random
from typing import Callable, TypeVar
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    StaleElementReferenceException,
)

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_EXCEPTIONS = (
    StaleElementReferenceException,
    ElementClickInterceptedException,
)


def retry_op(fn: Callable[[], T], retries: int = 2, base_delay: float = 0.15) -> T:
    """
    Retry a function call that may fail due to transient Selenium exceptions.

    Args:
        fn: The function to call
        retries: Number of retry attempts (default: 2)
        base_delay: Base delay between retries in seconds (default: 0.15)

    Returns:
        The result of the function call

    Raises:
        The last exception if all retries fail
    """
    for attempt in range(retries + 1):
        try:
            return fn()
        except TRANSIENT_EXCEPTIONS as e:
            if attempt == retries:
                raise
            logger.debug(f"Retry {attempt + 1}/{retries} after {e.__class__.__name__}")
            time.sleep(base_delay * (1.0 + random.random()))


__all__ = ['TRANSIENT_EXCEPTIONS', 'retry_op']

"""Lifecycle wrapper around one browser process."""

import enum
from typing import Optional

from ..config.resolver import ResolvedSessionConfig
from ..errors import BrowserError
from .launcher import Launcher, launch_webdriver

import logging
logger = logging.getLogger(__name__)


class BrowserState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class BrowserHandle:
    """
    Owns the driver of a single browser process.

    Thread Safety:
        BrowserHandle is NOT thread-safe. The owning Session serializes
        access with its own lock.

    start() is idempotent and returns the running driver; stop() is a no-op
    when nothing runs and never raises.
    """

    def __init__(self, config: ResolvedSessionConfig, launcher: Optional[Launcher] = None):
        self.config = config
        self._launcher = launcher or launch_webdriver
        self._driver = None
        self._state = BrowserState.NOT_STARTED

    @property
    def driver(self):
        """The live driver, or None when the browser is not running."""
        return self._driver

    @property
    def state(self) -> BrowserState:
        return self._state

    def is_active(self) -> bool:
        return self._driver is not None

    def start(self):
        if self._driver is not None:
            return self._driver

        # Raises ConfigurationInvalidError before anything is launched
        self.config.validate()

        kind = "BotBrowser (anti-detection mode)" if self.config.using_botbrowser else "standard Chrome/Chromium"
        logger.info(f"Starting browser with {kind}...")
        try:
            driver = self._launcher(self.config)
        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            raise BrowserError(f"Failed to start browser: {e}") from e

        self._driver = driver
        self._state = BrowserState.RUNNING
        logger.info("Browser started successfully")
        return driver

    def stop(self) -> None:
        if self._driver is None:
            return

        logger.info("Stopping browser...")
        driver = self._driver
        try:
            driver.quit()
            logger.info("Browser stopped")
        except Exception as e:
            logger.error(f"Error stopping browser: {e}")
        finally:
            self._driver = None
            self._state = BrowserState.STOPPED

    def restart(self):
        self.stop()
        return self.start()


__all__ = [
    "BrowserState",
    "BrowserHandle",
]

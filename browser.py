"""
browser.py - Headless Chromium session used by one scan.

A BrowserSession owns the Playwright driver, the browser process and one
isolated context.  It hands out PageSnapshot objects: read-only views of
a loaded tab that detectors can query but cannot navigate.  Opening
another URL (the privacy policy page) goes through BrowserSession.open
again and produces a new tab and a new snapshot, so the landing page the
other detectors are reading is never replaced under them.

    async with BrowserSession(user_agent) as session:
        landing = await session.open(url, timeout=60)
        cookies = await landing.cookies()
"""

import asyncio
import logging
import os
from urllib.parse import urlparse

from playwright.async_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
    async_playwright,
)

from models import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────
# CONFIGURATION
# ────────────────────────────────────────────────────────────────────

VIEWPORT = {"width": 1920, "height": 1080}

CHROMIUM_ARGS = [
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--window-size=1920,1080",
]

# Containers without user namespaces can't run Chromium's sandbox.
NO_SANDBOX_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


def sandbox_disabled():
    return os.environ.get("PRIVACY_SCANNER_NO_SANDBOX", "").lower() in ("1", "true", "yes")


class ScanError(Exception):
    """A failure that ends the whole scan."""


class BrowserLaunchError(ScanError):
    """Chromium (or the Playwright driver) could not be started."""


class NavigationError(ScanError):
    """The target page could not be loaded (DNS, connection, TLS, timeout)."""


async def _close_page(page):
    if page is None:
        return
    try:
        await page.close()
    except Exception as e:
        logger.debug("Error closing tab: %s", e)


class PageSnapshot:
    """
    Read-only handle on a loaded tab.

    Exposes the URL that was requested, the hostname cookies are judged
    against, and three queries: cookies(), evaluate() and content().
    No goto(): new pages come from BrowserSession.open().
    """

    def __init__(self, page, url):
        self._page = page
        self.url = url
        self.target_host = (urlparse(url).hostname or "").lower()

    @property
    def current_url(self):
        return self._page.url

    async def cookies(self):
        """Every cookie visible to the browser context, as Playwright dicts."""
        return await self._page.context.cookies()

    async def evaluate(self, script, arg=None):
        """Run a JS function in the page and return its JSON-able result."""
        if arg is None:
            return await self._page.evaluate(script)
        return await self._page.evaluate(script, arg)

    async def content(self):
        return await self._page.content()

    def __repr__(self):
        return f"<PageSnapshot {self.url}>"


class BrowserSession:
    """
    One Chromium process + one browser context, torn down on exit.

    Used as an async context manager.  Teardown closes the context, the
    browser and the Playwright driver in that order; each step runs even
    if an earlier one fails.
    """

    def __init__(self, user_agent=None, viewport=None, headless=True):
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.viewport = viewport or VIEWPORT
        self.headless = headless
        self._playwright = None
        self._browser = None
        self._context = None

    async def __aenter__(self):
        args = list(CHROMIUM_ARGS)
        if sandbox_disabled():
            args += NO_SANDBOX_ARGS
        try:
            self._playwright = await async_playwright().start()
            logger.debug("Launching Chromium (headless=%s)", self.headless)
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless, args=args
            )
            self._context = await self._browser.new_context(
                user_agent=self.user_agent,
                viewport=self.viewport,
            )
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Could not start browser: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False

    async def close(self):
        for name, closer in (
            ("context", self._context),
            ("browser", self._browser),
            ("playwright", self._playwright),
        ):
            if closer is None:
                continue
            try:
                if name == "playwright":
                    await closer.stop()
                else:
                    await closer.close()
            except Exception as e:
                logger.warning("Error closing %s: %s", name, e)
        self._context = None
        self._browser = None
        self._playwright = None

    async def open(self, url, timeout, wait_for_network_idle=True, settle_delay=0):
        """
        Load `url` in a new tab and return its PageSnapshot.

        timeout is in seconds.  With wait_for_network_idle the load waits
        until the network has been quiet, otherwise only for
        DOMContentLoaded.  settle_delay (seconds) is slept after the load
        so late banners and deferred scripts get a chance to appear.

        Raises NavigationError on any load failure.
        """
        if self._context is None:
            raise ScanError("Browser session is not open")

        timeout_ms = int(timeout * 1000)
        wait_until = "networkidle" if wait_for_network_idle else "domcontentloaded"

        logger.info("Navigating to %s (wait_until=%s, timeout=%ss)", url, wait_until, timeout)
        page = None
        try:
            page = await self._context.new_page()
            page.set_default_timeout(timeout_ms)
            page.set_default_navigation_timeout(timeout_ms)
            await page.goto(url, timeout=timeout_ms, wait_until=wait_until)
        except PlaywrightTimeout as e:
            await _close_page(page)
            raise NavigationError(f"Timed out after {timeout}s loading {url}") from e
        except PlaywrightError as e:
            await _close_page(page)
            raise NavigationError(f"Could not load {url}: {e.message}") from e

        if settle_delay:
            await asyncio.sleep(settle_delay)
        return PageSnapshot(page, url)

"""Shared fakes: a browser-free page snapshot and browser session."""

from urllib.parse import urlparse

import pytest

from browser import NavigationError


class FakeSnapshot:
    """
    Stands in for browser.PageSnapshot.

    `responses` maps a JS source string (the detector's module constant)
    to what evaluate() returns for it.  An Exception value is raised
    instead.  Unlisted scripts evaluate to None.
    """

    def __init__(self, url="https://example.com/", cookies=None, responses=None, html=""):
        self.url = url
        self.target_host = (urlparse(url).hostname or "").lower()
        self._cookies = cookies or []
        self._responses = dict(responses or {})
        self._html = html
        self.evaluated = []

    async def cookies(self):
        if isinstance(self._cookies, Exception):
            raise self._cookies
        return list(self._cookies)

    async def evaluate(self, script, arg=None):
        self.evaluated.append(script)
        value = self._responses.get(script)
        if isinstance(value, Exception):
            raise value
        return value

    async def content(self):
        return self._html


class FakeSession:
    """
    Stands in for browser.BrowserSession.

    `pages` maps URL to a FakeSnapshot, or to an Exception raised by
    open().  Unknown URLs raise NavigationError.
    """

    def __init__(self, pages, user_agent=None, launch_error=None):
        self.pages = pages
        self.user_agent = user_agent
        self.launch_error = launch_error
        self.opened = []
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        if self.launch_error is not None:
            raise self.launch_error
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False

    async def open(self, url, timeout, wait_for_network_idle=True, settle_delay=0):
        self.opened.append({
            "url": url,
            "timeout": timeout,
            "wait_for_network_idle": wait_for_network_idle,
        })
        page = self.pages.get(url)
        if page is None:
            raise NavigationError(f"Could not load {url}: net::ERR_NAME_NOT_RESOLVED")
        if isinstance(page, Exception):
            raise page
        return page


class FakeSessionFactory:
    """Callable passed as Scanner(session_factory=...); remembers the sessions it made."""

    def __init__(self, pages, launch_error=None):
        self.pages = pages
        self.launch_error = launch_error
        self.sessions = []

    def __call__(self, user_agent=None):
        session = FakeSession(self.pages, user_agent=user_agent, launch_error=self.launch_error)
        self.sessions.append(session)
        return session


def raw_cookie(name, domain="example.com", **extra):
    """A cookie dict shaped like Playwright's context.cookies() entries."""
    cookie = {
        "name": name,
        "value": "x",
        "domain": domain,
        "path": "/",
        "expires": -1,
        "httpOnly": False,
        "secure": False,
        "sameSite": "Lax",
    }
    cookie.update(extra)
    return cookie


@pytest.fixture
def snapshot_factory():
    return FakeSnapshot


@pytest.fixture
def session_factory():
    return FakeSessionFactory

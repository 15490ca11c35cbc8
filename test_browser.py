"""BrowserSession against a stand-in Playwright driver."""

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

import browser
from browser import NO_SANDBOX_ARGS, BrowserLaunchError, BrowserSession, NavigationError, ScanError


class StubPage:
    def __init__(self, context, goto_error=None):
        self.context = context
        self.url = "about:blank"
        self.goto_error = goto_error
        self.gotos = []
        self.closed = False

    def set_default_timeout(self, ms):
        self.default_timeout = ms

    def set_default_navigation_timeout(self, ms):
        self.navigation_timeout = ms

    async def goto(self, url, timeout=None, wait_until=None):
        self.gotos.append((url, timeout, wait_until))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url

    async def evaluate(self, script, *args):
        return {"script": script, "args": args}

    async def content(self):
        return "<html></html>"

    async def close(self):
        self.closed = True


class StubContext:
    def __init__(self, log, goto_error=None, new_page_error=None):
        self.log = log
        self.goto_error = goto_error
        self.new_page_error = new_page_error
        self.pages = []

    async def new_page(self):
        if self.new_page_error is not None:
            raise self.new_page_error
        page = StubPage(self, self.goto_error)
        self.pages.append(page)
        return page

    async def cookies(self):
        return [{"name": "_ga", "domain": ".example.com"}]

    async def close(self):
        self.log.append("context")


class StubBrowser:
    def __init__(self, log, **page_errors):
        self.log = log
        self.page_errors = page_errors
        self.context_options = None

    async def new_context(self, **options):
        self.context_options = options
        return StubContext(self.log, **self.page_errors)

    async def close(self):
        self.log.append("browser")


class StubChromium:
    def __init__(self, log, launch_error=None, **page_errors):
        self.log = log
        self.launch_error = launch_error
        self.page_errors = page_errors
        self.launch_args = None

    async def launch(self, headless=True, args=None):
        self.launch_args = args
        if self.launch_error is not None:
            raise self.launch_error
        return StubBrowser(self.log, **self.page_errors)


class StubPlaywright:
    def __init__(self, log, **errors):
        self.log = log
        self.chromium = StubChromium(log, **errors)

    async def stop(self):
        self.log.append("playwright")


@pytest.fixture
def driver(monkeypatch):
    """Patch async_playwright(); returns a function that configures the next driver."""
    state = {"log": [], "errors": {}}

    class Starter:
        async def start(self):
            state["playwright"] = StubPlaywright(state["log"], **state["errors"])
            return state["playwright"]

    monkeypatch.setattr(browser, "async_playwright", lambda: Starter())
    monkeypatch.delenv("PRIVACY_SCANNER_NO_SANDBOX", raising=False)
    return state


@pytest.mark.asyncio
async def test_open_returns_snapshot(driver):
    async with BrowserSession(user_agent="TestAgent/1.0") as session:
        snapshot = await session.open("https://example.com/", timeout=5)
        assert snapshot.url == "https://example.com/"
        assert snapshot.target_host == "example.com"
        assert snapshot.current_url == "https://example.com/"
        assert await snapshot.cookies() == [{"name": "_ga", "domain": ".example.com"}]
        assert (await snapshot.evaluate("() => 1"))["args"] == ()
        assert (await snapshot.evaluate("(x) => x", 3))["args"] == (3,)

        page = session._context.pages[0]
        assert page.gotos == [("https://example.com/", 5000, "networkidle")]
        assert session._browser.context_options["user_agent"] == "TestAgent/1.0"

    assert driver["log"] == ["context", "browser", "playwright"]


@pytest.mark.asyncio
async def test_each_open_uses_a_new_tab(driver):
    async with BrowserSession() as session:
        first = await session.open("https://example.com/", timeout=5)
        second = await session.open("https://example.com/privacy", timeout=5, wait_for_network_idle=False)
        assert first.current_url == "https://example.com/"
        assert second.current_url == "https://example.com/privacy"
        assert session._context.pages[1].gotos[0][2] == "domcontentloaded"


@pytest.mark.asyncio
async def test_no_sandbox_flag(driver, monkeypatch):
    monkeypatch.setenv("PRIVACY_SCANNER_NO_SANDBOX", "1")
    async with BrowserSession():
        pass
    assert all(arg in driver["playwright"].chromium.launch_args for arg in NO_SANDBOX_ARGS)


@pytest.mark.asyncio
async def test_launch_failure(driver):
    driver["errors"] = {"launch_error": PlaywrightError("Executable doesn't exist")}
    with pytest.raises(BrowserLaunchError, match="Executable doesn't exist"):
        async with BrowserSession():
            pass
    assert driver["log"] == ["playwright"]


@pytest.mark.asyncio
async def test_navigation_timeout(driver):
    driver["errors"] = {"goto_error": PlaywrightTimeout("Timeout 5000ms exceeded.")}
    async with BrowserSession() as session:
        with pytest.raises(NavigationError, match="Timed out after 5s"):
            await session.open("https://slow.example/", timeout=5)


@pytest.mark.asyncio
async def test_navigation_error(driver):
    driver["errors"] = {"goto_error": PlaywrightError("net::ERR_NAME_NOT_RESOLVED")}
    async with BrowserSession() as session:
        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            await session.open("https://nowhere.example/", timeout=5)


@pytest.mark.asyncio
async def test_open_requires_an_entered_session():
    with pytest.raises(ScanError):
        await BrowserSession().open("https://example.com/", timeout=5)


@pytest.mark.asyncio
async def test_failed_navigation_closes_the_tab(driver):
    driver["errors"] = {"goto_error": PlaywrightError("net::ERR_CONNECTION_REFUSED")}
    async with BrowserSession() as session:
        with pytest.raises(NavigationError):
            await session.open("https://down.example/", timeout=5)
        assert session._context.pages[0].closed


@pytest.mark.asyncio
async def test_tab_that_cannot_be_created_is_a_navigation_error(driver):
    driver["errors"] = {"new_page_error": PlaywrightError("Target page, context or browser has been closed")}
    async with BrowserSession() as session:
        with pytest.raises(NavigationError, match="has been closed"):
            await session.open("https://example.com/privacy", timeout=5)

"""Shared fixtures: HTML fixture replay instead of the live registry."""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from playwright.async_api import TimeoutError as PlaywrightTimeout
from soupsieve import SelectorSyntaxError

from doctor_finder.config import ScraperSettings
from doctor_finder.diagnostics import SnapshotSink
from doctor_finder.scraper import RegistryScraper

FIXTURES = Path(__file__).parent / "fixtures"

# Short waits so polling tests finish quickly
FAST_SETTINGS = ScraperSettings(
    stealth=False,
    navigation_timeout_ms=1000,
    form_ready_timeout_ms=50,
    settle_timeout_ms=50,
    poll_interval_ms=10,
    attempt_timeout_s=5.0,
)


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeElement:
    """Just enough of an ElementHandle for form interaction."""

    def __init__(self, page: "FakePage", tag):
        self.page = page
        self.tag = tag

    @property
    def key(self) -> str:
        return self.tag.get('name') or self.tag.get('id') or self.tag.name

    async def evaluate(self, expression: str):
        return self.tag.name.lower()

    async def fill(self, value: str, timeout=None):
        self.page.action_timeouts.append(("fill", timeout))
        self.tag["value"] = value
        self.page.filled[self.key] = value

    async def select_option(self, value: str, timeout=None):
        self.page.action_timeouts.append(("select_option", timeout))
        options = [o.get("value", o.get_text()) for o in self.tag.find_all("option")]
        if value not in options:
            # Playwright keeps waiting for the option until the timeout
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for option {value!r}")
        self.page.selected[self.key] = value

    async def click(self, timeout=None):
        self.page.action_timeouts.append(("click", timeout))
        self.page.clicked.append(self.key)
        self.page.show_results()


class FakePage:
    """
    Replays fixture HTML: the search page until the form is submitted,
    the results page afterwards.
    """

    def __init__(self, search_html: str, results_html: str | None = None, goto_error=None, screenshot_error=None):
        self.soup = BeautifulSoup(search_html, 'html.parser')
        self.results_html = results_html
        self.goto_error = goto_error
        self.screenshot_error = screenshot_error
        self.visited = []
        self.filled = {}
        self.selected = {}
        self.clicked = []
        self.submitted_by_script = False
        self.screenshots = []
        self.action_timeouts = []

    def show_results(self):
        if self.results_html is not None:
            self.soup = BeautifulSoup(self.results_html, 'html.parser')

    async def goto(self, url: str, wait_until=None, timeout=None):
        self.visited.append(url)
        if self.goto_error:
            raise self.goto_error

    async def query_selector(self, selector: str):
        try:
            tag = self.soup.select_one(selector)
        except SelectorSyntaxError:
            # Playwright-only pseudo classes such as :has-text()
            return None
        return FakeElement(self, tag) if tag is not None else None

    async def evaluate(self, script: str):
        if self.soup.find('form') is None:
            return False
        self.submitted_by_script = True
        self.show_results()
        return True

    async def content(self) -> str:
        return str(self.soup)

    async def screenshot(self, path=None, full_page=False):
        if self.screenshot_error:
            raise self.screenshot_error
        self.screenshots.append(path)


class CapturingSnapshotSink(SnapshotSink):
    """Records checkpoint names instead of writing files."""

    def __init__(self):
        self.names = []

    async def capture(self, page, name: str):
        self.names.append(name)
        return name


def scraper_with_pages(*pages, settings: ScraperSettings = FAST_SETTINGS, sink: SnapshotSink | None = None) -> RegistryScraper:
    """RegistryScraper whose browser sessions hand out the given pages in order."""
    scraper = RegistryScraper(settings, sink or CapturingSnapshotSink())
    queue = list(pages)

    @asynccontextmanager
    async def open_page():
        yield queue.pop(0)

    scraper._open_page = open_page
    return scraper


@pytest.fixture
def search_html():
    return load_fixture("registry_search.html")


@pytest.fixture
def results_html():
    return load_fixture("registry_results.html")


@pytest.fixture
def registry_page(search_html, results_html):
    return FakePage(search_html, results_html)


@pytest.fixture
def snapshot_sink():
    return CapturingSnapshotSink()


def mock_playwright(page):
    """async_playwright() replacement handing out one browser with one page."""
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    manager = MagicMock()
    manager.__aenter__.return_value = playwright
    manager.__aexit__.return_value = False
    return manager, browser

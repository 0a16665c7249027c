"""
Registry search automation (Playwright).

One call to RegistryScraper.search is one attempt: launch a headless
browser, load the registry search page, fill whatever form fields can be
found, submit, wait for results and extract them. The same routine serves
the primary and the fallback attempt; only the LocatorProfile differs.

Usage:
    from doctor_finder.scraper import RegistryScraper
    from doctor_finder.locators import PRIMARY_PROFILE

    scraper = RegistryScraper()
    doctors = await scraper.search(SearchCriteria(city="Ottawa"), PRIMARY_PROFILE)
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

from playwright.async_api import (
    Error as PlaywrightError,
    Page,
    async_playwright,
)
from playwright_stealth import Stealth

from .config import ScraperSettings
from .diagnostics import FileSnapshotSink, SnapshotSink
from .extraction import extract_records
from .locators import PRIMARY_PROFILE, LocatorProfile
from .models import DoctorRecord, SearchCriteria
from .utils import (
    LAUNCH_ARGS,
    VIEWPORT,
    AutomationError,
    FormNotFoundError,
    NavigationError,
)

logger = logging.getLogger(__name__)

SUBMIT_FIRST_FORM_JS = """() => {
    const forms = document.querySelectorAll('form');
    if (forms.length > 0) {
        forms[0].submit();
        return true;
    }
    return false;
}"""


async def wait_for_any(
    page: Page,
    selectors: Iterable[str],
    timeout_ms: int,
    poll_interval_ms: int = 250,
) -> Optional[str]:
    """
    Poll until any selector matches an element, or the timeout elapses.

    Returns:
        The first matching selector, or None on timeout (not an error)
    """
    selectors = list(selectors)
    if not selectors:
        return None

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000

    while True:
        for selector in selectors:
            try:
                if await page.query_selector(selector):
                    return selector
            except PlaywrightError as e:
                # Execution context is replaced while a navigation is in flight
                logger.debug(f"Polling {selector} failed: {e}")
                break

        remaining = deadline - loop.time()
        if remaining <= 0:
            return None
        await asyncio.sleep(min(poll_interval_ms / 1000, remaining))


class RegistryScraper:
    """Drives the registry search page for one criteria set per call."""

    def __init__(
        self,
        settings: Optional[ScraperSettings] = None,
        snapshot_sink: Optional[SnapshotSink] = None,
    ):
        self.settings = settings or ScraperSettings()
        self.snapshots = snapshot_sink or FileSnapshotSink(self.settings.snapshot_dir)

    @asynccontextmanager
    async def _open_page(self) -> AsyncIterator[Page]:
        """Launch an isolated browser session; it is closed on every exit path."""
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=self.settings.headless,
                args=LAUNCH_ARGS,
            )
            try:
                context = await browser.new_context(
                    user_agent=self.settings.user_agent,
                    viewport=VIEWPORT,
                    locale='en-US',
                )
                if self.settings.stealth:
                    await Stealth().apply_stealth_async(context)
                page = await context.new_page()
                yield page
            finally:
                await browser.close()
                logger.debug("Browser closed")

    async def search(
        self,
        criteria: SearchCriteria,
        profile: LocatorProfile = PRIMARY_PROFILE,
    ) -> list[DoctorRecord]:
        """
        Run one end-to-end scrape attempt.

        Args:
            criteria: Search inputs; absent fields are skipped
            profile: Locator strategies for this attempt

        Returns:
            Extracted records, possibly empty

        Raises:
            AutomationError: browser launch, navigation or page automation failed
        """
        logger.info(f"[{profile.name}] Starting registry search: {criteria.present_fields()}")
        try:
            async with self._open_page() as page:
                return await self._run(page, criteria, profile)
        except AutomationError:
            raise
        except PlaywrightError as e:
            logger.error(f"[{profile.name}] Scraping error: {e}")
            raise AutomationError(f"Browser automation failed: {e}", profile=profile.name) from e

    async def _run(self, page: Page, criteria: SearchCriteria, profile: LocatorProfile) -> list[DoctorRecord]:
        settings = self.settings

        logger.info(f"[{profile.name}] Navigating to {settings.registry_url}")
        try:
            await page.goto(
                settings.registry_url,
                wait_until='networkidle',
                timeout=settings.navigation_timeout_ms,
            )
        except PlaywrightError as e:
            raise NavigationError(
                f"Could not load {settings.registry_url}: {e}",
                profile=profile.name,
            ) from e

        await self.snapshots.capture(page, profile.landing_snapshot)

        if profile.form_selectors:
            form = await wait_for_any(
                page,
                profile.form_selectors,
                settings.form_ready_timeout_ms,
                settings.poll_interval_ms,
            )
            if not form:
                raise FormNotFoundError("No search form found on the registry page", profile=profile.name)
            logger.info(f"[{profile.name}] Found form with selector: {form}")

        await self._fill_fields(page, criteria, profile)
        await self._submit(page, profile)

        logger.info(f"[{profile.name}] Waiting for results...")
        ready = await wait_for_any(
            page,
            profile.ready_selectors,
            settings.settle_timeout_ms,
            settings.poll_interval_ms,
        )
        if ready:
            logger.info(f"[{profile.name}] Results rendered ({ready})")
        else:
            logger.info(f"[{profile.name}] No result container after {settings.settle_timeout_ms}ms, extracting anyway")

        await self.snapshots.capture(page, profile.results_snapshot)

        html = await page.content()
        # BeautifulSoup parse runs in a worker thread
        result = await asyncio.to_thread(extract_records, html, profile.result_selectors, settings.min_block_length)
        logger.info(f"[{profile.name}] Extracted {len(result.records)} doctors")
        return result.records

    async def _fill_fields(self, page: Page, criteria: SearchCriteria, profile: LocatorProfile):
        for key, value in criteria.present_fields().items():
            selectors = profile.field_selectors.get(key, ())
            if not await self._fill_field(page, key, value, selectors, self.settings.action_timeout_ms):
                logger.info(f"[{profile.name}] Could not find field for {key}")

    async def _fill_field(
        self,
        page: Page,
        key: str,
        value: str,
        selectors: Iterable[str],
        timeout_ms: int,
    ) -> Optional[str]:
        """
        Write value into the first candidate that matches; returns the selector used.

        select_option waits for the option to exist, so a free-text value on a
        select element times out after timeout_ms and the next candidate is tried.
        """
        for selector in selectors:
            try:
                element = await page.query_selector(selector)
                if not element:
                    continue

                tag = await element.evaluate("el => el.tagName.toLowerCase()")
                if tag == 'select':
                    await element.select_option(value, timeout=timeout_ms)
                    logger.info(f"Selected {key} with selector: {selector}")
                else:
                    await element.fill(value, timeout=timeout_ms)
                    logger.info(f"Filled {key} with selector: {selector}")
                return selector

            except PlaywrightError as e:
                logger.info(f"Could not fill {key} with selector {selector}: {e}")
                continue

        return None

    async def _submit(self, page: Page, profile: LocatorProfile) -> Optional[str]:
        """Click the first matching submit control, else submit the first form directly."""
        for selector in profile.submit_selectors:
            try:
                button = await page.query_selector(selector)
                if button:
                    await button.click(timeout=self.settings.action_timeout_ms)
                    logger.info(f"[{profile.name}] Clicked submit with selector: {selector}")
                    return selector
            except PlaywrightError as e:
                logger.info(f"Could not click submit with selector {selector}: {e}")

        logger.info(f"[{profile.name}] Could not find submit button, trying form submission...")
        try:
            submitted = await page.evaluate(SUBMIT_FIRST_FORM_JS)
        except PlaywrightError as e:
            # The submit itself navigates away and can take the script context with it
            logger.debug(f"Form submission script interrupted: {e}")
            return None

        if not submitted:
            logger.info(f"[{profile.name}] No form to submit on the page")
        return None

"""
Search orchestration: primary attempt, then the fallback variant.

Usage:
    from doctor_finder.service import DoctorSearchService

    service = DoctorSearchService()
    doctors = await service.search(SearchCriteria(city="Ottawa", specialty="Family Medicine"))
"""
import asyncio
import logging
from typing import Optional

from .config import ScraperSettings
from .locators import FALLBACK_PROFILE, PRIMARY_PROFILE, LocatorProfile
from .models import DoctorRecord, SearchCriteria
from .scraper import RegistryScraper
from .utils import AutomationError, TotalScrapeFailure

logger = logging.getLogger(__name__)


class DoctorSearchService:
    """
    Turns one search request into at most two automation attempts.

    Attempts for a request run one after the other. Across requests, the
    number of live browser sessions is capped by a semaphore.
    """

    def __init__(
        self,
        settings: Optional[ScraperSettings] = None,
        scraper: Optional[RegistryScraper] = None,
        primary: LocatorProfile = PRIMARY_PROFILE,
        fallback: LocatorProfile = FALLBACK_PROFILE,
    ):
        self.settings = settings or ScraperSettings.from_env()
        self.scraper = scraper or self._create_scraper()
        self.primary = primary
        self.fallback = fallback
        self.semaphore = asyncio.Semaphore(self.settings.max_sessions)

    def _create_scraper(self) -> RegistryScraper:
        """Factory method for creating the scraper (allows mocking in tests)."""
        return RegistryScraper(self.settings)

    @property
    def snapshot_names(self) -> list[str]:
        return list(self.primary.snapshots + self.fallback.snapshots)

    async def search(self, criteria: SearchCriteria) -> list[DoctorRecord]:
        """
        Search the registry, falling back to the alternative locators once.

        Returns:
            Records from whichever attempt succeeded; empty is a valid result

        Raises:
            TotalScrapeFailure: both attempts raised AutomationError
        """
        logger.info(f"Search parameters: {criteria.present_fields()}")

        try:
            doctors = await self._attempt(criteria, self.primary)
        except AutomationError as primary_error:
            logger.warning(f"Primary scraping failed ({primary_error}), trying alternative method...")
            try:
                doctors = await self._attempt(criteria, self.fallback)
            except AutomationError as fallback_error:
                logger.error(f"Both scraping methods failed: {fallback_error}")
                raise TotalScrapeFailure(primary_error, fallback_error, self.snapshot_names) from fallback_error

        logger.info(f"Found {len(doctors)} doctors")
        return doctors

    async def _attempt(self, criteria: SearchCriteria, profile: LocatorProfile) -> list[DoctorRecord]:
        async with self.semaphore:
            try:
                return await asyncio.wait_for(
                    self.scraper.search(criteria, profile),
                    timeout=self.settings.attempt_timeout_s,
                )
            except asyncio.TimeoutError as e:
                raise AutomationError(
                    f"{profile.name} attempt timed out after {self.settings.attempt_timeout_s}s",
                    profile=profile.name,
                ) from e

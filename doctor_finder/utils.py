"""
Shared utilities for the registry scraper.

Browser identity and the exception hierarchy used between
the scraper, the search service and the HTTP layer.
"""

from typing import Optional


# ============================================================
# BROWSER IDENTITY
# ============================================================

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--disable-blink-features=AutomationControlled',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
]

VIEWPORT = {'width': 1400, 'height': 900}


def preview(text: str, limit: int = 100) -> str:
    """Single-line preview of a text block for log messages."""
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[:limit] + "..."


# ============================================================
# EXCEPTIONS
# ============================================================

class ScraperError(Exception):
    """Base scraper exception."""
    pass


class AutomationError(ScraperError):
    """One automation attempt failed (browser, session or navigation)."""

    def __init__(self, message: str, profile: Optional[str] = None):
        super().__init__(message)
        self.profile = profile


class NavigationError(AutomationError):
    """Registry page could not be loaded in time."""
    pass


class FormNotFoundError(AutomationError):
    """No search form surface on the loaded page."""
    pass


class TotalScrapeFailure(ScraperError):
    """Both the primary and the fallback attempt failed."""

    def __init__(
        self,
        primary_error: AutomationError,
        fallback_error: AutomationError,
        screenshots: list[str],
    ):
        super().__init__(
            f"Both scraping methods failed (primary: {primary_error}; fallback: {fallback_error})"
        )
        self.primary_error = primary_error
        self.fallback_error = fallback_error
        self.screenshots = list(screenshots)

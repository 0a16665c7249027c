"""
Locator strategies for the registry search page.

Each profile lists, per logical element, the CSS selectors to try in
priority order. The scraper walks a profile and uses the first selector
that matches. The registry is a third-party page: these are guesses, and a
redesign of the page degrades results without raising.
"""
from dataclasses import dataclass


def _named_input(name: str) -> str:
    return f'input[name="{name}"], select[name="{name}"]'


@dataclass(frozen=True)
class LocatorProfile:
    """Declarative selector configuration for one automation attempt."""
    name: str
    # Empty tuple: no form precondition
    form_selectors: tuple[str, ...]
    field_selectors: dict[str, tuple[str, ...]]
    submit_selectors: tuple[str, ...]
    # Specific result containers whose appearance ends the settle wait
    ready_selectors: tuple[str, ...]
    result_selectors: tuple[str, ...]
    landing_snapshot: str
    results_snapshot: str

    @property
    def snapshots(self) -> tuple[str, str]:
        return (self.landing_snapshot, self.results_snapshot)


PRIMARY_PROFILE = LocatorProfile(
    name="primary",
    form_selectors=(
        'form',
        '#searchForm',
        '.search-form',
        '[role="search"]',
    ),
    field_selectors={
        'FirstName': ('#FirstName', 'input[name="FirstName"]', 'input[placeholder*="first"]'),
        'LastName': ('#LastName', 'input[name="LastName"]', 'input[placeholder*="last"]'),
        'City': ('#City', 'input[name="City"]', 'input[placeholder*="city"]'),
        'PostalCode': ('#PostalCode', 'input[name="PostalCode"]', 'input[placeholder*="postal"]'),
        'Gender': ('#Gender', 'select[name="Gender"]', 'select[name="gender"]'),
        'Language': ('#Language', 'input[name="Language"]', 'input[placeholder*="language"]'),
        'Specialty': ('#Specialty', 'select[name="Specialty"]', 'select[name="specialty"]'),
    },
    submit_selectors=(
        'input[type="submit"]',
        'button[type="submit"]',
        '.search-button',
        '#searchButton',
        'button:has-text("Search")',
        'input[value*="Search"]',
    ),
    ready_selectors=(
        '.doctor-result',
        '.search-result',
        '.physician-card',
        '.result-item',
        '.listing-item',
    ),
    result_selectors=(
        '.doctor-result',
        '.search-result',
        '.physician-card',
        '.result-item',
        'table tr',
        '.listing-item',
        '.doctor-info',
        '.physician-info',
        '[class*="doctor"]',
        '[class*="physician"]',
        '[class*="result"]',
    ),
    landing_snapshot="debug-screenshot.png",
    results_snapshot="debug-results.png",
)

# Broader and noisier: one combined name selector per field, generic
# list/paragraph containers at the tail of the result scan.
FALLBACK_PROFILE = LocatorProfile(
    name="fallback",
    form_selectors=(),
    field_selectors={
        key: (_named_input(key),)
        for key in ('FirstName', 'LastName', 'City', 'PostalCode', 'Gender', 'Language', 'Specialty')
    },
    submit_selectors=(
        'input[type="submit"], button[type="submit"], .search-button',
    ),
    ready_selectors=(
        '.doctor-result',
        '.search-result',
        '.physician-card',
        '.result-item',
        '.listing-item',
    ),
    result_selectors=(
        '.doctor-result',
        '.search-result',
        '.physician-card',
        '.result-item',
        'table tr',
        '.listing-item',
        'div[class*="doctor"]',
        'div[class*="physician"]',
        'div[class*="result"]',
        'li',
        'p',
    ),
    landing_snapshot="debug-alt-screenshot.png",
    results_snapshot="debug-alt-results.png",
)

SNAPSHOT_NAMES = PRIMARY_PROFILE.snapshots + FALLBACK_PROFILE.snapshots

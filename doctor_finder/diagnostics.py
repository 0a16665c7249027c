"""Point-in-time screenshots of automation sessions, for operator debugging only."""
import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Error as PlaywrightError

logger = logging.getLogger(__name__)


class SnapshotSink:
    """Accepts a snapshot of a page at a named checkpoint."""

    async def capture(self, page, name: str) -> Optional[str]:
        raise NotImplementedError


class NullSnapshotSink(SnapshotSink):
    async def capture(self, page, name: str) -> Optional[str]:
        return None


class FileSnapshotSink(SnapshotSink):
    """
    Writes full-page PNG screenshots under a directory.

    Failures are logged and swallowed: a missing screenshot must never
    change the outcome of a scrape.
    """

    def __init__(self, directory: Path | str = "."):
        self.directory = Path(directory)

    async def capture(self, page, name: str) -> Optional[str]:
        path = self.directory / name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path), full_page=True)
        except (PlaywrightError, OSError) as e:
            logger.warning(f"Failed to save screenshot {name}: {e}")
            return None

        logger.info(f"Screenshot saved as {path}")
        return str(path)

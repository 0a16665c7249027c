"""
Heuristic extraction of doctor records from a rendered results page.

Each matching element's text is one candidate record. The first non-blank
line is taken as the name: first whitespace token is the given name, the
remainder is the family name. This is lossy for many name formats
("Dr. Jane Doe", "Doe, Jane") and is kept as is; raw_data always holds
the untouched block.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from .models import DoctorRecord
from .utils import preview

logger = logging.getLogger(__name__)

MIN_BLOCK_LENGTH = 10


@dataclass
class ExtractionResult:
    """Records produced by the winning strategy, if any."""
    records: list[DoctorRecord] = field(default_factory=list)
    strategy: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.strategy is not None


def split_name(line: str) -> tuple[str, str]:
    """
    Split a name line into (given, family).

    Example:
        >>> split_name("Jane Marie Doe")
        ('Jane', 'Marie Doe')
    """
    tokens = line.split()
    if not tokens:
        return "", ""
    return tokens[0], " ".join(tokens[1:])


def record_from_block(text: str) -> Optional[DoctorRecord]:
    """Build a record from one text block, or None if the block is blank."""
    block = text.strip()
    lines = [line for line in block.splitlines() if line.strip()]
    if not lines:
        return None

    first_name, last_name = split_name(lines[0])
    return DoctorRecord(first_name=first_name, last_name=last_name, raw_data=block)


def records_from_blocks(blocks: Iterable[str], min_length: int = MIN_BLOCK_LENGTH) -> list[DoctorRecord]:
    """Records for every block whose trimmed text is longer than min_length."""
    records = []
    for block in blocks:
        text = block.strip()
        if len(text) <= min_length:
            continue
        record = record_from_block(text)
        if record:
            records.append(record)
    return records


def extract_records(
    html: str,
    strategies: Iterable[str],
    min_length: int = MIN_BLOCK_LENGTH,
) -> ExtractionResult:
    """
    Scan result strategies in priority order and stop at the first that yields records.

    Args:
        html: Page HTML (e.g. from page.content())
        strategies: CSS selectors, highest priority first
        min_length: Blocks must be strictly longer than this after trimming

    Returns:
        ExtractionResult; empty with strategy None if nothing qualified
    """
    soup = BeautifulSoup(html, 'html.parser')

    for selector in strategies:
        try:
            elements = soup.select(selector)
        except SelectorSyntaxError as e:
            logger.debug(f"Skipping unsupported selector {selector}: {e}")
            continue

        logger.debug(f"Found {len(elements)} elements with selector: {selector}")
        if not elements:
            continue

        records = records_from_blocks((el.get_text() for el in elements), min_length)
        if records:
            for index, record in enumerate(records[:5]):
                logger.debug(f"Block {index}: {preview(record.raw_data)}")
            logger.info(f"Extracted {len(records)} results with selector: {selector}")
            return ExtractionResult(records=records, strategy=selector)

    logger.info("No result strategy produced any records")
    return ExtractionResult()

"""Tests for the result extraction heuristic."""
import pytest

from doctor_finder.extraction import (
    extract_records,
    record_from_block,
    records_from_blocks,
    split_name,
)
from doctor_finder.locators import FALLBACK_PROFILE, PRIMARY_PROFILE

from conftest import load_fixture


class TestSplitName:
    """First whitespace token is the given name, the rest the family name."""

    @pytest.mark.parametrize("line,expected", [
        ("Jane Doe", ("Jane", "Doe")),
        ("Samuel Lee Tremblay", ("Samuel", "Lee Tremblay")),
        ("Cher", ("Cher", "")),
        ("  Jane   Doe  ", ("Jane", "Doe")),
        ("", ("", "")),
    ])
    def test_split(self, line, expected):
        assert split_name(line) == expected

    def test_titles_are_not_special_cased(self):
        """Known-lossy: a title becomes the given name."""
        assert split_name("Dr. Jane Doe") == ("Dr.", "Jane Doe")


class TestRecordFromBlock:

    def test_first_non_blank_line_is_the_name(self):
        record = record_from_block("\n\n  Jane Doe\n  Family Medicine\n  Ottawa ON\n")

        assert record.first_name == "Jane"
        assert record.last_name == "Doe"
        assert record.raw_data == "Jane Doe\n  Family Medicine\n  Ottawa ON"

    def test_other_fields_stay_empty(self):
        record = record_from_block("Jane Doe\nOttawa")

        assert record.city == ""
        assert record.specialty == ""
        assert all(isinstance(v, str) for v in record.to_dict().values())

    def test_blank_block_gives_none(self):
        assert record_from_block("   \n  ") is None


class TestRecordsFromBlocks:

    def test_length_threshold_is_strict(self):
        blocks = ["0123456789", "01234567890", "   0123456789   "]

        records = records_from_blocks(blocks, min_length=10)

        assert [r.raw_data for r in records] == ["01234567890"]

    def test_duplicates_are_kept(self):
        records = records_from_blocks(["Jane Doe, Ottawa", "Jane Doe, Ottawa"])

        assert len(records) == 2


class TestExtractRecords:

    def test_stops_at_first_strategy_with_results(self):
        html = """
        <div class="doctor-result">Jane Doe<br>Family Medicine</div>
        <table><tr><td>Should not be used at all</td></tr></table>
        <div class="doctor-info">Also never consulted here</div>
        """

        result = extract_records(html, PRIMARY_PROFILE.result_selectors)

        assert result.strategy == '.doctor-result'
        assert len(result.records) == 1
        assert result.records[0].raw_data.startswith("Jane Doe")

    def test_strategy_with_only_short_blocks_is_passed_over(self):
        html = """
        <div class="search-result">No data</div>
        <div class="search-result">  n/a  </div>
        <table>
          <tr><td>Anna Kowalski</td><td>Toronto</td></tr>
          <tr><td>Omar Haddad</td><td>Ottawa</td></tr>
        </table>
        <div class="doctor-info">Lower priority block text</div>
        """

        result = extract_records(html, PRIMARY_PROFILE.result_selectors)

        assert result.strategy == 'table tr'
        assert [r.first_name for r in result.records] == ["Anna", "Omar"]

    def test_unsupported_selector_is_skipped(self):
        html = '<ul><li>Jane Doe, Family Medicine</li></ul>'

        result = extract_records(html, ['li:has-text("Doe")', 'li'])

        assert result.strategy == 'li'
        assert len(result.records) == 1

    def test_no_match_is_empty_not_error(self):
        result = extract_records("<html><body><h1>Nothing</h1></body></html>", PRIMARY_PROFILE.result_selectors)

        assert result.records == []
        assert result.strategy is None
        assert not result.matched

    def test_fallback_profile_reaches_generic_paragraphs(self):
        html = "<main><p>Maria Santos Silva - Pediatrics</p></main>"

        assert extract_records(html, PRIMARY_PROFILE.result_selectors).records == []

        result = extract_records(html, FALLBACK_PROFILE.result_selectors)
        assert result.strategy == 'p'
        assert result.records[0].first_name == "Maria"
        assert result.records[0].last_name == "Santos Silva - Pediatrics"

    def test_results_fixture(self):
        result = extract_records(load_fixture("registry_results.html"), PRIMARY_PROFILE.result_selectors)

        assert result.strategy == '.doctor-result'
        assert [(r.first_name, r.last_name) for r in result.records] == [
            ("Jane", "Doe"),
            ("Samuel", "Lee Tremblay"),
        ]
        assert all(r.raw_data for r in result.records)
        assert "Ottawa" in result.records[0].raw_data

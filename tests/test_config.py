"""Tests for environment-driven scraper settings."""
from pathlib import Path

import pytest

from doctor_finder.config import REGISTRY_URL, ScraperSettings


class TestScraperSettings:

    def test_defaults(self, monkeypatch):
        for name in ("REGISTRY_URL", "MAX_BROWSER_SESSIONS", "ATTEMPT_TIMEOUT_S", "ACTION_TIMEOUT_MS", "USE_STEALTH", "DEBUG_SNAPSHOT_DIR"):
            monkeypatch.delenv(name, raising=False)

        settings = ScraperSettings.from_env()

        assert settings.registry_url == REGISTRY_URL
        assert settings.headless is True
        assert settings.max_sessions == 2
        assert settings.attempt_timeout_s == 90.0
        assert settings.action_timeout_ms == 5000
        assert settings.min_block_length == 10
        assert settings.snapshot_dir == Path(".")

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("REGISTRY_URL", "http://localhost:8080/search")
        monkeypatch.setenv("BROWSER_HEADLESS", "false")
        monkeypatch.setenv("USE_STEALTH", "0")
        monkeypatch.setenv("SETTLE_TIMEOUT_MS", "1500")
        monkeypatch.setenv("ACTION_TIMEOUT_MS", "2500")
        monkeypatch.setenv("ATTEMPT_TIMEOUT_S", "12.5")
        monkeypatch.setenv("DEBUG_SNAPSHOT_DIR", "/tmp/snapshots")

        settings = ScraperSettings.from_env()

        assert settings.registry_url == "http://localhost:8080/search"
        assert settings.headless is False
        assert settings.stealth is False
        assert settings.settle_timeout_ms == 1500
        assert settings.action_timeout_ms == 2500
        assert settings.attempt_timeout_s == 12.5
        assert settings.snapshot_dir == Path("/tmp/snapshots")

    def test_invalid_integer_names_the_variable(self, monkeypatch):
        monkeypatch.setenv("NAVIGATION_TIMEOUT_MS", "thirty")

        with pytest.raises(ValueError, match="NAVIGATION_TIMEOUT_MS"):
            ScraperSettings.from_env()

    def test_session_cap_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("MAX_BROWSER_SESSIONS", "0")

        with pytest.raises(ValueError, match="MAX_BROWSER_SESSIONS"):
            ScraperSettings.from_env()

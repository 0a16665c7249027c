"""
Central configuration for the doctor finder.

Values come from the environment (a local .env file is loaded first).
Scraper knobs are grouped in ScraperSettings so tests can build their own
instance instead of patching module globals.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .utils import DEFAULT_USER_AGENT

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


# The public registry search page driven by the scraper.
REGISTRY_URL = "https://register.cpso.on.ca/Advanced-Search/"

# --- HTTP server ---
PORT = _env_int("PORT", 5000)
HOST = os.getenv("HOST", "").strip() or "0.0.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL", "").strip().upper() or "INFO"

CORS_ORIGINS_RAW = os.getenv("CORS_ORIGINS", "*").strip()
CORS_ORIGINS = ["*"] if CORS_ORIGINS_RAW in ("", "*") else [o.strip() for o in CORS_ORIGINS_RAW.split(",") if o.strip()]

# --- Client ---
# Generous: one search is a full browser session, twice on fallback.
CLIENT_TIMEOUT_SECONDS = 60.0
DEFAULT_SERVER_URL = f"http://localhost:{PORT}"


@dataclass(frozen=True)
class ScraperSettings:
    """Knobs for one browser automation attempt and the session pool."""
    registry_url: str = REGISTRY_URL
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    stealth: bool = True
    navigation_timeout_ms: int = 30000  # page.goto ceiling
    form_ready_timeout_ms: int = 3000  # wait for a form surface after load
    settle_timeout_ms: int = 5000  # wait for results after submit
    action_timeout_ms: int = 5000  # one fill, select or click
    poll_interval_ms: int = 250
    attempt_timeout_s: float = 90.0  # whole attempt, including launch and teardown
    max_sessions: int = 2  # concurrent browsers per process
    snapshot_dir: Path = field(default_factory=lambda: Path("."))
    min_block_length: int = 10

    @classmethod
    def from_env(cls) -> "ScraperSettings":
        """Build settings from environment variables, falling back to defaults."""
        max_sessions = _env_int("MAX_BROWSER_SESSIONS", 2)
        if max_sessions < 1:
            raise ValueError(f"MAX_BROWSER_SESSIONS must be at least 1, got {max_sessions}")
        return cls(
            registry_url=os.getenv("REGISTRY_URL", "").strip() or REGISTRY_URL,
            headless=_env_bool("BROWSER_HEADLESS", True),
            user_agent=os.getenv("BROWSER_USER_AGENT", "").strip() or DEFAULT_USER_AGENT,
            stealth=_env_bool("USE_STEALTH", True),
            navigation_timeout_ms=_env_int("NAVIGATION_TIMEOUT_MS", 30000),
            form_ready_timeout_ms=_env_int("FORM_READY_TIMEOUT_MS", 3000),
            settle_timeout_ms=_env_int("SETTLE_TIMEOUT_MS", 5000),
            action_timeout_ms=_env_int("ACTION_TIMEOUT_MS", 5000),
            poll_interval_ms=_env_int("POLL_INTERVAL_MS", 250),
            attempt_timeout_s=_env_float("ATTEMPT_TIMEOUT_S", 90.0),
            max_sessions=max_sessions,
            snapshot_dir=Path(os.getenv("DEBUG_SNAPSHOT_DIR", "").strip() or "."),
            min_block_length=_env_int("MIN_BLOCK_LENGTH", 10),
        )

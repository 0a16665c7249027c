"""
HTTP client for the doctor finder API.

Stands in for the search form front end: sends SearchCriteria with a
generous timeout and maps failures onto the three messages the form shows.
"""
import logging
from typing import Optional

import httpx

from .config import CLIENT_TIMEOUT_SECONDS, DEFAULT_SERVER_URL
from .models import DoctorRecord, SearchCriteria

logger = logging.getLogger(__name__)


class DoctorFinderClient:
    """Thin synchronous wrapper around the /api endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        timeout: float = CLIENT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "DoctorFinderClient":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self._client.close()

    def search(self, criteria: SearchCriteria) -> list[DoctorRecord]:
        """POST the criteria and return whatever records came back (possibly none)."""
        logger.debug(f"Searching {self.base_url} with {criteria.present_fields()}")
        response = self._client.post("/api/search", json=criteria.to_dict())
        response.raise_for_status()
        return [DoctorRecord.from_dict(item) for item in response.json() or []]

    def specialties(self) -> list[str]:
        response = self._client.get("/api/specialties")
        response.raise_for_status()
        return response.json()

    def health(self) -> dict:
        response = self._client.get("/api/health")
        response.raise_for_status()
        return response.json()


def describe_failure(exc: Exception, base_url: str = DEFAULT_SERVER_URL) -> str:
    """
    User-facing message for a failed search.

    - the server answered with an error status
    - no answer at all (server down, connection refused, timeout)
    - anything else
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        error = None
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            error = data.get("error")
        return f"Server error: {error or response.reason_phrase}"

    if isinstance(exc, httpx.RequestError):
        return f"Cannot connect to server. Please ensure the backend server is running on {base_url}."

    return "Failed to fetch doctors. Please try again later."

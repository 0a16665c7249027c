"""Physician registry search: browser automation, heuristic extraction and a JSON API."""
from .models import DoctorRecord, SearchCriteria
from .service import DoctorSearchService
from .utils import AutomationError, TotalScrapeFailure

__all__ = [
    'AutomationError',
    'DoctorRecord',
    'DoctorSearchService',
    'SearchCriteria',
    'TotalScrapeFailure',
]

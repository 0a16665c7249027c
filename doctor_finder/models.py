"""Data models for registry searches and extracted doctor records."""
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

# Python attribute -> registry form / JSON key
CRITERIA_FIELDS = {
    'first_name': 'FirstName',
    'last_name': 'LastName',
    'city': 'City',
    'postal_code': 'PostalCode',
    'gender': 'Gender',
    'language': 'Language',
    'specialty': 'Specialty',
}

RECORD_FIELDS = {**CRITERIA_FIELDS, 'raw_data': 'RawData'}

GENDER_CODES = ('M', 'F')


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else None


@dataclass
class SearchCriteria:
    """
    Optional search inputs for the registry form.

    No field is required. An empty criteria set is valid and produces the
    broadest possible query.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    gender: Optional[str] = None  # 'M' / 'F', not enforced
    language: Optional[str] = None
    specialty: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchCriteria":
        """Create from a request payload keyed by form names; unknown keys are ignored."""
        return cls(**{
            attr: _clean(data.get(key))
            for attr, key in CRITERIA_FIELDS.items()
        })

    def present_fields(self) -> dict[str, str]:
        """Set fields keyed by form name, in form order."""
        present = {}
        for attr, key in CRITERIA_FIELDS.items():
            value = _clean(getattr(self, attr))
            if value is not None:
                present[key] = value
        return present

    def to_dict(self) -> dict[str, str]:
        return self.present_fields()

    def is_empty(self) -> bool:
        return not self.present_fields()


@dataclass
class DoctorRecord:
    """
    One best-effort result scraped from the registry.

    Only raw_data is reliably populated; the name fields come from a
    whitespace split of the first line and the rest are usually empty.
    """
    first_name: str = ""
    last_name: str = ""
    city: str = ""
    postal_code: str = ""
    gender: str = ""
    language: str = ""
    specialty: str = ""
    raw_data: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON wire form; every value is a string."""
        return {
            RECORD_FIELDS[f.name]: getattr(self, f.name) or ""
            for f in fields(self)
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DoctorRecord":
        """Create from the JSON wire form; missing or null values become empty strings."""
        values = {}
        for attr, key in RECORD_FIELDS.items():
            value = data.get(key)
            values[attr] = "" if value is None else str(value)
        return cls(**values)

"""Medical specialties offered by the registry search form."""

SPECIALTIES = (
    'Family Medicine',
    'General Practice',
    'Internal Medicine',
    'Pediatrics',
    'Obstetrics and Gynecology',
    'Dermatology',
    'Cardiology',
    'Psychiatry',
    'Neurology',
    'General Surgery',
    'Orthopedic Surgery',
    'Urology',
    'Anesthesiology',
    'Gastroenterology',
    'Endocrinology and Metabolism',
    'Diagnostic Radiology',
    'Medical Oncology',
    'Hematology',
    'Respirology',
    'Rheumatology',
    'Ophthalmology',
    'Otolaryngology – Head and Neck Surgery',
    'Emergency Medicine',
    'Plastic Surgery',
    'Pathology',
    'Infectious Diseases',
    'Nephrology',
    'Physical Medicine and Rehabilitation',
    'Occupational Medicine',
    'Public Health and Preventive Medicine',
    'Geriatric Medicine',
    'Pain Medicine',
)

# Client-side choice meaning "free text follows"; never sent to the registry
OTHER_SPECIALTY = 'other'


def resolve_specialty(choice: str | None, custom: str | None = None) -> str | None:
    """Map a specialty choice to the value to search for, honouring the 'other' sentinel."""
    if choice == OTHER_SPECIALTY:
        return (custom or '').strip() or None
    return choice or None

"""Cook County (IL) contracts dataset (Socrata) identifiers."""

RESOURCE_URL = "https://datacatalog.cookcountyil.gov/resource/qh8j-6k63.json"
ORDER = "award_date DESC"
RESULT_LIMIT = 1000

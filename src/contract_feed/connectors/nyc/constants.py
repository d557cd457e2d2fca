"""NYC City Record Online dataset (Socrata) identifiers."""

RESOURCE_URL = "https://data.cityofnewyork.us/resource/i858-z32e.json"
DATE_FIELD = "registration_date"
ORDER = "registration_date DESC"
RESULT_LIMIT = 1000

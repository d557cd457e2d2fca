"""SAM.gov opportunities v2 endpoint and fetch policy."""

SEARCH_URL = "https://api.sam.gov/opportunities/v2/search"

# Largest page the API accepts.
PAGE_SIZE = 1000
# Hard stop against an upstream that never runs out of pages.
MAX_PAGES = 10
PAGE_DELAY_SECONDS = 1.0

# postedFrom/postedTo format expected by the API.
DATE_FORMAT = "%m/%d/%Y"
ACTIVE_ONLY = "Yes"

# Response members
RESULTS_KEY = "opportunitiesData"
LEGACY_RESULTS_KEY = "opportunities"
TOTAL_KEY = "totalRecords"

"""SAM.gov connector for federal contract opportunities.

SAM.gov exposes a paged search API (offset/limit, up to 1000 per page) that
reports `totalRecords`. Requests are windowed on posted date and restricted
to active notices. The API key is mandatory; a missing key fails at
construction time instead of on the first request.
"""

import logging
import time
from datetime import datetime
from functools import partial
from typing import Any, Callable, Optional

import httpx

from contract_feed.config import Settings
from contract_feed.connectors.base import BaseConnector
from contract_feed.connectors.http import get_json
from contract_feed.connectors.pagination import Page, paginate
from contract_feed.errors import FetchError
from contract_feed.models.report import DateRange, FetchResult
from contract_feed.normalization.mappings import FEDERAL

from . import constants

logger = logging.getLogger(__name__)


class SamGovConnector(BaseConnector):
    """
    Connector for SAM.gov opportunities (source tag 'federal').
    Paginates until an empty page, the advertised total, a short page or MAX_PAGES.
    """

    source_id = "federal"
    mapping = FEDERAL

    SEARCH_URL = constants.SEARCH_URL
    PAGE_SIZE = constants.PAGE_SIZE
    MAX_PAGES = constants.MAX_PAGES
    PAGE_DELAY_SECONDS = constants.PAGE_DELAY_SECONDS

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ):
        settings = settings or Settings.from_env()
        self._api_key = settings.require_sam_api_key()
        self._sleep = sleep
        super().__init__(client=client, settings=settings)

    def date_window(self, now: Optional[datetime] = None) -> DateRange:
        return self.lookback_window(self._settings.federal_lookback_days, now)

    def query_params(self, window: DateRange) -> dict[str, Any]:
        """Parameters shared by every page of one fetch."""
        return {
            "api_key": self._api_key,
            "postedFrom": window.date_from.strftime(constants.DATE_FORMAT),
            "postedTo": window.date_to.strftime(constants.DATE_FORMAT),
            "active": constants.ACTIVE_ONLY,
        }

    def _fetch_page(self, base_params: dict[str, Any], offset: int, limit: int) -> Page:
        """GET one page. Tolerates the legacy results key and a missing total."""
        params = dict(base_params, limit=limit, offset=offset)
        payload = get_json(self._client, self.SEARCH_URL, params=params)
        if not isinstance(payload, dict):
            raise FetchError(f"Unexpected SAM.gov response shape: {type(payload).__name__}")

        items = payload.get(constants.RESULTS_KEY)
        if items is None:
            items = payload.get(constants.LEGACY_RESULTS_KEY) or []
        if not isinstance(items, list):
            items = []

        total = payload.get(constants.TOTAL_KEY)
        try:
            total = int(total) if total is not None else None
        except (TypeError, ValueError):
            total = None
        return Page(records=items, total=total)

    def fetch(self, now: Optional[datetime] = None) -> FetchResult:
        """Fetch every page in the posted-date window, stopping on the first stop condition."""
        window = self.date_window(now)
        logger.info(
            "Fetching SAM.gov opportunities posted %s..%s",
            window.date_from.date(),
            window.date_to.date(),
        )
        result = paginate(
            partial(self._fetch_page, self.query_params(window)),
            page_size=self.PAGE_SIZE,
            max_pages=self.MAX_PAGES,
            delay=self.PAGE_DELAY_SECONDS,
            sleep=self._sleep,
        )
        result.date_range = window
        logger.info(
            "SAM.gov: %d records in %d page(s), stopped on %s",
            len(result.records),
            result.pages,
            result.stop_reason.value if result.stop_reason else "unknown",
        )
        return result

"""Shared single-shot fetch for Socrata (SODA) open-data portals."""

import logging
from datetime import datetime
from typing import Any, Optional

from contract_feed.errors import FetchError, TransientFetchError
from contract_feed.models.raw import RawContract
from contract_feed.models.report import DateRange, FetchResult, StopReason

from .base import BaseConnector
from .http import get_json

logger = logging.getLogger(__name__)

# Socrata floating timestamp literal used inside $where clauses.
SOQL_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.000"


class SocrataConnector(BaseConnector):
    """
    Base for portal datasets queried once with a fixed result cap and ordering.
    Subclasses set RESOURCE_URL, ORDER and optionally DATE_FIELD for a date window.
    """

    RESOURCE_URL: str = ""
    ORDER: str = ""
    RESULT_LIMIT: int = 1000
    DATE_FIELD: Optional[str] = None

    def extra_headers(self) -> dict[str, str]:
        token = self._settings.socrata_app_token
        return {"X-App-Token": token} if token else {}

    def lookback_days(self) -> Optional[int]:
        """Days of history to request; None for sources without a date window."""
        return None

    def date_window(self, now: Optional[datetime] = None) -> Optional[DateRange]:
        days = self.lookback_days()
        if not self.DATE_FIELD or days is None:
            return None
        return self.lookback_window(days, now)

    def query_params(self, window: Optional[DateRange]) -> dict[str, Any]:
        params: dict[str, Any] = {"$limit": self.RESULT_LIMIT}
        if self.ORDER:
            params["$order"] = self.ORDER
        if window is not None and self.DATE_FIELD:
            since = window.date_from.strftime(SOQL_TIMESTAMP_FORMAT)
            params["$where"] = f"{self.DATE_FIELD} > '{since}'"
        return params

    def fetch(self, now: Optional[datetime] = None) -> FetchResult:
        """Single request; a transient failure yields an empty result rather than an error."""
        window = self.date_window(now)
        try:
            payload = get_json(self._client, self.RESOURCE_URL, params=self.query_params(window))
        except TransientFetchError as e:
            logger.warning("%s: transient upstream failure, no records fetched: %s", self.source_id, e)
            return FetchResult(
                stop_reason=StopReason.TRANSIENT_FAILURE,
                transient_error=str(e),
                date_range=window,
            )

        if not isinstance(payload, list):
            raise FetchError(f"Unexpected {self.source_id} response shape: {type(payload).__name__}")

        records = [RawContract(data=item) for item in payload if isinstance(item, dict)]
        logger.info("%s: fetched %d records", self.source_id, len(records))
        return FetchResult(
            records=records,
            pages=1 if records else 0,
            stop_reason=StopReason.SINGLE_SHOT,
            date_range=window,
        )

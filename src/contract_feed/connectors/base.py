"""Abstract base class for source connectors."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from contract_feed.config import Settings
from contract_feed.models.contract import ContractRecord
from contract_feed.models.raw import RawContract
from contract_feed.models.report import DateRange, FetchResult
from contract_feed.normalization import SourceMapping, normalize_record

from .http import build_client


class BaseConnector(ABC):
    """
    Standard interface for upstream contract sources.
    Connectors fetch raw records and normalize them through their SourceMapping.
    """

    source_id: str = ""
    mapping: SourceMapping

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or Settings.from_env()
        self._client = client or build_client(
            timeout=self._settings.request_timeout,
            headers=self.extra_headers(),
        )

    def extra_headers(self) -> dict[str, str]:
        """Source-specific headers added to the default client."""
        return {}

    @abstractmethod
    def fetch(self, now: Optional[datetime] = None) -> FetchResult:
        """
        Pull raw records from the source.
        now: reference time for the date window (defaults to current UTC time).
        """
        pass

    def normalize(self, raw: RawContract) -> Optional[ContractRecord]:
        """Convert raw record to ContractRecord; None when it cannot be identified."""
        return normalize_record(raw, self.mapping)

    def fetch_normalized(self, now: Optional[datetime] = None) -> list[ContractRecord]:
        """Fetch and normalize, dropping unidentifiable records."""
        result = self.fetch(now)
        return [rec for rec in (self.normalize(r) for r in result.records) if rec is not None]

    @staticmethod
    def lookback_window(days: int, now: Optional[datetime] = None) -> DateRange:
        """Window [now - days, now] in UTC."""
        end = now or datetime.now(timezone.utc)
        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        return DateRange(date_from=end - timedelta(days=days), date_to=end)

"""Pytest fixtures for contract-feed tests."""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from contract_feed.config import Settings
from contract_feed.connectors.base import BaseConnector
from contract_feed.models.raw import RawContract
from contract_feed.models.report import FetchResult, StopReason
from contract_feed.normalization import MAPPINGS
from contract_feed.store import ContractStore


class StaticConnector(BaseConnector):
    """Connector returning a canned FetchResult (or raising) without touching the network."""

    def __init__(
        self,
        source_id: str,
        records: Optional[list[dict[str, Any]]] = None,
        *,
        error: Optional[Exception] = None,
        transient_error: Optional[str] = None,
    ):
        self.source_id = source_id
        self.mapping = MAPPINGS[source_id]
        self._records = records or []
        self._error = error
        self._transient_error = transient_error
        self.fetch_calls = 0
        super().__init__(client=MagicMock(), settings=Settings())

    def fetch(self, now: Optional[datetime] = None) -> FetchResult:
        self.fetch_calls += 1
        if self._error is not None:
            raise self._error
        return FetchResult(
            records=[RawContract(data=r) for r in self._records],
            pages=1 if self._records else 0,
            stop_reason=StopReason.TRANSIENT_FAILURE if self._transient_error else StopReason.SINGLE_SHOT,
            transient_error=self._transient_error,
        )


@pytest.fixture
def static_connector() -> type[StaticConnector]:
    """Factory class for canned connectors."""
    return StaticConnector


@pytest.fixture
def sample_sam_item() -> dict[str, Any]:
    """Sample SAM.gov opportunitiesData item."""
    return {
        "noticeId": "abc123def456",
        "title": "Janitorial Services, Naval Station Norfolk",
        "solicitationNumber": "N00189-24-R-0001",
        "fullParentPathName": "DEPT OF DEFENSE.DEPT OF THE NAVY",
        "postedDate": "2024-03-01",
        "type": "Solicitation",
        "baseType": "Combined Synopsis/Solicitation",
        "archiveDate": "2024-05-01",
        "typeOfSetAside": "SBA",
        "typeOfSetAsideDescription": "Total Small Business Set-Aside (FAR 19.5)",
        "responseDeadLine": "2024-04-01T17:00:00-04:00",
        "naicsCode": "561720",
        "classificationCode": "S201",
        "active": "Yes",
        "award": {
            "amount": "125000",
            "awardee": {"name": "Acme Facility Services", "ueiSAM": "UEI123456789"},
        },
        "pointOfContact": [
            {"type": "primary", "fullName": "Jane Doe", "email": "jane.doe@navy.mil", "phone": "757-555-0100"}
        ],
        "description": "https://api.sam.gov/prod/opportunities/v1/noticedesc?noticeid=abc123def456",
        "placeOfPerformance": {
            "city": {"code": "57000", "name": "Norfolk"},
            "state": {"code": "VA", "name": "Virginia"},
            "country": {"code": "USA", "name": "UNITED STATES"},
            "zip": "23511",
        },
        "uiLink": "https://sam.gov/opp/abc123def456/view",
        "resourceLinks": ["https://sam.gov/api/prod/opps/v3/opportunities/resources/files/1/download"],
    }


@pytest.fixture
def sample_ny_item() -> dict[str, Any]:
    """Sample NYC City Record row."""
    return {
        "request_id": "20240301001",
        "epin": "84124B0001",
        "short_title": "Citywide Road Resurfacing",
        "agency_name": "Transportation",
        "registration_date": "2024-03-01T00:00:00.000",
        "due_date": "2024-03-20T00:00:00.000",
        "type_of_notice_description": "Solicitation",
        "category_description": "Construction/Construction Services",
        "contract_amount": "250000",
        "contact_name": "John Smith",
        "contact_phone": "212-555-0100",
        "email": "jsmith@dot.nyc.gov",
        "city": "New York",
        "zip_code": "10007",
    }


@pytest.fixture
def sample_il_item() -> dict[str, Any]:
    """Sample Cook County contracts row."""
    return {
        "contract_number": "2345-67890",
        "contract_title": "Office Supplies",
        "description": "Bulk office supplies for county departments",
        "vendor_name": "Supply Co",
        "award_date": "2024-02-15T00:00:00.000",
        "end_date": "2025-02-14T00:00:00.000",
        "amount": "$12,500.00",
        "department": "Procurement",
    }


@pytest.fixture
def temp_db() -> Path:
    """Temporary database path for isolated tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)


@pytest.fixture
def store(temp_db: Path) -> ContractStore:
    """ContractStore with temporary database."""
    contract_store = ContractStore(temp_db)
    yield contract_store
    contract_store.close()

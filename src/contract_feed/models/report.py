"""Fetch, write and run report models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from contract_feed.models.raw import RawContract


class RunStage(str, Enum):
    """Stages of one ingestion run. Any stage can end in `failed`."""

    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


class StopReason(str, Enum):
    """Why a fetcher stopped requesting pages."""

    EMPTY_PAGE = "empty_page"
    TOTAL_REACHED = "total_reached"
    SHORT_PAGE = "short_page"
    PAGE_CAP = "page_cap"
    TRANSIENT_FAILURE = "transient_failure"
    SINGLE_SHOT = "single_shot"


class DateRange(BaseModel):
    """Window a date-filtered source was queried for."""

    date_from: datetime
    date_to: datetime


class FetchResult(BaseModel):
    """Raw records pulled from one source plus pagination bookkeeping."""

    records: list[RawContract] = Field(default_factory=list)
    pages: int = 0
    stop_reason: Optional[StopReason] = None
    transient_error: Optional[str] = None
    date_range: Optional[DateRange] = None


class WriteResult(BaseModel):
    """Totals from one sink write across all batches."""

    upserted: int = 0
    modified: int = 0
    errors: list[str] = Field(default_factory=list)

    def merge(self, other: "WriteResult") -> None:
        self.upserted += other.upserted
        self.modified += other.modified
        self.errors.extend(other.errors)


class RunReport(BaseModel):
    """
    Outcome of one ingestion run.
    total_fetched is the raw upstream count; total_upserted + total_modified
    is what actually landed, so the gap exposes dropped or unchanged records.
    """

    source: str
    stage: RunStage = RunStage.FETCHING
    success: bool = False
    message: str = ""

    total_fetched: int = 0
    total_normalized: int = 0
    total_dropped: int = 0
    total_upserted: int = 0
    total_modified: int = 0
    pages: int = 0

    stop_reason: Optional[StopReason] = None
    date_range: Optional[DateRange] = None
    errors: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    run_id: Optional[int] = None

"""Data models for canonical contract records, raw payloads and run reports."""

from contract_feed.models.contract import (
    Award,
    Awardee,
    ContractRecord,
    PlaceOfPerformance,
    StateRef,
)
from contract_feed.models.raw import RawContract
from contract_feed.models.report import (
    DateRange,
    FetchResult,
    RunReport,
    RunStage,
    StopReason,
    WriteResult,
)

__all__ = [
    "Award",
    "Awardee",
    "ContractRecord",
    "DateRange",
    "FetchResult",
    "PlaceOfPerformance",
    "RawContract",
    "RunReport",
    "RunStage",
    "StateRef",
    "StopReason",
    "WriteResult",
]

"""Canonical contract record and its nested substructures."""

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def non_negative_amount(value: Any) -> float:
    """Coerce a monetary value to a finite float >= 0; anything else becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "").lstrip("$")
        if not value:
            return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


class StateRef(BaseModel):
    """State of a place of performance; `code` is what the read query filters on."""

    code: Optional[str] = None
    name: Optional[str] = None


class PlaceOfPerformance(BaseModel):
    """Where the contracted work happens (not the contracting office)."""

    state: StateRef = Field(default_factory=StateRef)
    city: Optional[str] = None
    country: Optional[str] = None
    zip: Optional[str] = None


class Awardee(BaseModel):
    name: Optional[str] = None
    id: Optional[str] = None
    location: Optional[dict[str, Any]] = None


class Award(BaseModel):
    """Award details; amount is always a non-negative finite number."""

    date: Optional[datetime] = None
    number: Optional[str] = None
    amount: float = 0.0
    awardee: Optional[Awardee] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        return non_negative_amount(value)


class ContractRecord(BaseModel):
    """Canonical contract opportunity produced by every source mapping."""

    natural_key: str = Field(..., min_length=1, description="Source-scoped upstream id, or title fallback")
    source: str = Field(..., min_length=1, description="Source tag, e.g. 'federal'")

    title: str = ""
    description: Optional[str] = None

    posted_date: Optional[datetime] = None
    due_date: Optional[datetime] = None

    type: Optional[str] = None
    classification: Optional[str] = None
    naics_code: Optional[str] = None

    # set_aside is the legacy name older filters use; type_of_set_aside is current.
    set_aside: Optional[str] = None
    type_of_set_aside: Optional[str] = None
    type_of_set_aside_description: Optional[str] = None

    award: Optional[Award] = None
    place_of_performance: Optional[PlaceOfPerformance] = None

    link: Optional[str] = None
    ui_link: Optional[str] = None
    additional_info_link: Optional[str] = None
    resource_links: list[Any] = Field(default_factory=list)

    point_of_contact: list[Any] = Field(default_factory=list)

    solicitation_number: Optional[str] = None
    agency: Optional[str] = None
    active: Optional[bool] = None
    archive_date: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, str]:
        """Dedup key used by the store."""
        return (self.natural_key, self.source)

    @property
    def state_code(self) -> Optional[str]:
        if self.place_of_performance is None:
            return None
        return self.place_of_performance.state.code

    @property
    def award_amount(self) -> float:
        return self.award.amount if self.award else 0.0

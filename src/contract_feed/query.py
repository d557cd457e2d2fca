"""Read-side query parameters and result page for stored contracts."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from contract_feed.models.contract import ContractRecord

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50


def to_storage_timestamp(value: datetime) -> str:
    """UTC ISO string; stored and compared lexicographically."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class ContractQuery(BaseModel):
    """Optional filters plus pagination. Results are sorted by posted date, newest first."""

    category: Optional[str] = Field(default=None, description="NAICS code, exact match")
    value_min: Optional[float] = Field(default=None, ge=0, description="Minimum award amount")
    set_aside: Optional[str] = None
    date_from: Optional[datetime] = Field(default=None, description="Minimum posted date")
    search: Optional[str] = Field(default=None, description="Case-insensitive text in title or description")
    state: Optional[str] = Field(default=None, description="Place-of-performance state code")
    source: Optional[str] = None

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("page_size")
    @classmethod
    def _cap_page_size(cls, value: int) -> int:
        return min(value, MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def where_clause(self) -> tuple[str, list[Any]]:
        """SQL WHERE fragment (possibly empty) and its parameters."""
        clauses: list[str] = []
        params: list[Any] = []
        if self.category:
            clauses.append("naics_code = ?")
            params.append(self.category)
        if self.value_min is not None:
            clauses.append("award_amount >= ?")
            params.append(self.value_min)
        if self.set_aside:
            clauses.append("set_aside = ?")
            params.append(self.set_aside)
        if self.date_from is not None:
            clauses.append("posted_date >= ?")
            params.append(to_storage_timestamp(self.date_from))
        if self.search:
            escaped = self.search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            pattern = f"%{escaped}%"
            clauses.append("(title LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\')")
            params.extend([pattern, pattern])
        if self.state:
            clauses.append("state_code = ?")
            params.append(self.state)
        if self.source:
            clauses.append("source = ?")
            params.append(self.source)
        if not clauses:
            return "", params
        return "WHERE " + " AND ".join(clauses), params


class ContractPage(BaseModel):
    """One page of query results plus the total matching count."""

    items: list[ContractRecord] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size if self.total else 0

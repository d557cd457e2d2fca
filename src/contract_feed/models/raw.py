"""Raw contract representation before normalization."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RawContract(BaseModel):
    """
    Flexible raw record from an upstream source.
    Connectors populate this straight from the decoded JSON item.
    """

    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] = Field(default_factory=dict)

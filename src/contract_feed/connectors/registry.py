"""Registry for discovering and instantiating connectors."""

from typing import Type

from contract_feed.connectors.base import BaseConnector
from contract_feed.connectors.cook_county import CookCountyConnector
from contract_feed.connectors.nyc import NycCityRecordConnector
from contract_feed.connectors.sam import SamGovConnector


class ConnectorRegistry:
    """Maps source tags to connector classes."""

    _connectors: dict[str, Type[BaseConnector]] = {
        "federal": SamGovConnector,
        "ny": NycCityRecordConnector,
        "il": CookCountyConnector,
    }

    @classmethod
    def get(cls, source_id: str, **kwargs) -> BaseConnector:
        """Get a connector instance for the given source. kwargs passed to connector __init__."""
        connector_cls = cls._connectors.get(source_id.lower())
        if not connector_cls:
            raise ValueError(f"Unknown source: {source_id}. Available: {list(cls._connectors.keys())}")
        return connector_cls(**kwargs)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Return list of available source tags."""
        return list(cls._connectors.keys())

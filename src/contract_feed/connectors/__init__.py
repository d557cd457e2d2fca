"""Upstream source connectors."""

from contract_feed.connectors.base import BaseConnector
from contract_feed.connectors.registry import ConnectorRegistry

__all__ = ["BaseConnector", "ConnectorRegistry"]

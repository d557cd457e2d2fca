"""Exception hierarchy shared by connectors, store and pipeline."""

from typing import Optional


class ContractFeedError(Exception):
    """Base class for all contract-feed errors."""


class ConfigurationError(ContractFeedError):
    """Required setting (credential, database path) is missing or invalid."""


class FetchError(ContractFeedError):
    """Upstream request failed in a way that aborts the fetch."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransientFetchError(FetchError):
    """Rate limit, upstream 5xx or timeout; pagination stops but keeps its data."""

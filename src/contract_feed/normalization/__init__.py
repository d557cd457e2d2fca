"""Normalization of heterogeneous upstream records into ContractRecord."""

from contract_feed.normalization.mapper import normalize, normalize_record
from contract_feed.normalization.mappings import MAPPINGS, SourceMapping

__all__ = ["MAPPINGS", "SourceMapping", "normalize", "normalize_record"]

"""Persistent storage for contract records and run history."""

from contract_feed.store.contract_store import BATCH_SIZE, ContractStore, RunRecord

__all__ = ["BATCH_SIZE", "ContractStore", "RunRecord"]

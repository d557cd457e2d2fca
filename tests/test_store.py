"""Unit tests for ContractStore writes and run history."""

import sqlite3
from pathlib import Path
from unittest.mock import patch

import pytest

from contract_feed.models.contract import Award, ContractRecord
from contract_feed.models.report import RunReport, RunStage
from contract_feed.store import BATCH_SIZE, ContractStore


def _make_record(
    natural_key: str = "n-1",
    source: str = "federal",
    title: str = "Test Contract",
    amount: float = 1000.0,
) -> ContractRecord:
    return ContractRecord(
        natural_key=natural_key,
        source=source,
        title=title,
        description="Test description",
        award=Award(amount=amount),
    )


class TestContractStoreWrite:
    """Tests for batched upserts and counting."""

    def test_default_batch_size(self, store: ContractStore) -> None:
        assert store.batch_size == BATCH_SIZE == 500

    def test_new_records_are_upserted(self, store: ContractStore) -> None:
        result = store.write([_make_record("n-1"), _make_record("n-2")])
        assert result.upserted == 2
        assert result.modified == 0
        assert result.errors == []
        assert store.count() == 2

    def test_rewrite_identical_is_noop(self, store: ContractStore) -> None:
        """Writing the same documents again counts neither upserted nor modified."""
        records = [_make_record("n-1"), _make_record("n-2")]
        store.write(records)
        result = store.write(records)
        assert result.upserted == 0
        assert result.modified == 0
        assert store.count() == 2

    def test_changed_document_is_modified(self, store: ContractStore) -> None:
        store.write([_make_record(title="Original")])
        result = store.write([_make_record(title="Amended")])
        assert result.upserted == 0
        assert result.modified == 1
        assert store.get("n-1", "federal").title == "Amended"

    def test_replacement_is_wholesale(self, store: ContractStore) -> None:
        """Fields absent from the new document do not survive the update."""
        store.write([_make_record()])
        store.write([ContractRecord(natural_key="n-1", source="federal", title="Bare")])
        rec = store.get("n-1", "federal")
        assert rec.description is None
        assert rec.award is None

    def test_key_is_scoped_by_source(self, store: ContractStore) -> None:
        result = store.write([_make_record("X-1", source="ny"), _make_record("X-1", source="il")])
        assert result.upserted == 2
        assert store.get("X-1", "ny") is not None
        assert store.get("X-1", "il") is not None
        assert store.get("X-1", "federal") is None

    def test_duplicate_keys_last_wins(self, store: ContractStore) -> None:
        result = store.write([_make_record(title="First"), _make_record(title="Second")])
        assert store.count() == 1
        assert store.get("n-1", "federal").title == "Second"
        assert result.upserted == 1
        assert result.modified == 1

    def test_empty_write(self, store: ContractStore) -> None:
        result = store.write([])
        assert result.upserted == 0
        assert result.errors == []

    def test_records_split_into_batches(self, temp_db: Path) -> None:
        with ContractStore(temp_db, batch_size=2) as store:
            with patch.object(store, "_write_batch", wraps=store._write_batch) as spy:
                result = store.write([_make_record(f"n-{i}") for i in range(5)])
            assert spy.call_count == 3
            assert [len(c.args[0]) for c in spy.call_args_list] == [2, 2, 1]
            assert result.upserted == 5

    def test_invalid_batch_size(self, temp_db: Path) -> None:
        with pytest.raises(ValueError):
            ContractStore(temp_db, batch_size=0)


class TestContractStorePartialFailure:
    """Tests for per-operation and per-batch failure isolation."""

    def test_failed_operation_does_not_block_siblings(self, store: ContractStore) -> None:
        original = store._upsert_one

        def flaky(conn, record, now):
            if record.natural_key == "bad":
                raise sqlite3.IntegrityError("constraint failed")
            return original(conn, record, now)

        with patch.object(store, "_upsert_one", side_effect=flaky):
            result = store.write([_make_record("n-1"), _make_record("bad"), _make_record("n-2")])

        assert result.upserted == 2
        assert len(result.errors) == 1
        assert "federal:bad" in result.errors[0]
        assert store.count() == 2
        assert store.get("bad", "federal") is None

    def test_failed_batch_is_recorded_and_next_batch_runs(self, temp_db: Path) -> None:
        with ContractStore(temp_db, batch_size=2) as store:
            original = store._write_batch
            calls = {"n": 0}

            def failing_first(batch):
                calls["n"] += 1
                if calls["n"] == 1:
                    raise sqlite3.OperationalError("database is locked")
                return original(batch)

            with patch.object(store, "_write_batch", side_effect=failing_first):
                result = store.write([_make_record(f"n-{i}") for i in range(4)])

            assert result.upserted == 2
            assert len(result.errors) == 1
            assert result.errors[0].startswith("Batch 1: ")
            assert "database is locked" in result.errors[0]
            assert store.get("n-0", "federal") is None
            assert store.get("n-2", "federal") is not None


class TestContractStorePersistence:
    """Tests for reopening the database."""

    def test_documents_survive_reopen(self, temp_db: Path) -> None:
        with ContractStore(temp_db) as store:
            store.write([_make_record("n-1"), _make_record("n-2")])
        with ContractStore(temp_db) as reopened:
            assert reopened.count() == 2
            assert reopened.get("n-1", "federal").award.amount == 1000.0


class TestContractStoreRuns:
    """Tests for run history."""

    def test_start_and_finish_run(self, store: ContractStore) -> None:
        run = store.start_run("federal")
        assert run.id > 0
        assert run.status == "running"
        assert run.finished_at is None

        report = RunReport(
            source="federal",
            stage=RunStage.DONE,
            success=True,
            total_fetched=10,
            total_upserted=7,
            total_modified=2,
            pages=1,
        )
        store.finish_run(run.id, report)

        runs = store.recent_runs()
        assert len(runs) == 1
        assert runs[0].status == "completed"
        assert runs[0].finished_at is not None
        assert runs[0].total_fetched == 10
        assert runs[0].total_upserted == 7
        assert runs[0].total_modified == 2
        assert runs[0].report["source"] == "federal"

    def test_failed_run_status(self, store: ContractStore) -> None:
        run = store.start_run("ny")
        store.finish_run(run.id, RunReport(source="ny", stage=RunStage.FAILED, success=False))
        assert store.recent_runs()[0].status == "failed"

    def test_recent_runs_filter_and_limit(self, store: ContractStore) -> None:
        for source in ("federal", "ny", "federal", "il"):
            store.start_run(source)
        assert len(store.recent_runs(limit=2)) == 2
        federal = store.recent_runs(source="federal")
        assert len(federal) == 2
        assert all(r.source == "federal" for r in federal)
        assert federal[0].id > federal[1].id

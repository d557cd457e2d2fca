"""SQLite-backed contract document store with batched, idempotent upserts."""

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from contract_feed.models.contract import ContractRecord
from contract_feed.models.report import RunReport, WriteResult
from contract_feed.query import ContractPage, ContractQuery, to_storage_timestamp

logger = logging.getLogger(__name__)

BATCH_SIZE = 500

INSERTED = "inserted"
MODIFIED = "modified"
UNCHANGED = "unchanged"


@dataclass
class RunRecord:
    """Record of an ingestion run."""

    id: int
    source: str
    started_at: datetime
    finished_at: Optional[datetime]
    status: str
    total_fetched: int = 0
    total_upserted: int = 0
    total_modified: int = 0
    pages: int = 0
    report: Optional[dict] = None


class ContractStore:
    """
    Contract documents keyed by (natural_key, source).
    Writes replace the whole document (last write wins); the connection is
    opened once at construction and held until close().
    """

    def __init__(self, db_path: str | Path, batch_size: int = BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._db_path = Path(db_path)
        self.batch_size = batch_size
        self._conn = sqlite3.connect(self._db_path)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    def __enter__(self) -> "ContractStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _connection(self) -> sqlite3.Connection:
        return self._conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    @staticmethod
    def _serialize(record: ContractRecord) -> str:
        """Stable JSON document; equal records serialize identically."""
        return json.dumps(record.model_dump(mode="json"), sort_keys=True)

    @staticmethod
    def _deserialize(row: sqlite3.Row) -> ContractRecord:
        return ContractRecord.model_validate(json.loads(row["data"]))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def _upsert_one(self, conn: sqlite3.Connection, record: ContractRecord, now: str) -> str:
        """Create or replace one document. Returns INSERTED, MODIFIED or UNCHANGED."""
        data = self._serialize(record)
        posted = to_storage_timestamp(record.posted_date) if record.posted_date else None
        columns = (
            record.title,
            record.description,
            posted,
            record.naics_code,
            record.award_amount,
            record.set_aside,
            record.state_code,
            data,
        )

        existing = conn.execute(
            "SELECT data FROM contracts WHERE natural_key = ? AND source = ?",
            (record.natural_key, record.source),
        ).fetchone()

        if existing is None:
            conn.execute(
                """
                INSERT INTO contracts (
                    natural_key, source, title, description, posted_date, naics_code,
                    award_amount, set_aside, state_code, data, first_seen_at, last_seen_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (record.natural_key, record.source, *columns, now, now),
            )
            return INSERTED

        if existing["data"] == data:
            conn.execute(
                "UPDATE contracts SET last_seen_at = ? WHERE natural_key = ? AND source = ?",
                (now, record.natural_key, record.source),
            )
            return UNCHANGED

        conn.execute(
            """
            UPDATE contracts SET
                title = ?, description = ?, posted_date = ?, naics_code = ?,
                award_amount = ?, set_aside = ?, state_code = ?, data = ?, last_seen_at = ?
            WHERE natural_key = ? AND source = ?
            """,
            (*columns, now, record.natural_key, record.source),
        )
        return MODIFIED

    def _write_batch(self, batch: list[ContractRecord]) -> WriteResult:
        """
        Write one batch in a single transaction. Operations are independent:
        a failing record is reported and its siblings are still committed.
        """
        result = WriteResult()
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            for record in batch:
                try:
                    outcome = self._upsert_one(conn, record, now)
                except (sqlite3.Error, ValueError, TypeError) as e:
                    logger.warning("Upsert failed for %s:%s: %s", record.source, record.natural_key, e)
                    result.errors.append(f"{record.source}:{record.natural_key}: {e}")
                    continue
                if outcome == INSERTED:
                    result.upserted += 1
                elif outcome == MODIFIED:
                    result.modified += 1
        return result

    def write(self, records: Iterable[ContractRecord]) -> WriteResult:
        """
        Upsert records in batches of batch_size.
        A batch that fails as a whole is recorded as "Batch <n>: ..." and the next batch still runs.
        """
        records = list(records)
        total = WriteResult()
        for batch_no, start in enumerate(range(0, len(records), self.batch_size), start=1):
            batch = records[start : start + self.batch_size]
            try:
                total.merge(self._write_batch(batch))
            except sqlite3.Error as e:
                logger.warning("Batch %d (%d records) failed: %s", batch_no, len(batch), e)
                total.errors.append(f"Batch {batch_no}: {e.__class__.__name__}: {e}")
        logger.info(
            "Wrote %d records: %d upserted, %d modified, %d errors",
            len(records),
            total.upserted,
            total.modified,
            len(total.errors),
        )
        return total

    def upsert(self, record: ContractRecord) -> WriteResult:
        """Write a single record."""
        return self.write([record])

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def find(self, query: Optional[ContractQuery] = None) -> ContractPage:
        """Filtered page of contracts, newest posted first (undated last)."""
        query = query or ContractQuery()
        where, params = query.where_clause()
        with self._connection() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM contracts {where}", params).fetchone()[0]
            rows = conn.execute(
                f"""
                SELECT data FROM contracts {where}
                ORDER BY posted_date IS NULL, posted_date DESC, source, natural_key
                LIMIT ? OFFSET ?
                """,
                (*params, query.page_size, query.offset),
            ).fetchall()
        return ContractPage(
            items=[self._deserialize(r) for r in rows],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )

    def count(self, query: Optional[ContractQuery] = None) -> int:
        """Number of contracts matching the query filters."""
        where, params = (query or ContractQuery()).where_clause()
        with self._connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM contracts {where}", params).fetchone()[0]

    def get(self, natural_key: str, source: str) -> Optional[ContractRecord]:
        """Get single contract by its dedup key."""
        with self._connection() as conn:
            row = conn.execute(
                "SELECT data FROM contracts WHERE natural_key = ? AND source = ?",
                (natural_key, source),
            ).fetchone()
        return self._deserialize(row) if row else None

    # -------------------------------------------------------------------------
    # Run history
    # -------------------------------------------------------------------------
    def start_run(self, source: str) -> RunRecord:
        """Record start of an ingestion run. Returns RunRecord with id."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            cursor = conn.execute(
                "INSERT INTO runs (source, started_at, status) VALUES (?, ?, 'running')",
                (source, now),
            )
            run_id = cursor.lastrowid
        return RunRecord(
            id=run_id or 0,
            source=source,
            started_at=datetime.fromisoformat(now),
            finished_at=None,
            status="running",
        )

    def finish_run(self, run_id: int, report: RunReport) -> None:
        """Persist the final report of a run."""
        now = datetime.now(timezone.utc).isoformat()
        status = "completed" if report.success else "failed"
        with self._connection() as conn:
            conn.execute(
                """
                UPDATE runs SET finished_at = ?, status = ?, total_fetched = ?,
                    total_upserted = ?, total_modified = ?, pages = ?, report = ?
                WHERE id = ?
                """,
                (
                    now,
                    status,
                    report.total_fetched,
                    report.total_upserted,
                    report.total_modified,
                    report.pages,
                    report.model_dump_json(),
                    run_id,
                ),
            )

    def recent_runs(self, source: Optional[str] = None, limit: int = 10) -> list[RunRecord]:
        """Most recent runs first."""
        sql = "SELECT * FROM runs"
        params: list = []
        if source:
            sql += " WHERE source = ?"
            params.append(source)
        sql += " ORDER BY started_at DESC, id DESC LIMIT ?"
        params.append(limit)
        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [
            RunRecord(
                id=r["id"],
                source=r["source"],
                started_at=datetime.fromisoformat(r["started_at"]),
                finished_at=datetime.fromisoformat(r["finished_at"]) if r["finished_at"] else None,
                status=r["status"],
                total_fetched=r["total_fetched"],
                total_upserted=r["total_upserted"],
                total_modified=r["total_modified"],
                pages=r["pages"],
                report=json.loads(r["report"]) if r["report"] else None,
            )
            for r in rows
        ]

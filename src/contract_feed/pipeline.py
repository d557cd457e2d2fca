"""Ingestion orchestration: fetch → normalize → write, one run per source."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from contract_feed.config import Settings
from contract_feed.connectors.base import BaseConnector
from contract_feed.connectors.registry import ConnectorRegistry
from contract_feed.models.contract import ContractRecord
from contract_feed.models.report import RunReport, RunStage
from contract_feed.store import ContractStore

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data found"
TRANSIENT_PREFIX = "Transient upstream failure"


def _ingest(
    report: RunReport,
    *,
    store: ContractStore,
    connector: Optional[BaseConnector],
    settings: Optional[Settings],
    now: Optional[datetime],
) -> None:
    """Advance report through fetching → normalizing → writing → done."""
    source_tag = report.source
    if connector is None:
        connector = ConnectorRegistry.get(source_tag, settings=settings)
    fetched = connector.fetch(now)

    report.total_fetched = len(fetched.records)
    report.pages = fetched.pages
    report.stop_reason = fetched.stop_reason
    report.date_range = fetched.date_range
    if fetched.transient_error:
        report.errors.append(f"{TRANSIENT_PREFIX}: {fetched.transient_error}")

    if not fetched.records:
        report.stage = RunStage.DONE
        report.success = True
        report.message = NO_DATA_MESSAGE
        logger.info("%s: %s", source_tag, NO_DATA_MESSAGE)
        return

    report.stage = RunStage.NORMALIZING
    records: list[ContractRecord] = []
    for raw in fetched.records:
        record = connector.normalize(raw)
        if record is not None:
            records.append(record)
    report.total_normalized = len(records)
    report.total_dropped = report.total_fetched - len(records)
    if report.total_dropped:
        logger.info("%s: dropped %d unidentifiable records", source_tag, report.total_dropped)

    report.stage = RunStage.WRITING
    written = store.write(records)
    report.total_upserted = written.upserted
    report.total_modified = written.modified
    report.errors.extend(written.errors)

    report.stage = RunStage.DONE
    report.success = True
    report.message = (
        f"Fetched {report.total_fetched} records: {report.total_upserted} new, "
        f"{report.total_modified} modified, {report.total_dropped} dropped"
    )
    logger.info("%s: %s", source_tag, report.message)


def run_ingestion(
    source_tag: str,
    *,
    store: ContractStore,
    connector: Optional[BaseConnector] = None,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> RunReport:
    """
    Run one source end to end and return its report.
    Any error that aborts the run (fetch-fatal, configuration, unknown source)
    marks the run failed in the run history and is re-raised.
    Per-record and per-batch write errors are reported, never raised.
    """
    report = RunReport(source=source_tag)
    run = store.start_run(source_tag)
    report.run_id = run.id
    logger.info("Ingestion run %d started for %s", run.id, source_tag)

    try:
        _ingest(report, store=store, connector=connector, settings=settings, now=now)
    except Exception as e:
        failed_in = report.stage.value
        report.stage = RunStage.FAILED
        report.success = False
        report.message = str(e)
        report.errors.append(str(e))
        logger.error("Ingestion for %s failed while %s: %s", source_tag, failed_in, e)
        store.finish_run(run.id, report)
        raise

    store.finish_run(run.id, report)
    return report


def run_all(
    *,
    store: ContractStore,
    settings: Optional[Settings] = None,
    sources: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> dict[str, RunReport]:
    """
    Run every source in turn. A failing source yields a failed report
    and does not stop the remaining sources.
    """
    reports: dict[str, RunReport] = {}
    for source_tag in sources or ConnectorRegistry.available_sources():
        try:
            reports[source_tag] = run_ingestion(source_tag, store=store, settings=settings, now=now)
        except Exception as e:
            reports[source_tag] = RunReport(
                source=source_tag,
                stage=RunStage.FAILED,
                success=False,
                message=str(e),
                errors=[str(e)],
            )
    return reports

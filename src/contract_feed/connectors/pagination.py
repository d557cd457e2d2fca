"""Offset pagination loop with enumerable stop conditions."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from contract_feed.errors import TransientFetchError
from contract_feed.models.raw import RawContract
from contract_feed.models.report import FetchResult, StopReason

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One upstream page: its items and the advertised total, when the API reports one."""

    records: list[Any] = field(default_factory=list)
    total: Optional[int] = None


PageFetcher = Callable[[int, int], Page]


def stop_reason_for(page: Page, page_size: int, accumulated: int, pages: int, max_pages: int) -> Optional[StopReason]:
    """
    Decide whether to stop after a non-empty page. Checked in order:
    advertised total reached, short final page, page cap.
    """
    if page.total is not None and accumulated >= page.total:
        return StopReason.TOTAL_REACHED
    if len(page.records) < page_size:
        return StopReason.SHORT_PAGE
    if pages >= max_pages:
        return StopReason.PAGE_CAP
    return None


def paginate(
    fetch_page: PageFetcher,
    *,
    page_size: int,
    max_pages: int,
    delay: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> FetchResult:
    """
    Request pages in increasing offset order until a stop condition holds.
    TransientFetchError keeps what was accumulated; any other error propagates.
    """
    items: list[Any] = []
    offset = 0
    pages = 0
    transient_error: Optional[str] = None

    while True:
        try:
            page = fetch_page(offset, page_size)
        except TransientFetchError as e:
            logger.warning("Stopping pagination at offset %d after %d page(s): %s", offset, pages, e)
            stop = StopReason.TRANSIENT_FAILURE
            transient_error = str(e)
            break

        if not page.records:
            stop = StopReason.EMPTY_PAGE
            break

        items.extend(page.records)
        pages += 1
        logger.debug("Page %d: %d records (offset=%d, total=%s)", pages, len(page.records), offset, page.total)

        stop = stop_reason_for(page, page_size, len(items), pages, max_pages)
        if stop is not None:
            break

        offset += len(page.records)
        if delay > 0:
            sleep(delay)

    if stop == StopReason.PAGE_CAP:
        logger.warning("Page cap of %d reached; returning %d records", max_pages, len(items))

    records = [RawContract(data=item) for item in items if isinstance(item, dict)]
    if len(records) != len(items):
        logger.debug("Skipped %d non-object items", len(items) - len(records))
    return FetchResult(
        records=records,
        pages=pages,
        stop_reason=stop,
        transient_error=transient_error,
    )

"""Write normalized fund records to the price store."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from load.price_store import PriceStore
from models.schemas import FundRecord, PersistSummary

logger = logging.getLogger(__name__)


def _is_complete(record: FundRecord) -> bool:
    return bool(record.fund_id) and bool(record.date) and record.price is not None


def persist(records: Sequence[FundRecord], store: PriceStore) -> PersistSummary:
    """Upsert each record's historical entry, then overwrite the fund's latest unit.

    Failures are counted per record; the rest of the batch is still written.
    """
    saved_count = 0
    error_count = 0

    if not records:
        logger.warning("No fund records to persist")

    for record in records:
        if not _is_complete(record):
            logger.warning("Skipping incomplete record: %s", record)
            error_count += 1
            continue

        try:
            store.upsert_historical(record.fund_id, record.date, {"date": record.date, "price": record.price})
            logger.info("Historical saved: priceUnits/%s/historical/%s price=%s", record.fund_id, record.date, record.price)

            store.set_latest_unit(record.fund_id, record.price)
            logger.info("Latest unit updated: funds/%s unit=%s", record.fund_id, record.price)
        except Exception as exc:  # any store backend; counted per record
            logger.error("Failed to save fund %s: %s", record.fund_id, exc)
            error_count += 1
            continue

        saved_count += 1

    summary = PersistSummary(saved_count=saved_count, error_count=error_count, total_processed=len(records))
    logger.info(
        "Persist summary: saved=%s errors=%s total=%s",
        summary.saved_count,
        summary.error_count,
        summary.total_processed,
    )
    return summary

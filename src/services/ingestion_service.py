"""Core service composing daily collection and persistence into one run."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from load.price_store import PriceStore
from load.write_prices import persist
from models.schemas import CollectResult, IngestionSummary

logger = logging.getLogger(__name__)


class DailyCollector(Protocol):
    def collect_daily(self, *args: Any, **kwargs: Any) -> CollectResult: ...


def run_ingestion(
    collector: DailyCollector,
    store: PriceStore,
    source: str,
    dry_run: bool = False,
    **collect_kwargs: Any,
) -> IngestionSummary:
    collected = collector.collect_daily(**collect_kwargs)

    if not collected.records:
        logger.warning("No fund records collected from %s", source)
        return IngestionSummary(
            source=source,
            success=False,
            reason="No fund records were collected",
            collected=collected,
        )

    if dry_run:
        logger.info("Dry run: skipping persistence of %s record(s)", len(collected.records))
        return IngestionSummary(source=source, success=True, reason="dry run", collected=collected)

    persisted = persist(collected.records, store)
    if not persisted.success:
        return IngestionSummary(
            source=source,
            success=False,
            reason="No fund records were saved",
            collected=collected,
            persisted=persisted,
        )
    return IngestionSummary(source=source, success=True, reason=None, collected=collected, persisted=persisted)

"""Prefect flow to collect daily fund prices and write them to the price store."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from prefect import flow, get_run_logger, task

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "src"))

from config.funds import DEFAULT_FUND_TABLE  # noqa: E402
from config.settings import settings  # noqa: E402
from db.connections import create_price_store_engine  # noqa: E402
from extract.gmail_reader import GmailReportMailbox  # noqa: E402
from extract.openai_extractor import OpenAIReportExtractor  # noqa: E402
from extract.rest_fund_client import RestFundClient  # noqa: E402
from load.price_store import SqlPriceStore  # noqa: E402
from load.write_prices import persist  # noqa: E402
from models.schemas import CollectResult, FundRecord, PersistSummary  # noqa: E402
from services.batch_collector import EmailBatchCollector, RestBatchCollector  # noqa: E402
from transform.normalize.fund_identity import FundIdentityResolver  # noqa: E402
from utils.dates import default_valuation_date  # noqa: E402

SOURCES = ("rest", "email")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the daily fund price ingestion via Prefect.")
    parser.add_argument("--source", choices=SOURCES, default="rest", help="Data source to ingest from.")
    parser.add_argument(
        "--valuation-date",
        default=default_valuation_date(),
        help="REST valuation date in YYYY-MM-DD format (default: yesterday).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Collect without writing.")
    return parser.parse_args()


@task(name="collect-fund-records")
def collect_records(source: str, valuation_date: str) -> CollectResult:
    logger = get_run_logger()
    resolver = FundIdentityResolver(DEFAULT_FUND_TABLE)

    if source == "rest":
        result = RestBatchCollector(RestFundClient(settings.rest_api), resolver).collect_daily(valuation_date)
    else:
        collector = EmailBatchCollector(
            GmailReportMailbox(settings.gmail),
            OpenAIReportExtractor(settings.openai, DEFAULT_FUND_TABLE),
            resolver,
        )
        result = collector.collect_daily()

    logger.info(
        "Collected source=%s attempted=%s succeeded=%s",
        source,
        result.attempted_count,
        result.succeeded_count,
    )
    for failure in result.failures:
        logger.warning("Skipped %s at %s: %s", failure.identifier, failure.stage.value, failure.reason)
    return result


@task(name="persist-fund-records", retries=2, retry_delay_seconds=30)
def persist_records(records: list[FundRecord]) -> PersistSummary:
    logger = get_run_logger()
    store = SqlPriceStore(create_price_store_engine())
    store.create_schema()
    summary = persist(records, store)
    logger.info(
        "Persisted saved=%s errors=%s total=%s",
        summary.saved_count,
        summary.error_count,
        summary.total_processed,
    )
    return summary


@flow(name="fund-unit-price-daily-ingest", log_prints=True)
def daily_ingest_flow(source: str = "rest", valuation_date: str | None = None, dry_run: bool = False) -> dict:
    collected = collect_records(source, valuation_date or default_valuation_date())
    if not collected.records:
        raise RuntimeError(f"No fund records were collected from {source}")
    if dry_run:
        return collected.to_dict()

    summary = persist_records(collected.records)
    if not summary.success:
        raise RuntimeError("No fund records were saved")
    return {"collected": collected.to_dict(), "persisted": summary.to_dict()}


if __name__ == "__main__":
    args = _parse_args()
    daily_ingest_flow(source=args.source, valuation_date=args.valuation_date, dry_run=args.dry_run)

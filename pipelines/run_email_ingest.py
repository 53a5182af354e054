"""Pipeline entrypoint: extract fund prices from today's emailed report and persist them."""

from __future__ import annotations

import argparse
from datetime import date
import json
import logging
from pathlib import Path
import sys

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.funds import DEFAULT_FUND_TABLE  # noqa: E402
from config.settings import settings  # noqa: E402
from db.connections import create_price_store_engine  # noqa: E402
from extract.gmail_reader import GmailReportMailbox  # noqa: E402
from extract.openai_extractor import OpenAIReportExtractor  # noqa: E402
from load.price_store import SqlPriceStore  # noqa: E402
from models.errors import AuthenticationError, PersistenceError  # noqa: E402
from services.batch_collector import EmailBatchCollector  # noqa: E402
from services.ingestion_service import run_ingestion  # noqa: E402
from transform.normalize.fund_identity import FundIdentityResolver  # noqa: E402
from utils.log_setup import configure_logging  # noqa: E402

logger = logging.getLogger("run_email_ingest")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest daily fund unit prices from the emailed PDF report.")
    parser.add_argument(
        "--received-on",
        type=date.fromisoformat,
        default=date.today(),
        help="Day the report email was received, YYYY-MM-DD (default: today).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Extract and normalize without writing.")
    parser.add_argument("--create-schema", action="store_true", help="Create price store tables first.")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    configure_logging(settings.log_level)

    try:
        collector = EmailBatchCollector(
            GmailReportMailbox(settings.gmail),
            OpenAIReportExtractor(settings.openai, DEFAULT_FUND_TABLE),
            FundIdentityResolver(DEFAULT_FUND_TABLE),
        )
        store = SqlPriceStore(create_price_store_engine())
        if args.create_schema:
            store.create_schema()
        summary = run_ingestion(
            collector,
            store,
            source="email",
            dry_run=args.dry_run,
            received_on=args.received_on,
        )
    except AuthenticationError as exc:
        logger.error("Authentication failed, nothing was persisted: %s", exc)
        return 1
    except PersistenceError as exc:
        logger.error("Price store unavailable: %s", exc)
        return 1

    print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    print(
        "run_email_ingest completed",
        f"received_on={args.received_on.isoformat()}",
        f"success={summary.success}",
        f"collected={summary.collected.succeeded_count}/{summary.collected.attempted_count}",
        f"saved={summary.persisted.saved_count if summary.persisted else 0}",
    )
    return 0 if summary.success else 1


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

from pathlib import Path
import sys
import tempfile
import unittest

from sqlalchemy import create_engine

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "src"))

from config.funds import DEFAULT_FUND_TABLE
from load.price_store import SqlPriceStore
from models.errors import AuthenticationError
from models.schemas import CollectResult, FundRecord
from services.ingestion_service import run_ingestion


class StaticCollector:
    def __init__(self, result: CollectResult | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.kwargs: dict = {}

    def collect_daily(self, **kwargs) -> CollectResult:
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.result


class TestIngestionService(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.engine = create_engine(f"sqlite:///{Path(self.tmp.name) / 'prices.db'}")
        self.store = SqlPriceStore(self.engine)
        self.store.create_schema()
        self.fund_id = DEFAULT_FUND_TABLE.by_code("1").fund_id

    def tearDown(self) -> None:
        self.engine.dispose()
        self.tmp.cleanup()

    def _collected(self) -> CollectResult:
        result = CollectResult(attempted_count=2)
        result.add_record(FundRecord(fund_id=self.fund_id, date="2025-06-18", price=1234.5))
        return result

    def test_collect_then_persist(self) -> None:
        collector = StaticCollector(self._collected())

        summary = run_ingestion(collector, self.store, source="rest", valuation_date="2025-06-18")

        self.assertTrue(summary.success)
        self.assertEqual(collector.kwargs, {"valuation_date": "2025-06-18"})
        self.assertEqual(summary.persisted.saved_count, 1)
        self.assertEqual(summary.collected.failed_count, 1)
        self.assertEqual(self.store.get_latest_unit(self.fund_id), 1234.5)
        self.assertEqual(summary.to_dict()["collected"]["records"][0]["idFund"], self.fund_id)

    def test_nothing_collected_is_reported_as_failure(self) -> None:
        summary = run_ingestion(StaticCollector(CollectResult(attempted_count=6)), self.store, source="rest")

        self.assertFalse(summary.success)
        self.assertEqual(summary.reason, "No fund records were collected")
        self.assertIsNone(summary.persisted)

    def test_dry_run_does_not_write(self) -> None:
        summary = run_ingestion(StaticCollector(self._collected()), self.store, source="email", dry_run=True)

        self.assertTrue(summary.success)
        self.assertIsNone(self.store.get_latest_unit(self.fund_id))

    def test_authentication_error_propagates(self) -> None:
        collector = StaticCollector(error=AuthenticationError("missing credentials"))
        with self.assertRaises(AuthenticationError):
            run_ingestion(collector, self.store, source="rest")
        self.assertIsNone(self.store.get_latest_unit(self.fund_id))


if __name__ == "__main__":
    unittest.main()

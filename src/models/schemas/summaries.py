"""Schemas for batch collection, persistence, and run summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from models.enums import FailureStage
from models.schemas.fund_record import FundRecord


@dataclass(frozen=True, slots=True)
class ItemFailure:
    identifier: str
    stage: FailureStage
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"identifier": self.identifier, "stage": self.stage.value, "reason": self.reason}


@dataclass(slots=True)
class CollectResult:
    records: list[FundRecord] = field(default_factory=list)
    attempted_count: int = 0
    succeeded_count: int = 0
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return self.attempted_count - self.succeeded_count

    @property
    def success(self) -> bool:
        return self.succeeded_count > 0

    def add_record(self, record: FundRecord) -> None:
        self.records.append(record)
        self.succeeded_count += 1

    def add_failure(self, identifier: object, stage: FailureStage, reason: str) -> None:
        self.failures.append(ItemFailure(str(identifier), stage, reason))

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "attemptedCount": self.attempted_count,
            "succeededCount": self.succeeded_count,
            "failedCount": self.failed_count,
            "records": [record.to_document() for record in self.records],
            "failures": [failure.to_dict() for failure in self.failures],
        }


@dataclass(frozen=True, slots=True)
class PersistSummary:
    saved_count: int
    error_count: int
    total_processed: int

    @property
    def success(self) -> bool:
        return self.saved_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "savedCount": self.saved_count,
            "errorCount": self.error_count,
            "totalProcessed": self.total_processed,
        }


@dataclass(frozen=True, slots=True)
class IngestionSummary:
    source: str
    success: bool
    reason: str | None
    collected: CollectResult
    persisted: PersistSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "success": self.success,
            "reason": self.reason,
            "collected": self.collected.to_dict(),
            "persisted": self.persisted.to_dict() if self.persisted is not None else None,
        }

"""Schema for normalized fund price records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FundRecord:
    fund_id: str
    date: str
    price: float
    target_income: float | None = None
    formatted_income: str | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "idFund": self.fund_id,
            "date": self.date,
            "price": self.price,
            "targetIncome": self.target_income,
            "formattedTargetIncome": self.formatted_income,
        }

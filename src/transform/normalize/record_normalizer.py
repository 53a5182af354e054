"""Normalize raw source records into canonical fund price records."""

from __future__ import annotations

import logging
import math
from typing import Any

from config.funds import NEW_FUND_LABEL, FundDefinition
from models.errors import IncompleteRecordError
from models.schemas import FundRecord, RawRecord
from utils.dates import truncate_to_date
from utils.validation import require_fields

logger = logging.getLogger(__name__)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _coerce_price(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Invalid unit price {value!r}")
    price = float(value)
    if not math.isfinite(price) or price <= 0:
        raise ValueError(f"Unit price must be positive, got {value!r}")
    return price


def _coerce_income(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def derive_income(raw: RawRecord, fund: FundDefinition) -> tuple[float | None, str | None]:
    """Return ``(target_income, formatted_income)`` for one fund.

    New funds carry the fixed sentinel label regardless of what the source sent.
    """
    if fund.is_new:
        return None, NEW_FUND_LABEL

    value = raw.income(fund.income_field)
    if value is None:
        logger.warning("Profitability field %r not present for fund %s", fund.income_field, fund.code)
        return None, None

    target_income = _coerce_income(value)
    if target_income is None:
        logger.warning("Profitability field %r for fund %s is not numeric: %r", fund.income_field, fund.code, value)
        return None, None
    return target_income, f"{_format_number(value)}% {fund.income_window.label}"


def normalize_record(raw: RawRecord, fund: FundDefinition) -> FundRecord | None:
    """Build a ``FundRecord`` from a raw item, or return ``None`` when it is unusable."""
    try:
        require_fields({"date": raw.date, "price": raw.price}, ("date", "price"))
        valuation_date = truncate_to_date(raw.date)
        price = _coerce_price(raw.price)
    except IncompleteRecordError as exc:
        logger.warning("Incomplete %s record for fund %s: %s", raw.source.value, fund.code, exc)
        return None
    except (TypeError, ValueError) as exc:
        logger.warning("Invalid %s record for fund %s: %s", raw.source.value, fund.code, exc)
        return None

    target_income, formatted_income = derive_income(raw, fund)
    return FundRecord(
        fund_id=fund.fund_id,
        date=valuation_date,
        price=price,
        target_income=target_income,
        formatted_income=formatted_income,
    )

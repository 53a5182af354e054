"""Adapt REST payloads and AI-extracted items to a single raw record shape."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from models.enums import SourceSystem
from models.schemas import RawRecord

REST_DATE_FIELD = "fecha"
REST_PRICE_FIELD = "vlr_Unidad"

EXTRACTED_ID_FIELDS = ("idFund", "fundId", "fund_id", "fundName", "fondo")


def from_rest_payload(fund_code: str, payload: Mapping[str, Any]) -> RawRecord:
    """Build a raw record from a ``GetProfitabilityByFund`` response body.

    The fund values live under ``data``; a body without it yields an empty record
    that the normalizer rejects.
    """
    data = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(data, Mapping):
        data = {}
    return RawRecord(
        source=SourceSystem.REST,
        identifier=str(fund_code),
        date=data.get(REST_DATE_FIELD),
        price=data.get(REST_PRICE_FIELD),
        fields=dict(data),
    )


def extracted_identifier(item: Mapping[str, Any]) -> str | None:
    for name in EXTRACTED_ID_FIELDS:
        value = item.get(name)
        if value not in (None, ""):
            return str(value)
    return None


def from_extracted_item(item: Mapping[str, Any]) -> RawRecord:
    return RawRecord(
        source=SourceSystem.EMAIL,
        identifier=extracted_identifier(item) or "",
        date=item.get("date"),
        price=item.get("price"),
        fields=dict(item),
    )

"""Validation helpers for raw source payloads."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from models.errors import IncompleteRecordError


def missing_fields(values: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    return sorted(name for name in required if values.get(name) is None)


def require_fields(values: Mapping[str, Any], required: Iterable[str]) -> None:
    missing = missing_fields(values, required)
    if missing:
        raise IncompleteRecordError(missing)

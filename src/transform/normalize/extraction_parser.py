"""Parse free-form model output into candidate fund records."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from models.errors import ExtractionFormatError

logger = logging.getLogger(__name__)

_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    items: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None
    raw_output: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def _strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def _load_json_array(text: str) -> list[Any]:
    cleaned = _strip_code_fences(text)
    if not cleaned:
        raise ExtractionFormatError("Model output is empty")

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        match = _ARRAY_PATTERN.search(cleaned)
        if match is None:
            raise ExtractionFormatError("Model output does not contain a JSON array") from None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise ExtractionFormatError(f"Invalid JSON array: {exc.msg}") from exc

    if not isinstance(parsed, list):
        raise ExtractionFormatError(f"Expected a JSON array, got {type(parsed).__name__}")
    return parsed


def parse_extraction_output(text: str | None) -> ExtractionResult:
    """Read the model's answer as a list of record objects.

    Never raises: malformed output is returned as a result with ``error`` set and no
    items. Non-object array entries are dropped.
    """
    raw = (text or "").strip()
    try:
        parsed = _load_json_array(raw)
    except ExtractionFormatError as exc:
        logger.warning("Discarding model output: %s", exc)
        return ExtractionResult(items=[], error=str(exc), raw_output=raw)

    items = []
    for position, entry in enumerate(parsed):
        if isinstance(entry, dict):
            items.append(entry)
        else:
            logger.warning("Skipping non-object entry %s in model output: %r", position, entry)
    return ExtractionResult(items=items, raw_output=raw)

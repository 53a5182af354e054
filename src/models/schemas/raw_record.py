"""Schema for one source item before normalization."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from models.enums import SourceSystem


@dataclass(frozen=True, slots=True)
class RawRecord:
    source: SourceSystem
    identifier: str
    date: Any
    price: Any
    fields: Mapping[str, Any] = field(default_factory=dict)

    def income(self, field_name: str) -> Any:
        return self.fields.get(field_name)

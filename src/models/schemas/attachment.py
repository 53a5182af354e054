"""Schema for an in-memory email attachment."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Attachment:
    filename: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

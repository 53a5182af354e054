"""Error taxonomy for the ingestion pipeline.

Only ``AuthenticationError`` is fatal for a run. Every other error describes a
single fund, item, or document and is recovered by the caller that iterates the batch.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for all pipeline errors."""


class UnknownFundError(IngestionError):
    def __init__(self, identifier: object) -> None:
        super().__init__(f"Unknown fund identifier: {identifier!r}")
        self.identifier = identifier


class IncompleteRecordError(IngestionError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {missing}")
        self.missing = missing


class SourceFetchError(IngestionError):
    """Fetching one fund's data or one document's extraction failed."""


class ExtractionFormatError(IngestionError):
    """Model output could not be read as a JSON array of records."""


class PersistenceError(IngestionError):
    """A write to the price store failed."""


class AuthenticationError(IngestionError):
    """Source credentials are missing or were rejected."""

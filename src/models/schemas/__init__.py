"""Schema objects for core entities."""

from .attachment import Attachment
from .fund_record import FundRecord
from .raw_record import RawRecord
from .summaries import CollectResult, IngestionSummary, ItemFailure, PersistSummary

__all__ = ["Attachment", "FundRecord", "RawRecord", "ItemFailure", "CollectResult", "PersistSummary", "IngestionSummary"]

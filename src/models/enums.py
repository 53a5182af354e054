"""Common enums used across extraction, normalization, and persistence."""

from enum import Enum


class SourceSystem(str, Enum):
    REST = "rest"
    EMAIL = "email"


class IncomeWindow(str, Enum):
    """Trailing period a fund's profitability figure is computed over."""

    SIX_MONTHS = "E.A. Últimos 6 meses"
    LAST_YEAR = "E.A. Último año"

    @property
    def label(self) -> str:
        return self.value


class FailureStage(str, Enum):
    IDENTITY = "identity"
    FETCH = "fetch"
    EXTRACTION = "extraction"
    NORMALIZATION = "normalization"

"""Closed table of funds handled by the daily ingestion."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from models.enums import IncomeWindow

NEW_FUND_LABEL = "Fondo nuevo"
DEFAULT_INCOME_FIELD = "rentabilidad365"


@dataclass(frozen=True, slots=True)
class FundDefinition:
    code: str
    fund_id: str
    name: str | None = None
    income_field: str = DEFAULT_INCOME_FIELD
    income_window: IncomeWindow = IncomeWindow.LAST_YEAR
    is_new: bool = False


def _name_key(value: str) -> str:
    return " ".join(value.split()).upper()


class FundTable:
    """Immutable lookup over a fixed set of fund definitions.

    Funds are addressed by REST code, report display name, or canonical UUID.
    Iteration follows definition order, which is also the REST fetch order.
    """

    def __init__(self, definitions: Iterable[FundDefinition]) -> None:
        self._definitions = tuple(definitions)
        self._by_code = {d.code: d for d in self._definitions}
        self._by_id = {d.fund_id: d for d in self._definitions}
        self._by_name = {_name_key(d.name): d for d in self._definitions if d.name}
        if len(self._by_code) != len(self._definitions) or len(self._by_id) != len(self._definitions):
            raise ValueError("Fund codes and fund ids must be unique")

    def __iter__(self) -> Iterator[FundDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def codes(self) -> list[str]:
        return [d.code for d in self._definitions]

    @property
    def named(self) -> list[FundDefinition]:
        return [d for d in self._definitions if d.name]

    def by_code(self, code: str) -> FundDefinition | None:
        return self._by_code.get(code)

    def by_id(self, fund_id: str) -> FundDefinition | None:
        return self._by_id.get(fund_id)

    def by_name(self, name: str) -> FundDefinition | None:
        return self._by_name.get(_name_key(name))


DEFAULT_FUND_TABLE = FundTable(
    [
        FundDefinition(
            code="43",
            fund_id="6073f1cf-40df-4999-9df3-0072a673d8d5",
            name="FONDO DE INVERSION COLECTIVA ACCIONES USA VOO",
            income_field="rentabilidad180",
            income_window=IncomeWindow.SIX_MONTHS,
        ),
        FundDefinition(
            code="1",
            fund_id="6073f1cf-40df-4999-9df3-0072a673d8d9",
            name="FONDO DE INVERSION COLECTIVA ACCIVAL VISTA",
        ),
        FundDefinition(
            code="38",
            fund_id="6073f1cf-40df-4999-9df3-0072a673d8d8",
            name="FIC ACCICUENTA CONSERVADOR",
        ),
        FundDefinition(
            code="39",
            fund_id="6073f1cf-40df-4999-9df3-0072a673d8d7",
            name="FIC ACCICUENTA MODERADO",
        ),
        FundDefinition(
            code="40",
            fund_id="6073f1cf-40df-4999-9df3-0072a673d8d6",
            name="FIC ABIERTO ACCICUENTAMAYOR RIESGO",
        ),
        # Launched recently; not listed in the emailed report yet.
        FundDefinition(
            code="50",
            fund_id="6073f1cf-40df-4999-9df3-0072a673d8d10",
            is_new=True,
        ),
    ]
)

"""Price store: historical unit prices plus the latest unit value per fund."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import Column, DateTime, Double, MetaData, String, Table, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from models.errors import PersistenceError

metadata = MetaData()

price_units_historical = Table(
    "price_units_historical",
    metadata,
    Column("fund_id", String(64), primary_key=True),
    Column("date", String(10), primary_key=True),
    Column("price", Double, nullable=True),
    Column("updated_at", DateTime, nullable=True),
)

funds = Table(
    "funds",
    metadata,
    Column("fund_id", String(64), primary_key=True),
    Column("unit", Double, nullable=True),
    Column("updated_at", DateTime, nullable=True),
)


class PriceStore(Protocol):
    """Keyed writes used by ``persist``; a raised exception fails only the record being written."""

    def upsert_historical(self, fund_id: str, date: str, values: Mapping[str, Any]) -> None: ...

    def set_latest_unit(self, fund_id: str, price: float) -> None: ...


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _upsert(conn: Connection, table: Table, keys: Mapping[str, Any], values: Mapping[str, Any]) -> None:
    """Update only ``values`` on the keyed row, inserting it when absent."""
    condition = [table.c[name] == value for name, value in keys.items()]
    result = conn.execute(update(table).where(*condition).values(**values))
    if result.rowcount == 0:
        conn.execute(insert(table).values({**keys, **values}))


class SqlPriceStore:
    """SQL-backed store keyed like ``priceUnits/{fund}/historical/{date}`` and ``funds/{fund}``.

    Historical writes merge: columns not named in a write keep their stored value.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_schema(self) -> None:
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not create price store tables: {exc}") from exc

    def upsert_historical(self, fund_id: str, date: str, values: Mapping[str, Any]) -> None:
        columns = {name: value for name, value in values.items() if name in price_units_historical.c}
        columns.pop("fund_id", None)
        columns["date"] = date
        columns["updated_at"] = _now()
        try:
            with self.engine.begin() as conn:
                _upsert(conn, price_units_historical, {"fund_id": fund_id, "date": date}, columns)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Historical write failed for {fund_id}/{date}: {exc}") from exc

    def set_latest_unit(self, fund_id: str, price: float) -> None:
        try:
            with self.engine.begin() as conn:
                _upsert(conn, funds, {"fund_id": fund_id}, {"unit": price, "updated_at": _now()})
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Latest unit write failed for {fund_id}: {exc}") from exc

    def get_historical(self, fund_id: str) -> list[dict[str, Any]]:
        query = (
            select(price_units_historical.c.date, price_units_historical.c.price)
            .where(price_units_historical.c.fund_id == fund_id)
            .order_by(price_units_historical.c.date)
        )
        with self.engine.connect() as conn:
            return [dict(row._mapping) for row in conn.execute(query)]

    def get_latest_unit(self, fund_id: str) -> float | None:
        query = select(funds.c.unit).where(funds.c.fund_id == fund_id)
        with self.engine.connect() as conn:
            return conn.execute(query).scalar_one_or_none()

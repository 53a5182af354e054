"""Create SQLAlchemy engines for the price store database."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from config.settings import DatabaseConfig, settings


def _mysql_url(host: str, port: int, user: str, password: str, name: str) -> str:
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"


def _engine(db_config: DatabaseConfig) -> Engine:
    return create_engine(
        _mysql_url(
            db_config.host,
            db_config.port,
            db_config.user,
            db_config.password,
            db_config.name,
        ),
        pool_pre_ping=True,
    )


def create_price_store_engine(url: str | None = None) -> Engine:
    url = url or settings.price_store_url
    if url:
        return create_engine(url, pool_pre_ping=True)
    return _engine(settings.price_store_db)

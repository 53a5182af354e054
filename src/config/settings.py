"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class DatabaseConfig:
    host: str
    port: int
    user: str
    password: str
    name: str


@dataclass(frozen=True)
class RestApiConfig:
    base_url: str
    auth_path: str
    data_path: str
    password: str | None
    app_code: str | None
    client_cert_path: str | None
    client_key_path: str | None
    timeout_seconds: float
    retry_attempts: int


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str | None
    model: str


@dataclass(frozen=True)
class GmailConfig:
    client_id: str | None
    client_secret: str | None
    access_token: str | None
    refresh_token: str | None
    token_uri: str
    sender: str
    subject: str


@dataclass(frozen=True)
class Settings:
    app_env: str
    log_level: str
    price_store_url: str | None
    price_store_db: DatabaseConfig
    rest_api: RestApiConfig
    openai: OpenAIConfig
    gmail: GmailConfig


def _db(server_prefix: str, default_port: int, name_env: str, default_name: str) -> DatabaseConfig:
    return DatabaseConfig(
        host=os.getenv(f"{server_prefix}_HOST", "127.0.0.1"),
        port=int(os.getenv(f"{server_prefix}_PORT", str(default_port))),
        user=os.getenv(f"{server_prefix}_USER", "root"),
        password=os.getenv(f"{server_prefix}_PASSWORD", ""),
        name=os.getenv(name_env, default_name),
    )


def _rest_api() -> RestApiConfig:
    return RestApiConfig(
        base_url=os.getenv("REST_API_BASE_URL", "https://apifondosmpf.accivalores.com").rstrip("/"),
        auth_path=os.getenv("REST_API_AUTH_PATH", "/AyV/Autenticacion/GenerateAppToken"),
        data_path=os.getenv("REST_API_DATA_PATH", "/AyV/v3/Pocket/GetProfitabilityByFund"),
        password=os.getenv("AUTH_PASSWORD"),
        app_code=os.getenv("AUTH_CODIGO_APP"),
        client_cert_path=os.getenv("CLIENT_CERT_PATH"),
        client_key_path=os.getenv("CLIENT_KEY_PATH"),
        timeout_seconds=float(os.getenv("REST_API_TIMEOUT_SECONDS", "15")),
        retry_attempts=int(os.getenv("REST_API_RETRY_ATTEMPTS", "2")),
    )


def _gmail() -> GmailConfig:
    return GmailConfig(
        client_id=os.getenv("GOOGLE_CLIENT_ID"),
        client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
        access_token=os.getenv("ACCESS_TOKEN_KEY"),
        refresh_token=os.getenv("REFRESH_TOKEN_KEY"),
        token_uri=os.getenv("GOOGLE_TOKEN_URI", "https://oauth2.googleapis.com/token"),
        sender=os.getenv("REPORT_SENDER", "extractos@accivalores.com"),
        subject=os.getenv("REPORT_SUBJECT", "Valor diario de la unidad y rentabilidad fondos"),
    )


def get_settings() -> Settings:
    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        price_store_url=os.getenv("PRICE_STORE_URL") or None,
        price_store_db=_db("PRICE_STORE_DB", 3306, "PRICE_STORE_DB_NAME", "fund_prices"),
        rest_api=_rest_api(),
        openai=OpenAIConfig(
            api_key=os.getenv("OPENAI_API_KEY") or None,
            model=os.getenv("OPENAI_MODEL", "gpt-4.1"),
        ),
        gmail=_gmail(),
    )


settings = get_settings()

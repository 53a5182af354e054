"""Read daily fund unit prices from the fund manager's REST API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from config.settings import RestApiConfig
from models.errors import AuthenticationError, SourceFetchError
from utils.retry import retry

logger = logging.getLogger(__name__)


class RestFundClient:
    """Token-authenticated client for ``GetProfitabilityByFund``.

    Client certificates (mTLS) are attached when both paths are configured.
    """

    def __init__(self, config: RestApiConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.bearer_token: str | None = None
        self._load_client_certificate()

    def _load_client_certificate(self) -> None:
        cert_path, key_path = self.config.client_cert_path, self.config.client_key_path
        if not cert_path or not key_path:
            logger.warning("Client certificate (mTLS) not configured; continuing without client SSL")
            return
        self.session.cert = (cert_path, key_path)
        logger.info("Client certificate (mTLS) configured")

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def authenticate(self) -> str:
        if not self.config.password or not self.config.app_code:
            raise AuthenticationError("AUTH_PASSWORD or AUTH_CODIGO_APP is not configured")

        payload = {"password": self.config.password, "codigo_App": self.config.app_code}

        def _request() -> requests.Response:
            response = self.session.post(
                self._url(self.config.auth_path),
                json=payload,
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            return response

        logger.info("Requesting bearer token")
        try:
            response = retry(
                _request,
                attempts=self.config.retry_attempts,
                retry_on=(requests.ConnectionError, requests.Timeout),
            )
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise AuthenticationError(f"API authentication failed: {exc}") from exc

        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise AuthenticationError("Authentication response did not include a token")

        self.bearer_token = token
        logger.info("Bearer token obtained")
        return token

    def get_fund_data(self, fund_code: str, valuation_date: str) -> dict[str, Any]:
        if not self.bearer_token:
            raise AuthenticationError("Bearer token not available; call authenticate() first")

        def _request() -> requests.Response:
            response = self.session.get(
                self._url(self.config.data_path),
                params={"Fondo": fund_code, "Fecha": valuation_date},
                headers={"Authorization": f"Bearer {self.bearer_token}"},
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            return response

        logger.info("Querying API for fund %s on %s", fund_code, valuation_date)
        try:
            response = retry(
                _request,
                attempts=self.config.retry_attempts,
                retry_on=(requests.ConnectionError, requests.Timeout),
            )
            body = response.json()
        except requests.RequestException as exc:
            raise SourceFetchError(f"Network error for fund {fund_code}: {exc}") from exc
        except ValueError as exc:
            raise SourceFetchError(f"Invalid JSON for fund {fund_code}: {exc}") from exc

        if not isinstance(body, dict) or not body.get("succeeded"):
            message = body.get("message") if isinstance(body, dict) else None
            raise SourceFetchError(f"API failed for fund {fund_code}: {message or 'no message'}")

        logger.debug("Fund %s payload: %s", fund_code, body)
        return body

"""Find the daily fund report email and load its PDF attachments."""

from __future__ import annotations

import base64
import logging
import re
from datetime import date
from typing import Any

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import GmailConfig
from models.errors import AuthenticationError, SourceFetchError
from models.schemas import Attachment
from utils.dates import mailbox_search_date

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]

_QUOTES = re.compile(r"""^["']|["'],?$""")


def clean_env_value(value: str | None) -> str | None:
    """Strip quotes and trailing commas copied along with pasted token JSON."""
    if not value:
        return value
    return _QUOTES.sub("", value.strip()).strip()


def _pdf_parts(part: dict[str, Any]) -> list[dict[str, Any]]:
    found = []
    filename = part.get("filename") or ""
    if filename.lower().endswith(".pdf") and part.get("body", {}).get("attachmentId"):
        found.append(part)
    for child in part.get("parts") or []:
        found.extend(_pdf_parts(child))
    return found


class GmailReportMailbox:
    def __init__(self, config: GmailConfig, service: Any = None) -> None:
        self.config = config
        self._service = service

    def _build_service(self) -> Any:
        required = {
            "GOOGLE_CLIENT_ID": self.config.client_id,
            "GOOGLE_CLIENT_SECRET": self.config.client_secret,
            "ACCESS_TOKEN_KEY": self.config.access_token,
            "REFRESH_TOKEN_KEY": self.config.refresh_token,
        }
        missing = sorted(name for name, value in required.items() if not value)
        if missing:
            raise AuthenticationError(f"Missing Gmail credentials: {missing}")

        credentials = Credentials(
            token=clean_env_value(self.config.access_token),
            refresh_token=clean_env_value(self.config.refresh_token),
            token_uri=self.config.token_uri,
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            scopes=SCOPES,
        )
        logger.info("Authenticated with Gmail API using environment credentials")
        return build("gmail", "v1", credentials=credentials, cache_discovery=False)

    @property
    def service(self) -> Any:
        if self._service is None:
            self._service = self._build_service()
        return self._service

    def search_query(self, received_on: date | None = None) -> str:
        return (
            f"from:{self.config.sender} after:{mailbox_search_date(received_on)} "
            f'has:attachment filename:pdf subject:"{self.config.subject}"'
        )

    def find_report_messages(self, received_on: date | None = None) -> list[str]:
        """Return matching message ids, most recent first."""
        query = self.search_query(received_on)
        logger.info("Searching mailbox: %s", query)
        try:
            response = self.service.users().messages().list(userId="me", q=query).execute()
        except HttpError as exc:
            if exc.resp is not None and exc.resp.status in (401, 403):
                raise AuthenticationError(f"Gmail rejected credentials: {exc}") from exc
            raise SourceFetchError(f"Mailbox search failed: {exc}") from exc
        except RefreshError as exc:
            raise AuthenticationError(f"Gmail token refresh failed: {exc}") from exc

        message_ids = [message["id"] for message in response.get("messages", [])]
        logger.info("Found %s matching email(s)", len(message_ids))
        return message_ids

    def fetch_pdf_attachments(self, message_id: str) -> list[Attachment]:
        messages = self.service.users().messages()
        try:
            message = messages.get(userId="me", id=message_id).execute()
            attachments = []
            for part in _pdf_parts(message.get("payload", {})):
                body = (
                    messages.attachments()
                    .get(userId="me", messageId=message_id, id=part["body"]["attachmentId"])
                    .execute()
                )
                content = base64.urlsafe_b64decode(body["data"])
                logger.info("Loaded PDF attachment %s (%s bytes)", part["filename"], len(content))
                attachments.append(Attachment(filename=part["filename"], content=content))
        except RefreshError as exc:
            raise AuthenticationError(f"Gmail token refresh failed: {exc}") from exc
        except (HttpError, KeyError, ValueError) as exc:
            raise SourceFetchError(f"Could not load attachments of message {message_id}: {exc}") from exc
        return attachments

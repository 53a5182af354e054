from __future__ import annotations

import base64
from dataclasses import replace
from datetime import date
from pathlib import Path
import sys
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "src"))

from google.auth.exceptions import RefreshError
from openai import OpenAIError

from config.funds import DEFAULT_FUND_TABLE
from config.settings import GmailConfig, OpenAIConfig
from extract.gmail_reader import GmailReportMailbox, clean_env_value
from extract.openai_extractor import OpenAIReportExtractor, build_prompt
from models.enums import FailureStage
from models.errors import AuthenticationError, SourceFetchError
from models.schemas import Attachment
from services.batch_collector import EmailBatchCollector
from transform.normalize.fund_identity import FundIdentityResolver

GMAIL_CONFIG = GmailConfig(
    client_id="client",
    client_secret="secret",
    access_token="access",
    refresh_token="refresh",
    token_uri="https://oauth2.googleapis.com/token",
    sender="extractos@accivalores.com",
    subject="Valor diario de la unidad y rentabilidad fondos",
)


class TestOpenAIReportExtractor(unittest.TestCase):
    def test_prompt_lists_only_named_funds(self) -> None:
        prompt = build_prompt(DEFAULT_FUND_TABLE)

        self.assertIn('"FIC ACCICUENTA CONSERVADOR" -> ID: "6073f1cf-40df-4999-9df3-0072a673d8d8"', prompt)
        self.assertIn("estos 5 fondos", prompt)
        self.assertNotIn("6073f1cf-40df-4999-9df3-0072a673d8d10", prompt)

    def test_missing_api_key_is_authentication_error(self) -> None:
        with self.assertRaises(AuthenticationError):
            OpenAIReportExtractor(OpenAIConfig(api_key=None, model="gpt-4.1"), DEFAULT_FUND_TABLE)

    def test_extract_sends_pdf_and_returns_text(self) -> None:
        client = mock.Mock()
        client.responses.create.return_value = mock.Mock(output_text='  [{"idFund": "x"}]\n')
        extractor = OpenAIReportExtractor(OpenAIConfig(api_key=None, model="gpt-4.1"), DEFAULT_FUND_TABLE, client=client)

        output = extractor.extract(Attachment("report.pdf", b"%PDF-1.4"))

        self.assertEqual(output, '[{"idFund": "x"}]')
        kwargs = client.responses.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-4.1")
        file_part = kwargs["input"][0]["content"][0]
        self.assertEqual(file_part["filename"], "report.pdf")
        self.assertEqual(file_part["file_data"], "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4").decode())

    def test_api_error_is_fetch_error(self) -> None:
        client = mock.Mock()
        client.responses.create.side_effect = OpenAIError("rate limited")
        extractor = OpenAIReportExtractor(OpenAIConfig(api_key="k", model="gpt-4.1"), DEFAULT_FUND_TABLE, client=client)

        with self.assertRaises(SourceFetchError):
            extractor.extract(Attachment("report.pdf", b"%PDF"))


class TestGmailReportMailbox(unittest.TestCase):
    def test_clean_env_value_strips_quotes_and_commas(self) -> None:
        self.assertEqual(clean_env_value('"ya29.token",'), "ya29.token")
        self.assertEqual(clean_env_value("'refresh'"), "refresh")
        self.assertIsNone(clean_env_value(None))

    def test_missing_credentials_is_authentication_error(self) -> None:
        mailbox = GmailReportMailbox(replace(GMAIL_CONFIG, refresh_token=None))
        with self.assertRaises(AuthenticationError):
            mailbox.find_report_messages()

    def test_search_query(self) -> None:
        query = GmailReportMailbox(GMAIL_CONFIG, service=mock.Mock()).search_query(date(2025, 6, 18))
        self.assertEqual(
            query,
            'from:extractos@accivalores.com after:2025/06/18 has:attachment filename:pdf '
            'subject:"Valor diario de la unidad y rentabilidad fondos"',
        )

    def test_fetch_pdf_attachments_walks_nested_parts(self) -> None:
        service = mock.Mock()
        messages = service.users.return_value.messages.return_value
        messages.list.return_value.execute.return_value = {"messages": [{"id": "m2"}, {"id": "m1"}]}
        messages.get.return_value.execute.return_value = {
            "payload": {
                "parts": [
                    {"filename": "", "body": {}, "parts": [{"filename": "Fondos.PDF", "body": {"attachmentId": "a1"}}]},
                    {"filename": "logo.png", "body": {"attachmentId": "a2"}},
                ]
            }
        }
        encoded = base64.urlsafe_b64encode(b"%PDF-1.7 report").decode()
        messages.attachments.return_value.get.return_value.execute.return_value = {"data": encoded}
        mailbox = GmailReportMailbox(GMAIL_CONFIG, service=service)

        self.assertEqual(mailbox.find_report_messages(), ["m2", "m1"])
        attachments = mailbox.fetch_pdf_attachments("m2")

        self.assertEqual(attachments, [Attachment("Fondos.PDF", b"%PDF-1.7 report")])
        messages.attachments.return_value.get.assert_called_once_with(userId="me", messageId="m2", id="a1")

    def _service_with_pdf(self, attachment_body: dict) -> mock.Mock:
        service = mock.Mock()
        messages = service.users.return_value.messages.return_value
        messages.list.return_value.execute.return_value = {"messages": [{"id": "m1"}]}
        messages.get.return_value.execute.return_value = {
            "payload": {"parts": [{"filename": "Fondos.pdf", "body": {"attachmentId": "a1"}}]}
        }
        messages.attachments.return_value.get.return_value.execute.return_value = attachment_body
        return service

    def test_revoked_refresh_token_is_authentication_error(self) -> None:
        service = self._service_with_pdf({})
        messages = service.users.return_value.messages.return_value
        messages.list.return_value.execute.side_effect = RefreshError("invalid_grant: Token has been expired or revoked.")
        messages.get.return_value.execute.side_effect = RefreshError("invalid_grant")
        mailbox = GmailReportMailbox(GMAIL_CONFIG, service=service)

        with self.assertRaises(AuthenticationError):
            mailbox.find_report_messages()
        with self.assertRaises(AuthenticationError):
            mailbox.fetch_pdf_attachments("m1")

    def test_revoked_refresh_token_stops_email_collection(self) -> None:
        service = self._service_with_pdf({})
        service.users.return_value.messages.return_value.list.return_value.execute.side_effect = RefreshError(
            "invalid_grant"
        )
        collector = EmailBatchCollector(
            GmailReportMailbox(GMAIL_CONFIG, service=service),
            mock.Mock(),
            FundIdentityResolver(DEFAULT_FUND_TABLE),
        )

        with self.assertRaises(AuthenticationError):
            collector.collect_daily()

    def test_attachment_without_data_is_fetch_error(self) -> None:
        mailbox = GmailReportMailbox(GMAIL_CONFIG, service=self._service_with_pdf({"size": 0}))
        with self.assertRaises(SourceFetchError):
            mailbox.fetch_pdf_attachments("m1")

    def test_undecodable_attachment_is_fetch_error(self) -> None:
        mailbox = GmailReportMailbox(GMAIL_CONFIG, service=self._service_with_pdf({"data": "abc"}))
        with self.assertRaises(SourceFetchError):
            mailbox.fetch_pdf_attachments("m1")

    def test_broken_attachment_is_recorded_as_failure(self) -> None:
        extractor = mock.Mock()
        collector = EmailBatchCollector(
            GmailReportMailbox(GMAIL_CONFIG, service=self._service_with_pdf({"size": 0})),
            extractor,
            FundIdentityResolver(DEFAULT_FUND_TABLE),
        )

        result = collector.collect_daily()

        self.assertFalse(result.success)
        self.assertEqual([(f.identifier, f.stage) for f in result.failures], [("m1", FailureStage.FETCH)])
        extractor.extract.assert_not_called()


if __name__ == "__main__":
    unittest.main()

"""Collect one day's fund records from the REST API or the emailed PDF report.

Collectors isolate failures per fund (REST) or per extracted item and document
(email). Only authentication errors escape ``collect_daily``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Protocol

from config.funds import FundDefinition
from models.enums import FailureStage
from models.errors import SourceFetchError, UnknownFundError
from models.schemas import Attachment, CollectResult, RawRecord
from transform.normalize.extraction_parser import parse_extraction_output
from transform.normalize.fund_identity import FundIdentityResolver
from transform.normalize.record_normalizer import normalize_record
from transform.normalize.source_adapters import extracted_identifier, from_extracted_item, from_rest_payload
from utils.dates import default_valuation_date

logger = logging.getLogger(__name__)


class FundDataSource(Protocol):
    def authenticate(self) -> str: ...

    def get_fund_data(self, fund_code: str, valuation_date: str) -> Mapping[str, Any]: ...


class ReportMailbox(Protocol):
    def find_report_messages(self, received_on: date | None = None) -> list[str]: ...

    def fetch_pdf_attachments(self, message_id: str) -> list[Attachment]: ...


class ReportExtractor(Protocol):
    def extract(self, attachment: Attachment) -> str: ...


def _require_fund(result: CollectResult, resolver: FundIdentityResolver, identifier: object) -> FundDefinition | None:
    try:
        return resolver.require(identifier)
    except UnknownFundError as exc:
        logger.error("Mapping error: %s", exc)
        result.add_failure(identifier, FailureStage.IDENTITY, str(exc))
        return None


def _normalize_into(result: CollectResult, fund: FundDefinition, identifier: object, raw: RawRecord) -> None:
    record = normalize_record(raw, fund)
    if record is None:
        result.add_failure(identifier, FailureStage.NORMALIZATION, "incomplete or invalid record")
        return
    result.add_record(record)


class RestBatchCollector:
    def __init__(
        self,
        source: FundDataSource,
        resolver: FundIdentityResolver,
        fund_codes: Sequence[str] | None = None,
    ) -> None:
        self.source = source
        self.resolver = resolver
        self.fund_codes = list(fund_codes) if fund_codes is not None else resolver.funds.codes

    def collect_daily(self, valuation_date: str | None = None) -> CollectResult:
        valuation_date = valuation_date or default_valuation_date()
        logger.info("Starting REST fund collection for %s", valuation_date)

        self.source.authenticate()
        result = CollectResult()

        for fund_code in self.fund_codes:
            result.attempted_count += 1
            fund = _require_fund(result, self.resolver, fund_code)
            if fund is None:
                continue

            try:
                payload = self.source.get_fund_data(fund_code, valuation_date)
            except SourceFetchError as exc:
                logger.error("Fetch failed for fund %s: %s", fund_code, exc)
                result.add_failure(fund_code, FailureStage.FETCH, str(exc))
                continue

            _normalize_into(result, fund, fund_code, from_rest_payload(fund_code, payload))

        logger.info(
            "REST collection finished: attempted=%s succeeded=%s failed=%s",
            result.attempted_count,
            result.succeeded_count,
            result.failed_count,
        )
        return result


class EmailBatchCollector:
    def __init__(self, mailbox: ReportMailbox, extractor: ReportExtractor, resolver: FundIdentityResolver) -> None:
        self.mailbox = mailbox
        self.extractor = extractor
        self.resolver = resolver

    def _collect_attachment(self, result: CollectResult, attachment: Attachment) -> None:
        try:
            output = self.extractor.extract(attachment)
        except SourceFetchError as exc:
            logger.error("Extraction call failed for %s: %s", attachment.filename, exc)
            result.add_failure(attachment.filename, FailureStage.EXTRACTION, str(exc))
            return

        extraction = parse_extraction_output(output)
        if not extraction.ok:
            result.add_failure(attachment.filename, FailureStage.EXTRACTION, extraction.error or "malformed output")
            return

        logger.info("Model returned %s candidate record(s) from %s", len(extraction.items), attachment.filename)
        for item in extraction.items:
            result.attempted_count += 1
            identifier = extracted_identifier(item)
            fund = _require_fund(result, self.resolver, identifier)
            if fund is not None:
                _normalize_into(result, fund, identifier, from_extracted_item(item))

    def collect_daily(self, received_on: date | None = None) -> CollectResult:
        logger.info("Starting email report collection")
        result = CollectResult()

        try:
            message_ids = self.mailbox.find_report_messages(received_on)
        except SourceFetchError as exc:
            logger.error("Mailbox search failed: %s", exc)
            result.add_failure("mailbox", FailureStage.FETCH, str(exc))
            return result

        if not message_ids:
            logger.info("No report emails found")
            return result
        if len(message_ids) > 1:
            logger.info("Found %s report emails; only the most recent is processed", len(message_ids))

        message_id = message_ids[0]
        try:
            attachments = self.mailbox.fetch_pdf_attachments(message_id)
        except SourceFetchError as exc:
            logger.error("Attachment download failed for %s: %s", message_id, exc)
            result.add_failure(message_id, FailureStage.FETCH, str(exc))
            return result

        for attachment in attachments:
            self._collect_attachment(result, attachment)

        logger.info(
            "Email collection finished: attempted=%s succeeded=%s failed=%s",
            result.attempted_count,
            result.succeeded_count,
            result.failed_count,
        )
        return result

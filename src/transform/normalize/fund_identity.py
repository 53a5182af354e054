"""Resolve source-specific fund identifiers to canonical fund UUIDs."""

from __future__ import annotations

import logging

from config.funds import DEFAULT_FUND_TABLE, FundDefinition, FundTable
from models.errors import UnknownFundError

logger = logging.getLogger(__name__)


class FundIdentityResolver:
    """Map REST codes, report display names, or canonical UUIDs onto the fund table.

    Lookups are closed over the injected table: anything outside it is unknown.
    """

    def __init__(self, funds: FundTable = DEFAULT_FUND_TABLE) -> None:
        self.funds = funds

    def _lookup(self, identifier: object) -> FundDefinition | None:
        if identifier is None or isinstance(identifier, bool):
            return None
        key = str(identifier).strip()
        if not key:
            return None
        return self.funds.by_code(key) or self.funds.by_id(key) or self.funds.by_name(key)

    def resolve(self, identifier: object) -> str | None:
        definition = self._lookup(identifier)
        if definition is None:
            logger.warning("Unknown fund identifier %r", identifier)
            return None
        return definition.fund_id

    def require(self, identifier: object) -> FundDefinition:
        definition = self._lookup(identifier)
        if definition is None:
            raise UnknownFundError(identifier)
        return definition

"""
Horizon client: real network implementation of LedgerClient.

Translates Horizon REST responses into AccountSnapshot, OrderBookSummary
and SubmitResult. Uses an injectable transport (HorizonTransport) so the
HTTP layer can be swapped for test fakes without changing parsing logic.

No retry loops. No secrets. No business rules beyond response parsing.

Endpoints:
    - GET  /accounts/{id}     200 → snapshot, 404 → exists=False
    - GET  /order_book        selling_*/buying_* asset query parameters
    - POST /transactions      form field ``tx`` = base64 XDR envelope
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from alfred_please.assets import Asset
from alfred_please.errors import NetworkError, SourceNotFunded
from alfred_please.stellar.client import (
    AccountSigner,
    AccountSnapshot,
    Balance,
    OrderBookSummary,
    PriceLevel,
    SubmitResult,
    Thresholds,
)
from alfred_please.stellar.transport import (
    HorizonResponse,
    HorizonTransport,
    HttpxTransport,
)

logger = logging.getLogger(__name__)


class HorizonClient:
    """Horizon client implementing the LedgerClient protocol.

    Args:
        url: Horizon base URL (e.g. "https://horizon-testnet.stellar.org").
        transport: Injectable transport. Defaults to HttpxTransport.
    """

    def __init__(
        self,
        url: str,
        transport: HorizonTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._transport = transport or HttpxTransport()

    @property
    def url(self) -> str:
        """The Horizon base URL."""
        return self._url

    # -----------------------------------------------------------------
    # LedgerClient protocol methods
    # -----------------------------------------------------------------

    async def get_account(self, address: str) -> AccountSnapshot:
        response = await self._transport.get_json(f"{self._url}/accounts/{address}")
        snapshot = _parse_account_response(address, response)
        logger.debug("account %s exists=%s", address, snapshot.exists)
        return snapshot

    async def fetch_sequence(self, address: str) -> int:
        snapshot = await self.get_account(address)
        if not snapshot.exists:
            raise SourceNotFunded(
                f"source account {address} does not exist, please fund it first",
                details={"address": address},
            )
        return snapshot.sequence

    async def load_order_book(self, selling: Asset, buying: Asset) -> OrderBookSummary:
        params = {**_asset_params("selling", selling), **_asset_params("buying", buying)}
        response = await self._transport.get_json(f"{self._url}/order_book", params)
        if not response.ok:
            raise NetworkError(
                f"order book request failed: {_problem_title(response)}",
                details={"status_code": response.status_code},
            )
        return _parse_order_book(response.body, selling, buying)

    async def submit_transaction(self, envelope_xdr: str) -> SubmitResult:
        response = await self._transport.post_form(
            f"{self._url}/transactions", {"tx": envelope_xdr}
        )
        result = _parse_submit_response(response)
        logger.debug(
            "submit accepted=%s hash=%s", result.accepted, result.tx_hash
        )
        return result


# =====================================================================
# Request helpers
# =====================================================================


def _asset_params(prefix: str, asset: Asset) -> dict[str, str]:
    if asset.is_native:
        return {f"{prefix}_asset_type": "native"}
    asset_type = "credit_alphanum4" if len(asset.code) <= 4 else "credit_alphanum12"
    return {
        f"{prefix}_asset_type": asset_type,
        f"{prefix}_asset_code": asset.code,
        f"{prefix}_asset_issuer": asset.issuer or "",
    }


# =====================================================================
# Response parsing (pure functions, no I/O)
# =====================================================================


def _decimal(value: Any, field_name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise NetworkError(f"malformed {field_name} in Horizon response: {value!r}") from exc


def _problem_title(response: HorizonResponse) -> str:
    body = response.body
    return str(body.get("title") or body.get("detail") or f"HTTP {response.status_code}")


def _parse_account_response(address: str, response: HorizonResponse) -> AccountSnapshot:
    """Parse GET /accounts/{id}.

    Handles:
        - 200 → snapshot
        - 404 → AccountSnapshot.missing()
        - anything else → NetworkError
    """
    if response.status_code == 404:
        return AccountSnapshot.missing(address)
    if not response.ok:
        raise NetworkError(
            f"account lookup for {address} failed: {_problem_title(response)}",
            details={"status_code": response.status_code},
        )

    body = response.body
    balances: list[Balance] = []
    for entry in body.get("balances", []):
        if entry.get("asset_type") == "native":
            balances.append(Balance(balance=_decimal(entry.get("balance", "0"), "balance")))
        elif "asset_code" in entry:
            # Liquidity pool shares carry no asset_code and cannot back a trustline check.
            balances.append(
                Balance(
                    balance=_decimal(entry.get("balance", "0"), "balance"),
                    code=entry["asset_code"],
                    issuer=entry.get("asset_issuer"),
                )
            )

    signers = tuple(
        AccountSigner(key=s["key"], weight=int(s.get("weight", 0)))
        for s in body.get("signers", [])
    )

    raw_thresholds = body.get("thresholds", {})
    thresholds = Thresholds(
        low=int(raw_thresholds.get("low_threshold", 0)),
        medium=int(raw_thresholds.get("med_threshold", 0)),
        high=int(raw_thresholds.get("high_threshold", 0)),
    )

    try:
        sequence = int(body.get("sequence", 0))
    except (TypeError, ValueError) as exc:
        raise NetworkError(f"malformed sequence in Horizon response: {body.get('sequence')!r}") from exc

    return AccountSnapshot(
        account_id=body.get("account_id", address),
        exists=True,
        sequence=sequence,
        balances=tuple(balances),
        signers=signers,
        thresholds=thresholds,
    )


def _parse_levels(levels: list[dict[str, Any]]) -> tuple[PriceLevel, ...]:
    return tuple(
        PriceLevel(
            price=_decimal(level["price"], "price"),
            amount=_decimal(level["amount"], "amount"),
        )
        for level in levels
    )


def _parse_order_book(
    body: dict[str, Any], selling: Asset, buying: Asset
) -> OrderBookSummary:
    return OrderBookSummary(
        base=selling,
        counter=buying,
        bids=_parse_levels(body.get("bids", [])),
        asks=_parse_levels(body.get("asks", [])),
    )


def _parse_submit_response(response: HorizonResponse) -> SubmitResult:
    """Parse POST /transactions.

    Handles:
        - 200 → accepted with hash and ledger
        - problem document (400 tx_failed, 504 timeout, ...) → not accepted,
          title and extras.result_codes preserved
    """
    body = response.body
    if response.ok and body.get("successful", True):
        ledger = body.get("ledger")
        return SubmitResult(
            accepted=True,
            tx_hash=body.get("hash") or body.get("id"),
            ledger=int(ledger) if ledger is not None else None,
        )

    extras = body.get("extras") or {}
    result_codes = extras.get("result_codes") or {}
    return SubmitResult(
        accepted=False,
        tx_hash=extras.get("hash") or body.get("hash"),
        title=body.get("title"),
        result_codes=dict(result_codes),
        detail=body.get("detail"),
    )

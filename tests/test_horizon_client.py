"""
Tests for the Horizon client with a fake transport.

Test plan:
- Account: 200 → snapshot (balances, signers, thresholds, sequence),
  404 → missing, pool shares skipped, 500 → NetworkError
- Sequence: existing → int, missing → SourceNotFunded
- Order book: native and credit asset query params, bids parsed
- Submit: 200 → accepted with hash/ledger, 400 problem → not accepted with
  title and result codes, form field ``tx`` carries the envelope
"""

from decimal import Decimal
from typing import Any

import pytest

from alfred_please.errors import NetworkError, SourceNotFunded
from alfred_please.stellar.client import AccountSigner, Thresholds
from alfred_please.stellar.horizon_client import HorizonClient
from alfred_please.stellar.transport import HorizonResponse

from fakes import MASTER, MOBI, SAVINGS, XLM

HORIZON = "https://horizon.example"


class FakeTransport:
    """Returns canned responses keyed by URL path. Records every request."""

    def __init__(self, responses: dict[str, HorizonResponse]) -> None:
        self._responses = responses
        self.requests: list[tuple[str, str, dict[str, str] | None]] = []

    def _lookup(self, url: str) -> HorizonResponse:
        path = url.removeprefix(HORIZON)
        return self._responses[path]

    async def get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> HorizonResponse:
        self.requests.append(("GET", url, params))
        return self._lookup(url)

    async def post_form(self, url: str, data: dict[str, str]) -> HorizonResponse:
        self.requests.append(("POST", url, data))
        return self._lookup(url)


def _account_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "account_id": MASTER,
        "sequence": "4738374838372",
        "balances": [
            {
                "balance": "12.5000000",
                "asset_type": "credit_alphanum4",
                "asset_code": "MOBI",
                "asset_issuer": MOBI.issuer,
            },
            {"balance": "3.0000000", "asset_type": "liquidity_pool_shares", "liquidity_pool_id": "ab"},
            {"balance": "100.0000000", "asset_type": "native"},
        ],
        "signers": [
            {"key": SAVINGS, "weight": 1, "type": "ed25519_public_key"},
            {"key": MASTER, "weight": 2, "type": "ed25519_public_key"},
        ],
        "thresholds": {"low_threshold": 1, "med_threshold": 2, "high_threshold": 3},
    }
    body.update(overrides)
    return body


class TestGetAccount:
    @pytest.mark.asyncio
    async def test_existing_account(self) -> None:
        transport = FakeTransport(
            {f"/accounts/{MASTER}": HorizonResponse(200, _account_body())}
        )
        client = HorizonClient(HORIZON + "/", transport)

        snapshot = await client.get_account(MASTER)

        assert snapshot.exists
        assert snapshot.sequence == 4738374838372
        assert len(snapshot.balances) == 2
        assert snapshot.balances[0].code == "MOBI"
        assert snapshot.balances[0].balance == Decimal("12.5")
        assert snapshot.balances[1].code is None
        assert snapshot.signers[1] == AccountSigner(key=MASTER, weight=2)
        assert snapshot.additional_signers == (AccountSigner(key=SAVINGS, weight=1),)
        assert snapshot.thresholds == Thresholds(low=1, medium=2, high=3)
        assert transport.requests == [("GET", f"{HORIZON}/accounts/{MASTER}", None)]

    @pytest.mark.asyncio
    async def test_missing_account(self) -> None:
        transport = FakeTransport(
            {f"/accounts/{MASTER}": HorizonResponse(404, {"title": "Resource Missing"})}
        )
        snapshot = await HorizonClient(HORIZON, transport).get_account(MASTER)
        assert not snapshot.exists
        assert snapshot.account_id == MASTER

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        transport = FakeTransport(
            {f"/accounts/{MASTER}": HorizonResponse(500, {"title": "Internal Server Error"})}
        )
        with pytest.raises(NetworkError, match="Internal Server Error"):
            await HorizonClient(HORIZON, transport).get_account(MASTER)

    @pytest.mark.asyncio
    async def test_malformed_sequence(self) -> None:
        transport = FakeTransport(
            {f"/accounts/{MASTER}": HorizonResponse(200, _account_body(sequence="soon"))}
        )
        with pytest.raises(NetworkError):
            await HorizonClient(HORIZON, transport).get_account(MASTER)


class TestFetchSequence:
    @pytest.mark.asyncio
    async def test_existing(self) -> None:
        transport = FakeTransport(
            {f"/accounts/{MASTER}": HorizonResponse(200, _account_body(sequence="7"))}
        )
        assert await HorizonClient(HORIZON, transport).fetch_sequence(MASTER) == 7

    @pytest.mark.asyncio
    async def test_missing(self) -> None:
        transport = FakeTransport({f"/accounts/{MASTER}": HorizonResponse(404, {})})
        with pytest.raises(SourceNotFunded):
            await HorizonClient(HORIZON, transport).fetch_sequence(MASTER)


class TestOrderBook:
    @pytest.mark.asyncio
    async def test_params_and_levels(self) -> None:
        transport = FakeTransport(
            {
                "/order_book": HorizonResponse(
                    200,
                    {
                        "bids": [{"price": "0.5000000", "amount": "900.0000000"}],
                        "asks": [{"price": "0.6000000", "amount": "10.0000000"}],
                    },
                )
            }
        )
        summary = await HorizonClient(HORIZON, transport).load_order_book(XLM, MOBI)

        assert summary.base == XLM
        assert summary.counter == MOBI
        assert summary.bids[0].price == Decimal("0.5")
        assert summary.asks[0].amount == Decimal("10")
        _, _, params = transport.requests[0]
        assert params == {
            "selling_asset_type": "native",
            "buying_asset_type": "credit_alphanum4",
            "buying_asset_code": "MOBI",
            "buying_asset_issuer": MOBI.issuer,
        }

    @pytest.mark.asyncio
    async def test_error(self) -> None:
        transport = FakeTransport(
            {"/order_book": HorizonResponse(400, {"title": "Bad Request"})}
        )
        with pytest.raises(NetworkError, match="Bad Request"):
            await HorizonClient(HORIZON, transport).load_order_book(XLM, MOBI)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_accepted(self) -> None:
        transport = FakeTransport(
            {
                "/transactions": HorizonResponse(
                    200, {"hash": "ab" * 32, "ledger": 123, "successful": True}
                )
            }
        )
        result = await HorizonClient(HORIZON, transport).submit_transaction("AAAA")

        assert result.accepted
        assert result.tx_hash == "ab" * 32
        assert result.ledger == 123
        assert transport.requests == [("POST", f"{HORIZON}/transactions", {"tx": "AAAA"})]

    @pytest.mark.asyncio
    async def test_rejected(self) -> None:
        problem = {
            "title": "Transaction Failed",
            "status": 400,
            "detail": "The transaction failed when submitted to the network.",
            "extras": {
                "hash": "cd" * 32,
                "result_codes": {"transaction": "tx_bad_seq"},
            },
        }
        transport = FakeTransport({"/transactions": HorizonResponse(400, problem)})
        result = await HorizonClient(HORIZON, transport).submit_transaction("AAAA")

        assert not result.accepted
        assert result.title == "Transaction Failed"
        assert result.result_codes == {"transaction": "tx_bad_seq"}
        assert result.tx_hash == "cd" * 32

    @pytest.mark.asyncio
    async def test_timeout_problem(self) -> None:
        transport = FakeTransport(
            {"/transactions": HorizonResponse(504, {"title": "Timeout", "detail": "try again"})}
        )
        result = await HorizonClient(HORIZON, transport).submit_transaction("AAAA")
        assert not result.accepted
        assert result.result_codes == {}
        assert result.detail == "try again"

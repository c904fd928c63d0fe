"""
Tests for statement documents.

Test plan:
- Each kind: valid document → matching frozen dataclass
- Defaults: offer amount_in follows side, data source defaults to string
- Ordering: set_data entries keep declared order
- Rejection: missing kind, unknown kind, malformed amount, extra fields,
  duplicate data keys, non-object and non-JSON input → ParseError
"""

import dataclasses

import pytest

from alfred_please.errors import ErrorKind, ParseError
from alfred_please.statement import (
    AmountKind,
    DataEntry,
    DataValueKind,
    OfferKind,
    OfferRequest,
    SendRequest,
    SetDataRequest,
    ShareAccountRequest,
    load_statement,
    parse_statement_text,
)


class TestSendDocument:
    def test_full_send(self) -> None:
        statement = load_statement(
            {"kind": "send", "amount": "20", "currency": "XLM", "from": "master", "to": "jennifer"}
        )
        assert statement == SendRequest(
            amount="20", currency="XLM", source="master", destination="jennifer"
        )

    def test_endpoints_optional(self) -> None:
        statement = load_statement({"kind": "send", "amount": "33.5", "currency": "MOBI"})
        assert isinstance(statement, SendRequest)
        assert statement.source is None
        assert statement.destination is None

    def test_statement_is_immutable(self) -> None:
        statement = load_statement({"kind": "send", "amount": "1", "currency": "XLM"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            statement.amount = "2"  # type: ignore[misc]


class TestShareAccountDocument:
    def test_signers_become_tuple(self) -> None:
        statement = load_statement(
            {"kind": "share_account", "account": "master", "signers": ["bob", "alice"]}
        )
        assert statement == ShareAccountRequest(
            account="master", additional_signers=("bob", "alice")
        )


class TestSetDataDocument:
    def test_declared_order_preserved(self) -> None:
        statement = load_statement(
            {
                "kind": "set_data",
                "entries": [
                    {"key": "zeta", "value": "1"},
                    {"key": "alpha", "value": "./avatar.png", "source": "file"},
                    {"key": "mid", "value": "3"},
                ],
            }
        )
        assert isinstance(statement, SetDataRequest)
        assert [e.key for e in statement.entries] == ["zeta", "alpha", "mid"]
        assert statement.entries[1] == DataEntry(
            key="alpha", value="./avatar.png", kind=DataValueKind.FILE
        )
        assert statement.entries[0].kind is DataValueKind.STRING

    def test_duplicate_keys_rejected(self) -> None:
        with pytest.raises(ParseError, match="unique keys"):
            load_statement(
                {
                    "kind": "set_data",
                    "entries": [{"key": "a", "value": "1"}, {"key": "a", "value": "2"}],
                }
            )


class TestOfferDocument:
    def test_buy_defaults_to_buying_amount(self) -> None:
        statement = load_statement(
            {"kind": "offer", "side": "buy", "amount": "100", "buying": "MOBI", "selling": "XLM"}
        )
        assert statement == OfferRequest(
            kind=OfferKind.BUY,
            amount="100",
            amount_kind=AmountKind.BUYING,
            buying="MOBI",
            selling="XLM",
        )

    def test_sell_defaults_to_selling_amount(self) -> None:
        statement = load_statement(
            {"kind": "offer", "side": "sell", "amount": "100", "buying": "XLM", "selling": "MOBI"}
        )
        assert isinstance(statement, OfferRequest)
        assert statement.amount_kind is AmountKind.SELLING

    def test_explicit_price_and_amount_in(self) -> None:
        statement = load_statement(
            {
                "kind": "offer",
                "side": "buy",
                "amount": "100",
                "amount_in": "selling",
                "buying": "MOBI",
                "selling": "XLM",
                "price": "0.1000",
            }
        )
        assert isinstance(statement, OfferRequest)
        assert statement.price == "0.1000"
        assert statement.amount_kind is AmountKind.SELLING


class TestRejection:
    def test_missing_kind(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            load_statement({"amount": "1"})
        assert exc_info.value.kind is ErrorKind.PARSE_ERROR

    def test_unknown_kind(self) -> None:
        with pytest.raises(ParseError):
            load_statement({"kind": "teleport"})

    def test_malformed_amount(self) -> None:
        with pytest.raises(ParseError):
            load_statement({"kind": "send", "amount": "twenty", "currency": "XLM"})

    def test_too_many_decimals(self) -> None:
        with pytest.raises(ParseError):
            load_statement({"kind": "send", "amount": "1.12345678", "currency": "XLM"})

    def test_extra_field(self) -> None:
        with pytest.raises(ParseError):
            load_statement(
                {"kind": "send", "amount": "1", "currency": "XLM", "via": "carrier pigeon"}
            )

    def test_message_is_validator_message(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            load_statement({"kind": "send", "currency": "XLM"})
        assert "'amount' is a required property" in str(exc_info.value)

    def test_non_object(self) -> None:
        with pytest.raises(ParseError, match="JSON object"):
            load_statement(["send"])  # type: ignore[arg-type]

    def test_invalid_json_text(self) -> None:
        with pytest.raises(ParseError, match="not valid JSON"):
            parse_statement_text("{kind: send")

    def test_text_round_trip(self) -> None:
        statement = parse_statement_text('{"kind": "send", "amount": "5", "currency": "lumens"}')
        assert statement == SendRequest(amount="5", currency="lumens")

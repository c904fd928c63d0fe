"""
Statements: the typed requests the engine resolves.

A statement is produced once by a parser and is immutable thereafter.
There is one frozen dataclass per request kind; ``Statement`` is their
union and the engine dispatches on it with ``match``.

Amounts and prices stay decimal strings until the assembler needs a
number, so no precision is lost on the way in.

``load_statement()`` turns a JSON statement document into a Statement.
The document is validated against ``schemas/statement.v0.1.json``; any
violation raises ``ParseError`` with the validator message verbatim.

Document shapes (``kind`` discriminates):

    {"kind": "send", "amount": "20", "currency": "XLM",
     "from": "master", "to": "jennifer"}
    {"kind": "share_account", "account": "master", "signers": ["bob"]}
    {"kind": "set_data", "account": "master",
     "entries": [{"key": "avatar", "value": "./me.png", "source": "file"}]}
    {"kind": "offer", "side": "buy", "amount": "100", "amount_in": "buying",
     "buying": "MOBI", "selling": "XLM", "price": "0.1"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from importlib import resources
from typing import Any, Union, cast

import jsonschema  # type: ignore[import-untyped]

from alfred_please.errors import ParseError

_STATEMENT_SCHEMA: dict[str, Any] | None = None


# =========================================================================
# Enums
# =========================================================================


class DataValueKind(StrEnum):
    """Where a data entry's value comes from."""

    STRING = "string"
    FILE = "file"


class OfferKind(StrEnum):
    BUY = "buy"
    SELL = "sell"


class AmountKind(StrEnum):
    """Which side of an offer the declared amount is denominated in."""

    BUYING = "buying"
    SELLING = "selling"


# =========================================================================
# Statement variants
# =========================================================================


@dataclass(frozen=True)
class SendRequest:
    """Send ``amount`` of ``currency`` from ``source`` to ``destination``.

    Either end may be None, in which case the operator chooses.
    """

    amount: str
    currency: str
    source: str | None = None
    destination: str | None = None


@dataclass(frozen=True)
class ShareAccountRequest:
    """Add co-signers to ``account`` and require all of them to sign."""

    account: str
    additional_signers: tuple[str, ...] = ()


@dataclass(frozen=True)
class DataEntry:
    key: str
    value: str
    kind: DataValueKind = DataValueKind.STRING


@dataclass(frozen=True)
class SetDataRequest:
    """Attach key/value data entries to an account, in declared order."""

    entries: tuple[DataEntry, ...]
    account: str | None = None


@dataclass(frozen=True)
class OfferRequest:
    """Place an offer selling ``selling`` for ``buying``.

    Attributes:
        kind: BUY ("buy 100 MOBI using XLM") or SELL ("sell 100 MOBI for XLM").
        amount: Declared amount as a decimal string.
        amount_kind: Which asset ``amount`` is denominated in.
        buying: Currency code being bought.
        selling: Currency code being sold.
        price: Explicit price, or None to infer it from the order book.
        account: Source wallet, or None to let the operator choose.
    """

    kind: OfferKind
    amount: str
    amount_kind: AmountKind
    buying: str
    selling: str
    price: str | None = None
    account: str | None = None


Statement = Union[SendRequest, ShareAccountRequest, SetDataRequest, OfferRequest]


# =========================================================================
# JSON statement documents
# =========================================================================


def _load_statement_schema() -> dict[str, Any]:
    with resources.files("alfred_please").joinpath(
        "schemas/statement.v0.1.json"
    ).open("r", encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


def load_statement(document: dict[str, Any]) -> Statement:
    """Build a Statement from a JSON statement document.

    Raises:
        ParseError: If the document does not match the statement schema.
    """
    global _STATEMENT_SCHEMA
    if _STATEMENT_SCHEMA is None:
        _STATEMENT_SCHEMA = _load_statement_schema()

    if not isinstance(document, dict):
        raise ParseError(
            f"statement must be a JSON object, got: {type(document).__name__}"
        )

    try:
        jsonschema.validate(instance=document, schema=_STATEMENT_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ParseError(exc.message) from exc

    kind = document["kind"]
    if kind == "send":
        return SendRequest(
            amount=document["amount"],
            currency=document["currency"],
            source=document.get("from"),
            destination=document.get("to"),
        )
    if kind == "share_account":
        return ShareAccountRequest(
            account=document["account"],
            additional_signers=tuple(document["signers"]),
        )
    if kind == "set_data":
        entries = tuple(
            DataEntry(
                key=entry["key"],
                value=entry["value"],
                kind=DataValueKind(entry.get("source", DataValueKind.STRING.value)),
            )
            for entry in document["entries"]
        )
        keys = [entry.key for entry in entries]
        if len(set(keys)) != len(keys):
            raise ParseError("set_data entries must have unique keys")
        return SetDataRequest(entries=entries, account=document.get("account"))

    # offer
    offer_kind = OfferKind(document["side"])
    default_amount_kind = (
        AmountKind.BUYING if offer_kind is OfferKind.BUY else AmountKind.SELLING
    )
    return OfferRequest(
        kind=offer_kind,
        amount=document["amount"],
        amount_kind=AmountKind(document.get("amount_in", default_amount_kind.value)),
        buying=document["buying"],
        selling=document["selling"],
        price=document.get("price"),
        account=document.get("account"),
    )


def parse_statement_text(raw: str) -> Statement:
    """Parse a JSON statement document from text.

    Raises:
        ParseError: If the text is not JSON or fails schema validation.
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"statement is not valid JSON: {exc}") from exc
    return load_statement(document)

"""
Error taxonomy for statement resolution and submission.

Every failure the engine reports is a ``PleaseError`` subclass carrying a
machine-readable ``ErrorKind``. Nothing in this package retries: the
operator corrects the cause and re-invokes.

Kinds:
    - PARSE_ERROR: malformed statement document, surfaced verbatim.
    - NOT_FOUND: identity (wallet, contact, address) unresolvable.
    - UNSUPPORTED_ASSET: currency code not in the asset catalog.
    - NO_LIQUIDITY: empty order book side, no price can be inferred.
    - SOURCE_NOT_FUNDED: source account does not exist on the ledger.
    - DESTINATION_UNTRUSTED: destination cannot hold the credit asset.
    - SIGNER_NOT_FUNDED: co-signer account does not exist on the ledger.
    - SIGNING_ERROR: local key failure while signing or encoding.
    - NETWORK_ERROR: transport failure talking to the ledger.
    - LEDGER_REJECTION: ledger validated and rejected the transaction.
    - USER_DECLINED: operator declined confirmation or cancelled a choice.
    - SELECTION_REQUIRED: a choice was needed but no selection was possible.
    - DATA_FILE_UNREADABLE: a data entry referenced an unreadable file.

Only USER_DECLINED is not a system failure; it still aborts the statement
before anything reaches the network.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Machine-readable failure categories."""

    PARSE_ERROR = "PARSE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNSUPPORTED_ASSET = "UNSUPPORTED_ASSET"
    NO_LIQUIDITY = "NO_LIQUIDITY"
    SOURCE_NOT_FUNDED = "SOURCE_NOT_FUNDED"
    DESTINATION_UNTRUSTED = "DESTINATION_UNTRUSTED"
    SIGNER_NOT_FUNDED = "SIGNER_NOT_FUNDED"
    SIGNING_ERROR = "SIGNING_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    LEDGER_REJECTION = "LEDGER_REJECTION"
    USER_DECLINED = "USER_DECLINED"
    SELECTION_REQUIRED = "SELECTION_REQUIRED"
    DATA_FILE_UNREADABLE = "DATA_FILE_UNREADABLE"


class PleaseError(Exception):
    """Base class for all engine failures.

    Attributes:
        kind: Category of the failure.
        details: Structured context for diagnostics. Never holds secrets.
    """

    kind: ErrorKind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParseError(PleaseError):
    kind = ErrorKind.PARSE_ERROR


class NotFound(PleaseError):
    """An identity could not be resolved. ``name`` is the offending input."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"'{name}' not found", details={"name": name})
        self.name = name


class UnsupportedAsset(PleaseError):
    kind = ErrorKind.UNSUPPORTED_ASSET

    def __init__(self, code: str) -> None:
        super().__init__(
            f"asset {code} is not supported right now", details={"code": code}
        )
        self.code = code


class NoLiquidity(PleaseError):
    kind = ErrorKind.NO_LIQUIDITY


class SourceNotFunded(PleaseError):
    kind = ErrorKind.SOURCE_NOT_FUNDED


class DestinationUntrusted(PleaseError):
    kind = ErrorKind.DESTINATION_UNTRUSTED


class SignerNotFunded(PleaseError):
    kind = ErrorKind.SIGNER_NOT_FUNDED


class SigningError(PleaseError):
    kind = ErrorKind.SIGNING_ERROR


class NetworkError(PleaseError):
    kind = ErrorKind.NETWORK_ERROR


class LedgerRejection(PleaseError):
    """The ledger rejected the transaction.

    The message combines the problem title with the result codes, e.g.
    ``Transaction Failed ({"operations":["op_underfunded"],"transaction":"tx_failed"})``.
    """

    kind = ErrorKind.LEDGER_REJECTION

    def __init__(
        self,
        message: str,
        *,
        title: str | None = None,
        result_codes: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message, details={"title": title, "result_codes": result_codes or {}}
        )
        self.title = title
        self.result_codes = result_codes or {}


class UserDeclined(PleaseError):
    kind = ErrorKind.USER_DECLINED


class SelectionRequired(PleaseError):
    kind = ErrorKind.SELECTION_REQUIRED


class DataFileUnreadable(PleaseError):
    kind = ErrorKind.DATA_FILE_UNREADABLE

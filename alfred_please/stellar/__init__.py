"""
Stellar ledger boundary for the please engine.

Public API:

    Protocols (for dependency injection):
        - ``LedgerClient``: network boundary (accounts, order books,
          sequence numbers, submission).
        - ``HorizonTransport``: injectable HTTP transport.

    Result types:
        - ``AccountSnapshot``, ``Balance``, ``AccountSigner``, ``Thresholds``
        - ``OrderBookSummary``, ``PriceLevel``
        - ``SubmitResult``, ``SignResult``

    Concrete client:
        - ``HorizonClient``: Horizon REST implementation of LedgerClient.
        - ``HttpxTransport``: default httpx-based transport.

    Signing and error mapping:
        - ``sign_envelope()``: sign + encode a built envelope.
        - ``describe_rejection()``: ``title (result_codes)`` rendering.
"""

from alfred_please.stellar.client import (
    AccountSigner,
    AccountSnapshot,
    Balance,
    LedgerClient,
    OrderBookSummary,
    PriceLevel,
    SubmitResult,
    Thresholds,
)
from alfred_please.stellar.errors import describe_rejection, rejection_from_result
from alfred_please.stellar.horizon_client import HorizonClient
from alfred_please.stellar.signer import SignResult, sign_envelope
from alfred_please.stellar.transport import (
    HorizonResponse,
    HorizonTransport,
    HttpxTransport,
)

__all__ = [
    "AccountSigner",
    "AccountSnapshot",
    "Balance",
    "HorizonClient",
    "HorizonResponse",
    "HorizonTransport",
    "HttpxTransport",
    "LedgerClient",
    "OrderBookSummary",
    "PriceLevel",
    "SignResult",
    "SubmitResult",
    "Thresholds",
    "describe_rejection",
    "rejection_from_result",
    "sign_envelope",
]

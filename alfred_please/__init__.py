"""
alfred-please: resolve short statements into signed Stellar transactions.

Public API:

    - ``Engine``: assemble + dispatch one statement at a time.
    - ``EngineConfig``, ``Network``: explicit runtime configuration.
    - Statements: ``SendRequest``, ``ShareAccountRequest``,
      ``SetDataRequest``, ``OfferRequest``; ``load_statement()`` for
      JSON statement documents.
    - Errors: ``PleaseError`` and its subclasses, ``ErrorKind``.
"""

from alfred_please.config import EngineConfig, Network
from alfred_please.dispatcher import SubmissionResult
from alfred_please.engine import Engine
from alfred_please.errors import (
    DataFileUnreadable,
    DestinationUntrusted,
    ErrorKind,
    LedgerRejection,
    NetworkError,
    NoLiquidity,
    NotFound,
    ParseError,
    PleaseError,
    SelectionRequired,
    SignerNotFunded,
    SigningError,
    SourceNotFunded,
    UnsupportedAsset,
    UserDeclined,
)
from alfred_please.statement import (
    AmountKind,
    DataEntry,
    DataValueKind,
    OfferKind,
    OfferRequest,
    SendRequest,
    SetDataRequest,
    ShareAccountRequest,
    Statement,
    load_statement,
)

__version__ = "0.1.0"

__all__ = [
    "AmountKind",
    "DataEntry",
    "DataFileUnreadable",
    "DataValueKind",
    "DestinationUntrusted",
    "Engine",
    "EngineConfig",
    "ErrorKind",
    "LedgerRejection",
    "Network",
    "NetworkError",
    "NoLiquidity",
    "NotFound",
    "OfferKind",
    "OfferRequest",
    "ParseError",
    "PleaseError",
    "SelectionRequired",
    "SendRequest",
    "SetDataRequest",
    "ShareAccountRequest",
    "SignerNotFunded",
    "SigningError",
    "SourceNotFunded",
    "Statement",
    "SubmissionResult",
    "UnsupportedAsset",
    "UserDeclined",
    "load_statement",
]

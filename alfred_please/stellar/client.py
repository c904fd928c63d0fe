"""
Ledger client protocol: the network boundary.

Defines the interface the resolvers and the dispatcher depend on, not a
concrete implementation. This keeps business logic testable and keeps
HTTP calls out of the assembler.

Concrete implementations:
    - HorizonClient (httpx transport against a Horizon server)
    - FakeLedgerClient (tests)

Every snapshot is a point-in-time view fetched for one statement. Nothing
here caches: a second call fetches again.

Expected ledger outcomes (account missing, transaction rejected) are
returned in the result objects. Transport failures raise NetworkError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from alfred_please.assets import Asset


# =========================================================================
# Account snapshot
# =========================================================================


@dataclass(frozen=True)
class Balance:
    """One balance line. ``code``/``issuer`` are None for the native balance."""

    balance: Decimal
    code: str | None = None
    issuer: str | None = None

    @property
    def is_native(self) -> bool:
        return self.code is None


@dataclass(frozen=True)
class AccountSigner:
    key: str
    weight: int


@dataclass(frozen=True)
class Thresholds:
    low: int = 0
    medium: int = 0
    high: int = 0


@dataclass(frozen=True)
class AccountSnapshot:
    """Point-in-time view of an account.

    Attributes:
        account_id: Public address the snapshot was fetched for.
        exists: False if the ledger has no such account. All other
            fields are empty in that case.
        sequence: Current sequence number.
        balances: Balance lines, native included.
        signers: Signer list as reported by the ledger, master key included.
        thresholds: Low/medium/high thresholds.
    """

    account_id: str
    exists: bool
    sequence: int = 0
    balances: tuple[Balance, ...] = ()
    signers: tuple[AccountSigner, ...] = ()
    thresholds: Thresholds = field(default_factory=Thresholds)

    @classmethod
    def missing(cls, account_id: str) -> AccountSnapshot:
        return cls(account_id=account_id, exists=False)

    @property
    def additional_signers(self) -> tuple[AccountSigner, ...]:
        """Signers other than the account's own master key."""
        return tuple(s for s in self.signers if s.key != self.account_id)


# =========================================================================
# Order book
# =========================================================================


@dataclass(frozen=True)
class PriceLevel:
    """One aggregated book level. ``price`` is counter units per base unit."""

    price: Decimal
    amount: Decimal


@dataclass(frozen=True)
class OrderBookSummary:
    """Order book for (selling=base, buying=counter), best level first."""

    base: Asset
    counter: Asset
    bids: tuple[PriceLevel, ...] = ()
    asks: tuple[PriceLevel, ...] = ()


# =========================================================================
# Submission
# =========================================================================


@dataclass(frozen=True)
class SubmitResult:
    """Result of submitting a signed transaction envelope.

    Attributes:
        accepted: Whether the ledger included the transaction.
        tx_hash: Transaction hash, when the server reported one.
        ledger: Ledger sequence the transaction was included in.
        title: Problem title on rejection (e.g. "Transaction Failed").
        result_codes: Machine-readable result codes on rejection, e.g.
            {"transaction": "tx_failed", "operations": ["op_underfunded"]}.
        detail: Human-readable detail for diagnostics.
    """

    accepted: bool
    tx_hash: str | None = None
    ledger: int | None = None
    title: str | None = None
    result_codes: dict[str, Any] = field(default_factory=dict)
    detail: str | None = None


# =========================================================================
# Protocol
# =========================================================================


@runtime_checkable
class LedgerClient(Protocol):
    """Interface for ledger network operations.

    Methods are async; the engine awaits them one at a time.
    """

    async def get_account(self, address: str) -> AccountSnapshot:
        """Fetch an account snapshot. A missing account has exists=False."""
        ...

    async def load_order_book(self, selling: Asset, buying: Asset) -> OrderBookSummary:
        """Fetch the order book for selling (base) against buying (counter)."""
        ...

    async def fetch_sequence(self, address: str) -> int:
        """Current sequence number of ``address``.

        Raises:
            SourceNotFunded: If the account does not exist.
        """
        ...

    async def submit_transaction(self, envelope_xdr: str) -> SubmitResult:
        """Submit a base64 XDR transaction envelope."""
        ...

"""
Transaction drafts: the ordered operation recipe for one statement.

A draft is pure data: source identity, operations in the exact order the
assembler produced them, an optional memo, the target network and the
operator-facing summary. No sequence number, fee or signature lives here;
those are submit-time concerns handled by ``build_envelope()`` and the
dispatcher.

Ordering is significant and preserved verbatim:
    - a trust extension precedes the payment that needs it
    - signer additions precede the threshold change that would otherwise
      make adding them harder to authorize
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union, assert_never

from stellar_sdk import Account, TransactionBuilder, TransactionEnvelope

from alfred_please.assets import Asset
from alfred_please.config import EngineConfig, Network
from alfred_please.identity import Identity
from alfred_please.wallet import ContactMemo


# =========================================================================
# Operations
# =========================================================================


@dataclass(frozen=True)
class Payment:
    destination: str
    asset: Asset
    amount: str


@dataclass(frozen=True)
class CreateAccount:
    """Fund a new account. Only the native asset can create accounts."""

    destination: str
    starting_balance: str


@dataclass(frozen=True)
class ChangeTrust:
    asset: Asset
    limit: str | None = None


@dataclass(frozen=True)
class AddSigner:
    signer: str
    weight: int = 1


@dataclass(frozen=True)
class SetThresholds:
    master_weight: int
    low: int
    medium: int
    high: int


@dataclass(frozen=True)
class ManageData:
    name: str
    value: bytes


@dataclass(frozen=True)
class ManageSellOffer:
    selling: Asset
    buying: Asset
    amount: str
    price: str


Operation = Union[
    Payment,
    CreateAccount,
    ChangeTrust,
    AddSigner,
    SetThresholds,
    ManageData,
    ManageSellOffer,
]


# =========================================================================
# TransactionDraft
# =========================================================================


@dataclass(frozen=True)
class TransactionDraft:
    """Everything needed to build, sign and submit one transaction.

    Attributes:
        source: Signing identity; must carry a local key.
        operations: Operations in submission order.
        network: Network the transaction is built for.
        memo: Optional memo (e.g. from a contact record).
        summary: Ordered label → value pairs shown before confirmation.
    """

    source: Identity
    operations: tuple[Operation, ...]
    network: Network
    memo: ContactMemo | None = None
    summary: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.operations:
            raise ValueError("a transaction draft needs at least one operation")

    def summary_rows(self) -> list[tuple[str, str]]:
        """Summary rows with the network appended."""
        rows = list(self.summary.items())
        if self.memo is not None:
            rows.append(("Memo", str(self.memo)))
        rows.append(("Network", self.network.label))
        return rows


# =========================================================================
# Envelope construction
# =========================================================================


def _append_operation(builder: TransactionBuilder, op: Operation) -> None:
    match op:
        case Payment():
            builder.append_payment_op(
                destination=op.destination, asset=op.asset.to_sdk(), amount=op.amount
            )
        case CreateAccount():
            builder.append_create_account_op(
                destination=op.destination, starting_balance=op.starting_balance
            )
        case ChangeTrust():
            builder.append_change_trust_op(asset=op.asset.to_sdk(), limit=op.limit)
        case AddSigner():
            builder.append_ed25519_public_key_signer(
                account_id=op.signer, weight=op.weight
            )
        case SetThresholds():
            builder.append_set_options_op(
                master_weight=op.master_weight,
                low_threshold=op.low,
                med_threshold=op.medium,
                high_threshold=op.high,
            )
        case ManageData():
            builder.append_manage_data_op(data_name=op.name, data_value=op.value)
        case ManageSellOffer():
            builder.append_manage_sell_offer_op(
                selling=op.selling.to_sdk(),
                buying=op.buying.to_sdk(),
                amount=op.amount,
                price=op.price,
            )
        case _:
            assert_never(op)


def build_envelope(
    draft: TransactionDraft,
    sequence: int,
    config: EngineConfig,
) -> TransactionEnvelope:
    """Build the unsigned envelope for ``draft``.

    Args:
        draft: The assembled draft.
        sequence: Current sequence number of the source account; the
            builder uses sequence + 1.
        config: Fee and timeout settings.
    """
    builder = TransactionBuilder(
        source_account=Account(draft.source.address, sequence),
        network_passphrase=draft.network.passphrase,
        base_fee=config.base_fee,
    )
    for op in draft.operations:
        _append_operation(builder, op)
    if draft.memo is not None:
        builder.add_memo(draft.memo.to_sdk_memo())
    if config.tx_timeout > 0:
        builder.set_timeout(config.tx_timeout)
    return builder.build()

"""
Transaction assembly: one builder per statement kind.

Each ``assemble_*`` function resolves identities and assets, performs the
ledger lookups its rules need (awaited one after another, never cached),
and returns a TransactionDraft. Nothing here signs or submits; a failure
in assembly therefore never touches the network beyond read-only lookups.

Rules per statement:

    Send:
        source must exist (SourceNotFunded); destination must trust a
        credit asset (DestinationUntrusted); CreateAccount for a missing
        destination, Payment otherwise; a ChangeTrust goes first when the
        source itself lacks the trustline; contact memo is attached.

    ShareAccount:
        target must carry a local key and exist; each new signer must
        exist (SignerNotFunded); one AddSigner (weight 1) per new signer,
        then master weight and all thresholds set to
        1 + new signers + existing signers.

    SetData:
        one ManageData per entry in declared order; values are literal
        strings or raw file bytes. Every file is read before any
        operation is built, so an unreadable file aborts the whole draft.

    Offer:
        a single ManageSellOffer; price from the statement or from the
        order book, amount formatted to 7 fractional digits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from alfred_please.assets import Asset, AssetCatalog, resolve_asset
from alfred_please.config import EngineConfig
from alfred_please.draft import (
    AddSigner,
    ChangeTrust,
    CreateAccount,
    ManageData,
    ManageSellOffer,
    Operation,
    Payment,
    SetThresholds,
    TransactionDraft,
)
from alfred_please.errors import (
    DataFileUnreadable,
    DestinationUntrusted,
    NotFound,
    ParseError,
    SignerNotFunded,
    SourceNotFunded,
)
from alfred_please.identity import (
    Identity,
    resolve_destination,
    resolve_identity,
    resolve_signing_identity,
    resolve_source,
)
from alfred_please.pricing import AMOUNT_QUANTUM, format_amount, parse_decimal, price_offer
from alfred_please.selection import SelectionProvider
from alfred_please.statement import (
    AmountKind,
    DataValueKind,
    OfferKind,
    OfferRequest,
    SendRequest,
    SetDataRequest,
    ShareAccountRequest,
)
from alfred_please.stellar.client import LedgerClient
from alfred_please.trustline import has_trustline
from alfred_please.wallet import WalletStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssemblyContext:
    """Collaborators shared by every assembler."""

    store: WalletStore
    client: LedgerClient
    selector: SelectionProvider
    config: EngineConfig
    catalog: AssetCatalog = field(default_factory=AssetCatalog)


def share_threshold(new_signers: int, existing_signers: int) -> int:
    """Weight required so that every signer must approve."""
    if new_signers < 0 or existing_signers < 0:
        raise ValueError("signer counts must be non-negative")
    return 1 + new_signers + existing_signers


# =========================================================================
# Send
# =========================================================================


async def assemble_send(request: SendRequest, ctx: AssemblyContext) -> TransactionDraft:
    asset = resolve_asset(request.currency, ctx.catalog, ctx.selector)
    parse_decimal(request.amount, "amount")

    source = resolve_source(request.source, ctx.store, ctx.selector)
    destination = resolve_destination(request.destination, ctx.store, ctx.selector)

    source_account = await ctx.client.get_account(source.address)
    if not source_account.exists:
        raise SourceNotFunded(
            f"source account {source.address} does not exist, please fund it first",
            details={"address": source.address},
        )

    destination_account = await ctx.client.get_account(destination.address)
    if not has_trustline(destination_account, asset):
        raise DestinationUntrusted(
            f"destination account needs to trust {asset}",
            details={"address": destination.address, "asset": asset.code},
        )

    operations: list[Operation] = []
    if not has_trustline(source_account, asset):
        operations.append(ChangeTrust(asset=asset))

    if destination_account.exists:
        operations.append(
            Payment(destination=destination.address, asset=asset, amount=request.amount)
        )
    else:
        logger.info("destination %s does not exist yet, creating it", destination.address)
        operations.append(
            CreateAccount(destination=destination.address, starting_balance=request.amount)
        )

    return TransactionDraft(
        source=source,
        operations=tuple(operations),
        network=ctx.config.network,
        memo=destination.memo,
        summary={
            "Amount": request.amount,
            "Currency": request.currency,
            "Source": source.address,
            "Destination": destination.address,
        },
    )


# =========================================================================
# ShareAccount
# =========================================================================


async def assemble_share_account(
    request: ShareAccountRequest, ctx: AssemblyContext
) -> TransactionDraft:
    target = resolve_signing_identity(request.account, ctx.store)

    target_account = await ctx.client.get_account(target.address)
    if not target_account.exists:
        raise SourceNotFunded(
            f"'{request.account}' does not exist, fund it first",
            details={"address": target.address},
        )

    new_signers: list[Identity] = []
    for name in request.additional_signers:
        try:
            signer = resolve_identity(name, ctx.store)
        except NotFound:
            raise NotFound(name, f"address not found for '{name}'") from None

        signer_account = await ctx.client.get_account(signer.address)
        if not signer_account.exists:
            raise SignerNotFunded(
                f"'{name}' does not exist, fund it first",
                details={"address": signer.address},
            )
        new_signers.append(signer)

    threshold = share_threshold(
        len(new_signers), len(target_account.additional_signers)
    )

    operations: list[Operation] = [AddSigner(signer=s.address, weight=1) for s in new_signers]
    operations.append(
        SetThresholds(
            master_weight=threshold, low=threshold, medium=threshold, high=threshold
        )
    )

    return TransactionDraft(
        source=target,
        operations=tuple(operations),
        network=ctx.config.network,
        summary={
            "Account": target.address,
            "New signers": ", ".join(s.address for s in new_signers),
            "Threshold": str(threshold),
        },
    )


# =========================================================================
# SetData
# =========================================================================


def _read_data_value(key: str, value: str, kind: DataValueKind) -> bytes:
    if kind is DataValueKind.STRING:
        return value.encode("utf-8")
    try:
        return Path(value).read_bytes()
    except OSError as exc:
        raise DataFileUnreadable(
            f"cannot read '{value}' for data entry '{key}': {exc.strerror or exc}",
            details={"key": key, "path": value},
        ) from exc


async def assemble_set_data(
    request: SetDataRequest, ctx: AssemblyContext
) -> TransactionDraft:
    source = resolve_source(request.account, ctx.store, ctx.selector)

    values = [_read_data_value(e.key, e.value, e.kind) for e in request.entries]
    operations = tuple(
        ManageData(name=entry.key, value=value)
        for entry, value in zip(request.entries, values)
    )

    return TransactionDraft(
        source=source,
        operations=operations,
        network=ctx.config.network,
        summary={
            "Account": source.address,
            "Keys": ", ".join(e.key for e in request.entries),
        },
    )


# =========================================================================
# Offer
# =========================================================================


def _describe_offer_amount(
    request: OfferRequest, amount: str, buying: Asset, selling: Asset
) -> str:
    if request.kind is OfferKind.BUY and request.amount_kind is AmountKind.BUYING:
        return f"{request.amount} {buying.code} = {amount} {selling.code}"
    return f"{amount} {selling.code}"


async def assemble_offer(request: OfferRequest, ctx: AssemblyContext) -> TransactionDraft:
    source = resolve_source(request.account, ctx.store, ctx.selector)
    buying = resolve_asset(request.buying, ctx.catalog, ctx.selector)
    selling = resolve_asset(request.selling, ctx.catalog, ctx.selector)

    priced = await price_offer(request, selling=selling, buying=buying, client=ctx.client)
    amount = format_amount(priced.amount)
    if priced.amount < AMOUNT_QUANTUM:
        raise ParseError(f"offer amount {priced.amount} is below the ledger precision")
    price = format(priced.price, "f")

    operation = ManageSellOffer(selling=selling, buying=buying, amount=amount, price=price)

    return TransactionDraft(
        source=source,
        operations=(operation,),
        network=ctx.config.network,
        summary={
            "Amount": _describe_offer_amount(request, amount, buying, selling),
            "Buying": str(buying),
            "Selling": str(selling),
            "Price": price,
        },
    )

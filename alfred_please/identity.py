"""
Identity resolution.

Turns a free-form name into an ``Identity``. Resolution order, first
match wins and later sources are never consulted:

    1. raw address (valid ed25519 public key strkey): no local key
    2. wallet alias: local signing key
    3. contact alias: stored address, with the contact's memo if any
    4. NotFound

When a statement omits a name entirely the operator chooses through the
SelectionProvider: wallets for sources, contacts for destinations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from stellar_sdk import Keypair, StrKey

from alfred_please.errors import NotFound
from alfred_please.selection import SelectionProvider
from alfred_please.wallet import ContactMemo, Wallet, WalletStore

logger = logging.getLogger(__name__)


class IdentitySource(StrEnum):
    ADDRESS = "address"
    WALLET = "wallet"
    CONTACT = "contact"


@dataclass(frozen=True)
class Identity:
    """A resolved account.

    Attributes:
        address: Public address (G...).
        source: Which resolution step produced it.
        name: Wallet or contact alias, None for raw addresses.
        keypair: Local signing key; only set for wallet identities.
        memo: Contact memo to attach to payments, if any.
    """

    address: str
    source: IdentitySource
    name: str | None = None
    keypair: Keypair | None = field(default=None, repr=False, compare=False)
    memo: ContactMemo | None = None

    @property
    def has_signing_key(self) -> bool:
        return self.keypair is not None and self.keypair.can_sign()

    @property
    def display(self) -> str:
        return f"{self.name} ({self.address})" if self.name else self.address

    @classmethod
    def from_wallet(cls, wallet: Wallet) -> Identity:
        keypair = wallet.keypair
        return cls(
            address=keypair.public_key,
            source=IdentitySource.WALLET,
            name=wallet.name,
            keypair=keypair,
        )


def is_address(value: str) -> bool:
    return StrKey.is_valid_ed25519_public_key(value)


def resolve_identity(name: str, store: WalletStore) -> Identity:
    """Resolve ``name`` as address, then wallet alias, then contact alias.

    Raises:
        NotFound: If no source matches.
    """
    if is_address(name):
        return Identity(address=name, source=IdentitySource.ADDRESS)

    wallet = store.wallet_by_name(name)
    if wallet is not None:
        return Identity.from_wallet(wallet)

    contact = store.contacts().get(name)
    if contact is not None:
        return Identity(
            address=contact.address,
            source=IdentitySource.CONTACT,
            name=contact.alias,
            memo=contact.memo,
        )

    raise NotFound(name)


def resolve_signing_identity(name: str, store: WalletStore) -> Identity:
    """Resolve ``name`` to an identity that carries a local signing key.

    A raw address or contact that belongs to a local wallet is upgraded to
    that wallet.

    Raises:
        NotFound: If nothing matches or no local key exists for it.
    """
    identity = resolve_identity(name, store)
    if identity.source is IdentitySource.WALLET:
        return identity

    wallet = store.wallet_by_address(identity.address)
    if wallet is None:
        raise NotFound(name, f"'{name}' wallet not found")
    return Identity.from_wallet(wallet)


def select_wallet(store: WalletStore, selector: SelectionProvider) -> Identity:
    wallets = list(store.wallets())
    if not wallets:
        raise NotFound("wallet", "no wallets available, create one first")
    index = selector.select(
        "Select Wallet", [f"{w.name} ({w.address})" for w in wallets]
    )
    return Identity.from_wallet(wallets[index])


def resolve_source(
    name: str | None,
    store: WalletStore,
    selector: SelectionProvider,
) -> Identity:
    """Resolve the wallet that signs a statement.

    An explicit name may be a wallet alias or the address of a local
    wallet. None lets the operator choose among wallets.

    Raises:
        NotFound: If the name matches no local wallet.
    """
    if name is None:
        identity = select_wallet(store, selector)
    else:
        if is_address(name):
            wallet = store.wallet_by_address(name)
        else:
            wallet = store.wallet_by_name(name)
        if wallet is None:
            raise NotFound(name, f"wallet '{name}' not found")
        identity = Identity.from_wallet(wallet)

    logger.debug("source resolved to %s", identity.display)
    return identity


def resolve_destination(
    name: str | None,
    store: WalletStore,
    selector: SelectionProvider,
) -> Identity:
    """Resolve where funds go.

    Raises:
        NotFound: If the name matches nothing, or no name was given and
            the contact directory is empty.
    """
    if name is not None:
        identity = resolve_identity(name, store)
    else:
        contacts = list(store.contacts().values())
        if not contacts:
            raise NotFound("destination", "no destination given and no contacts saved")
        index = selector.select("Destination", [c.alias for c in contacts])
        contact = contacts[index]
        identity = Identity(
            address=contact.address,
            source=IdentitySource.CONTACT,
            name=contact.alias,
            memo=contact.memo,
        )

    logger.debug("destination resolved to %s via %s", identity.display, identity.source)
    return identity

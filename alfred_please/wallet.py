"""
Wallet store: local signing keys and the contact directory.

The engine consumes the store through the ``WalletStore`` protocol and
only borrows signing keys for the duration of one statement. The on-disk
encrypted format is not this package's concern; ``InMemoryWalletStore``
is the plain implementation used by tests and by the CLI, which loads it
from a JSON document:

    {
      "wallets": [{"name": "master", "seed": "S..."}],
      "contacts": {
        "jennifer": {"address": "G...", "memo": {"type": "text", "value": "42"}}
      }
    }

Seeds never appear in reprs, logs or summaries.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from stellar_sdk import HashMemo, IdMemo, Keypair, Memo, StrKey, TextMemo
from stellar_sdk.exceptions import MemoInvalidException


class MemoKind(StrEnum):
    TEXT = "text"
    ID = "id"
    HASH = "hash"


@dataclass(frozen=True)
class ContactMemo:
    """Memo attached to payments sent to a contact (e.g. an exchange tag)."""

    kind: MemoKind
    value: str

    def to_sdk_memo(self) -> Memo:
        if self.kind is MemoKind.ID:
            return IdMemo(int(self.value))
        if self.kind is MemoKind.HASH:
            return HashMemo(self.value)
        return TextMemo(self.value)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


@dataclass(frozen=True)
class Wallet:
    """A named local signing key."""

    name: str
    seed: str = field(repr=False)

    @property
    def keypair(self) -> Keypair:
        return Keypair.from_secret(self.seed)

    @property
    def address(self) -> str:
        return self.keypair.public_key


@dataclass(frozen=True)
class Contact:
    alias: str
    address: str
    memo: ContactMemo | None = None


@runtime_checkable
class WalletStore(Protocol):
    """Read-only view of the wallet store used by the resolvers."""

    def wallet_by_name(self, name: str) -> Wallet | None: ...

    def wallet_by_address(self, address: str) -> Wallet | None: ...

    def wallets(self) -> Sequence[Wallet]:
        """All wallets, in store order."""
        ...

    def contacts(self) -> Mapping[str, Contact]:
        """Contact directory keyed by alias, in store order."""
        ...


class InMemoryWalletStore:
    """Dict-backed WalletStore."""

    def __init__(
        self,
        wallets: Sequence[Wallet] = (),
        contacts: Sequence[Contact] = (),
    ) -> None:
        self._wallets = list(wallets)
        self._contacts = {c.alias: c for c in contacts}

    def wallet_by_name(self, name: str) -> Wallet | None:
        for wallet in self._wallets:
            if wallet.name == name:
                return wallet
        return None

    def wallet_by_address(self, address: str) -> Wallet | None:
        for wallet in self._wallets:
            if wallet.address == address:
                return wallet
        return None

    def wallets(self) -> Sequence[Wallet]:
        return tuple(self._wallets)

    def contacts(self) -> Mapping[str, Contact]:
        return dict(self._contacts)

    # --- Loading ---

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryWalletStore:
        """Build a store from a wallet document.

        Raises:
            ValueError: If a seed or contact address is malformed.
        """
        wallets: list[Wallet] = []
        for entry in data.get("wallets", []):
            seed = entry["seed"]
            if not StrKey.is_valid_ed25519_secret_seed(seed):
                raise ValueError(f"wallet {entry['name']!r} has an invalid seed")
            wallets.append(Wallet(name=entry["name"], seed=seed))

        contacts: list[Contact] = []
        for alias, entry in data.get("contacts", {}).items():
            address = entry["address"]
            if not StrKey.is_valid_ed25519_public_key(address):
                raise ValueError(
                    f"contact {alias!r} has an invalid address: {address!r}"
                )
            memo = None
            if entry.get("memo") is not None:
                memo = ContactMemo(
                    kind=MemoKind(entry["memo"]["type"]),
                    value=str(entry["memo"]["value"]),
                )
                try:
                    memo.to_sdk_memo()
                except (ValueError, MemoInvalidException) as exc:
                    raise ValueError(f"contact {alias!r} has an invalid memo: {exc}") from exc
            contacts.append(Contact(alias=alias, address=address, memo=memo))

        return cls(wallets=wallets, contacts=contacts)

    @classmethod
    def load_json(cls, path: str | Path) -> InMemoryWalletStore:
        p = Path(path)
        return cls.from_dict(json.loads(p.read_text(encoding="utf-8")))

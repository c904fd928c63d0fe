"""Trustline check: can an account hold an asset."""

from __future__ import annotations

from alfred_please.assets import Asset
from alfred_please.stellar.client import AccountSnapshot


def has_trustline(account: AccountSnapshot, asset: Asset) -> bool:
    """True if ``account`` can hold ``asset``.

    The native asset is always trusted, whatever the account state. A
    credit asset is trusted iff a balance line matches its code and issuer
    exactly.
    """
    if asset.is_native:
        return True
    return any(
        b.code == asset.code and b.issuer == asset.issuer for b in account.balances
    )

"""
Engine configuration.

One frozen record threaded into every resolver, assembler and dispatcher
call. Nothing in the engine reads process-wide state; only
``EngineConfig.from_env()`` looks at the environment, and only when a
caller asks it to.

Environment variables:
    - ALFRED_NETWORK: "public" (default) or "testnet".
    - ALFRED_HORIZON_URL: Horizon endpoint. Defaults per network.
    - ALFRED_YES: "1"/"true"/"yes" skips the confirmation prompt.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum

from stellar_sdk import Network as SdkNetwork


class Network(StrEnum):
    """Ledger network selector. Public and test are mutually exclusive."""

    PUBLIC = "public"
    TESTNET = "testnet"

    @property
    def passphrase(self) -> str:
        if self is Network.TESTNET:
            return SdkNetwork.TESTNET_NETWORK_PASSPHRASE
        return SdkNetwork.PUBLIC_NETWORK_PASSPHRASE

    @property
    def label(self) -> str:
        """Upper-case name shown in confirmation summaries."""
        return "TESTNET" if self is Network.TESTNET else "PUBLIC"


DEFAULT_HORIZON_URLS: dict[Network, str] = {
    Network.PUBLIC: "https://horizon.stellar.org",
    Network.TESTNET: "https://horizon-testnet.stellar.org",
}

# Stroops per operation.
DEFAULT_BASE_FEE = 100

# Seconds before a built transaction expires.
DEFAULT_TX_TIMEOUT = 300

_TRUTHY = {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class EngineConfig:
    """Runtime options for one engine instance.

    Attributes:
        network: Which ledger network transactions are built for.
        auto_confirm: If True, the confirmation gate is skipped.
        horizon_url: Horizon endpoint. None means the network default.
        base_fee: Fee per operation in stroops.
        tx_timeout: Transaction validity window in seconds.
    """

    network: Network = Network.PUBLIC
    auto_confirm: bool = False
    horizon_url: str | None = None
    base_fee: int = DEFAULT_BASE_FEE
    tx_timeout: int = DEFAULT_TX_TIMEOUT

    def __post_init__(self) -> None:
        if self.base_fee < 100:
            raise ValueError(f"base_fee must be >= 100 stroops, got: {self.base_fee}")
        if self.tx_timeout < 0:
            raise ValueError(f"tx_timeout must be >= 0, got: {self.tx_timeout}")

    @property
    def resolved_horizon_url(self) -> str:
        return self.horizon_url or DEFAULT_HORIZON_URLS[self.network]

    def with_overrides(
        self,
        *,
        testnet: bool | None = None,
        auto_confirm: bool | None = None,
        horizon_url: str | None = None,
    ) -> EngineConfig:
        """Return a copy with CLI-level overrides applied (None = keep)."""
        updated = self
        if testnet is not None:
            updated = replace(
                updated, network=Network.TESTNET if testnet else Network.PUBLIC
            )
        if auto_confirm is not None:
            updated = replace(updated, auto_confirm=auto_confirm)
        if horizon_url is not None:
            updated = replace(updated, horizon_url=horizon_url)
        return updated

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        raw_network = env.get("ALFRED_NETWORK", Network.PUBLIC.value).strip().lower()
        try:
            network = Network(raw_network)
        except ValueError:
            raise ValueError(
                f"ALFRED_NETWORK must be 'public' or 'testnet', got: {raw_network!r}"
            ) from None
        return cls(
            network=network,
            auto_confirm=env.get("ALFRED_YES", "").strip().lower() in _TRUTHY,
            horizon_url=env.get("ALFRED_HORIZON_URL") or None,
        )

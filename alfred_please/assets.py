"""
Asset catalog and currency-code resolution.

An asset is a (code, issuer) pair; the native asset (XLM) has no issuer
and every credit asset has one. Several issuers can share a code, so a
lookup returns a list and resolution asks the operator to disambiguate
whenever more than one candidate exists. It never picks the first.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from stellar_sdk import Asset as SdkAsset

from alfred_please.errors import UnsupportedAsset
from alfred_please.selection import SelectionProvider

NATIVE_CODE = "XLM"

# Spoken alias for the native asset.
_NATIVE_ALIASES = {"lumens"}


@dataclass(frozen=True)
class Asset:
    """A ledger asset.

    Attributes:
        code: Asset code (1-12 alphanumeric chars).
        issuer: Issuing account, None for the native asset.
        name: Optional human-readable label for selection lists.
    """

    code: str
    issuer: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("asset code must be non-empty")
        if self.code == NATIVE_CODE and self.issuer is not None:
            raise ValueError("native asset must not have an issuer")
        if self.code != NATIVE_CODE and not self.issuer:
            raise ValueError(f"credit asset {self.code} must have an issuer")

    @property
    def is_native(self) -> bool:
        return self.issuer is None

    @classmethod
    def native(cls) -> Asset:
        return cls(code=NATIVE_CODE, name="Stellar Lumens")

    def to_sdk(self) -> SdkAsset:
        if self.is_native:
            return SdkAsset.native()
        return SdkAsset(self.code, self.issuer)

    def __str__(self) -> str:
        if self.is_native:
            return self.code
        label = f"{self.code} ({self.issuer})"
        return f"{self.name}: {label}" if self.name else label


DEFAULT_CATALOG: tuple[Asset, ...] = (
    Asset.native(),
    Asset(
        code="MOBI",
        issuer="GA6HCMBLTZS5VYYBCMRBKXVVGYZAGPGVZV3X4RR2W6KHRBKO3RJVVG6M",
        name="Mobius",
    ),
    Asset(
        code="USDC",
        issuer="GA5ZSEJYB37JRC5AVCIA5MOP4RHTM335X2KGX3IHOJAPP5RE34K4KZVN",
        name="Circle",
    ),
    Asset(
        code="AQUA",
        issuer="GBNZILSTVQZ4R7IKQDGHYGY2QXL5QOFJYQMXPKWRRM5PAV7Y4M67AQUA",
        name="Aquarius",
    ),
)


class AssetCatalog:
    """Static list of supported assets."""

    def __init__(self, assets: Iterable[Asset] = DEFAULT_CATALOG) -> None:
        self._assets = tuple(assets)

    def lookup(self, code: str) -> list[Asset]:
        """All assets whose code matches ``code`` case-insensitively."""
        wanted = normalize_code(code)
        return [a for a in self._assets if a.code.upper() == wanted]

    def __iter__(self):
        return iter(self._assets)


def normalize_code(code: str) -> str:
    if code.strip().lower() in _NATIVE_ALIASES:
        return NATIVE_CODE
    return code.strip().upper()


def resolve_asset(
    code: str,
    catalog: AssetCatalog,
    selector: SelectionProvider,
) -> Asset:
    """Resolve a currency code to exactly one asset.

    Raises:
        UnsupportedAsset: If the catalog has no asset with this code.
        UserDeclined: If the operator cancels disambiguation.
        SelectionRequired: If several issuers match and no choice is possible.
    """
    candidates: Sequence[Asset] = catalog.lookup(code)
    if not candidates:
        raise UnsupportedAsset(normalize_code(code))
    if len(candidates) == 1:
        return candidates[0]

    index = selector.select("Choose currency", [str(a) for a in candidates])
    return candidates[index]

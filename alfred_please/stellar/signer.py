"""
Transaction signing: the secrets boundary.

The dispatcher hands over a built envelope and the source identity's
keypair; what comes back is the base64 XDR ready for submission plus
the transaction hash. Secrets never leave this module's call frame and
never appear in results or log lines.
"""

from __future__ import annotations

from dataclasses import dataclass

from stellar_sdk import Keypair, TransactionEnvelope

from alfred_please.errors import SigningError


@dataclass(frozen=True)
class SignResult:
    """Result of signing a transaction.

    Attributes:
        envelope_xdr: Base64 XDR of the signed envelope.
        tx_hash: Transaction hash (64 hex chars).
        key_id: Public key of the signer. Safe for logging.
    """

    envelope_xdr: str
    tx_hash: str
    key_id: str


def sign_envelope(envelope: TransactionEnvelope, keypair: Keypair | None) -> SignResult:
    """Sign ``envelope`` with ``keypair`` and encode it for transport.

    Raises:
        SigningError: If the key cannot sign or encoding fails.
    """
    if keypair is None or not keypair.can_sign():
        raise SigningError("no local signing key for the source account")

    try:
        envelope.sign(keypair)
        envelope_xdr = envelope.to_xdr()
        tx_hash = envelope.hash_hex()
    except Exception as exc:
        raise SigningError(f"signing failed: {exc}") from exc

    return SignResult(
        envelope_xdr=envelope_xdr,
        tx_hash=tx_hash,
        key_id=keypair.public_key,
    )

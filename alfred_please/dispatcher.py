"""
Submission dispatcher.

Takes an assembled TransactionDraft through the side-effecting half of
the lifecycle:

    1. fetch the source sequence number
    2. build the envelope (network, fee, timeout from the config)
    3. sign with the source's local key and encode to base64 XDR
    4. confirm through the gate, unless ``auto_confirm`` is set
    5. submit

Steps 1-4 never write to the network. Any failure there (including a
declined confirmation) aborts before step 5, so a partial transaction is
never submitted. Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from alfred_please.config import EngineConfig, Network
from alfred_please.confirm import ConfirmationGate
from alfred_please.draft import TransactionDraft, build_envelope
from alfred_please.errors import SigningError, UserDeclined
from alfred_please.stellar.client import LedgerClient
from alfred_please.stellar.errors import rejection_from_result
from alfred_please.stellar.signer import sign_envelope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    """A transaction the ledger accepted.

    Attributes:
        tx_hash: Transaction identifier.
        ledger: Ledger the transaction was included in, when reported.
        source: Source account address.
        network: Network it was submitted to.
        envelope_xdr: The signed envelope that was submitted.
    """

    tx_hash: str
    ledger: int | None
    source: str
    network: Network
    envelope_xdr: str


async def dispatch(
    draft: TransactionDraft,
    client: LedgerClient,
    gate: ConfirmationGate | None,
    config: EngineConfig,
) -> SubmissionResult:
    """Sign, confirm and submit ``draft``.

    Args:
        draft: Assembled draft; its source must carry a local key.
        client: Ledger client for sequence lookup and submission.
        gate: Confirmation gate. Ignored when ``config.auto_confirm`` is set,
            required otherwise.
        config: Engine configuration.

    Returns:
        SubmissionResult for the accepted transaction.

    Raises:
        SourceNotFunded: The source account does not exist.
        SigningError: Building, signing or encoding failed.
        UserDeclined: The gate declined.
        NetworkError: Transport failure.
        LedgerRejection: The ledger rejected the transaction.
    """
    source = draft.source.address

    # 1. Sequence
    sequence = await client.fetch_sequence(source)

    # 2. Build
    try:
        envelope = build_envelope(draft, sequence, config)
    except Exception as exc:
        raise SigningError(f"could not build transaction: {exc}") from exc

    # 3. Sign + encode
    signed = sign_envelope(envelope, draft.source.keypair)
    logger.debug("signed %s with %s", signed.tx_hash, signed.key_id)

    # 4. Confirm
    if not config.auto_confirm:
        if gate is None:
            raise UserDeclined("no confirmation gate configured, nothing was submitted")
        if not gate.confirm(draft.summary_rows()):
            raise UserDeclined("transaction not confirmed, nothing was submitted")

    # 5. Submit
    result = await client.submit_transaction(signed.envelope_xdr)
    if not result.accepted:
        rejection = rejection_from_result(result)
        logger.warning("transaction %s rejected: %s", signed.tx_hash, rejection.message)
        raise rejection

    tx_hash = result.tx_hash or signed.tx_hash
    logger.info("transaction %s accepted on %s", tx_hash, draft.network.label)
    return SubmissionResult(
        tx_hash=tx_hash,
        ledger=result.ledger,
        source=source,
        network=draft.network,
        envelope_xdr=signed.envelope_xdr,
    )

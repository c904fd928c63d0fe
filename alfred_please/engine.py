"""
The please engine: statement in, submitted transaction out.

    statement → assemble_* (resolve identities/assets, trustlines,
    pricing) → TransactionDraft → dispatch (sign, confirm, submit)

One Engine may serve many statements, but each statement starts from
fresh ledger lookups and nothing is shared between them except the
injected collaborators.
"""

from __future__ import annotations

from typing import assert_never

from alfred_please.assembler import (
    AssemblyContext,
    assemble_offer,
    assemble_send,
    assemble_set_data,
    assemble_share_account,
)
from alfred_please.assets import AssetCatalog
from alfred_please.config import EngineConfig
from alfred_please.confirm import ConfirmationGate
from alfred_please.dispatcher import SubmissionResult, dispatch
from alfred_please.draft import TransactionDraft
from alfred_please.selection import SelectionProvider
from alfred_please.statement import (
    OfferRequest,
    SendRequest,
    SetDataRequest,
    ShareAccountRequest,
    Statement,
)
from alfred_please.stellar.client import LedgerClient
from alfred_please.wallet import WalletStore


class Engine:
    def __init__(
        self,
        store: WalletStore,
        client: LedgerClient,
        *,
        selector: SelectionProvider,
        gate: ConfirmationGate | None = None,
        config: EngineConfig | None = None,
        catalog: AssetCatalog | None = None,
    ) -> None:
        self._client = client
        self._gate = gate
        self._config = config or EngineConfig()
        self._context = AssemblyContext(
            store=store,
            client=client,
            selector=selector,
            config=self._config,
            catalog=catalog or AssetCatalog(),
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    async def assemble(self, statement: Statement) -> TransactionDraft:
        """Resolve ``statement`` into a draft without signing or submitting."""
        match statement:
            case SendRequest():
                return await assemble_send(statement, self._context)
            case ShareAccountRequest():
                return await assemble_share_account(statement, self._context)
            case SetDataRequest():
                return await assemble_set_data(statement, self._context)
            case OfferRequest():
                return await assemble_offer(statement, self._context)
            case _:
                assert_never(statement)

    async def run(self, statement: Statement) -> SubmissionResult:
        draft = await self.assemble(statement)
        return await dispatch(draft, self._client, self._gate, self._config)

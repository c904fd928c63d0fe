"""
End-to-end engine tests over the fake ledger client.

Test plan:
- Each statement kind runs through assemble → sign → confirm → submit
- Failures in assembly submit nothing
- Statements do not share ledger state: lookups repeat per run
"""

import pytest

from alfred_please.config import EngineConfig, Network
from alfred_please.confirm import StaticGate
from alfred_please.engine import Engine
from alfred_please.errors import DestinationUntrusted, UserDeclined
from alfred_please.selection import DeterministicSelector
from alfred_please.statement import load_statement

from fakes import (
    CATALOG,
    JENNIFER,
    MASTER,
    MOBI,
    SAMPLE_TX_HASH,
    XLM,
    FakeLedgerClient,
    book,
    funded,
    make_store,
)


def _engine(client: FakeLedgerClient, *, approve: bool = True) -> tuple[Engine, StaticGate]:
    gate = StaticGate(approve=approve)
    engine = Engine(
        make_store(),
        client,
        selector=DeterministicSelector(),
        gate=gate,
        config=EngineConfig(network=Network.TESTNET),
        catalog=CATALOG,
    )
    return engine, gate


class TestEngineRun:
    @pytest.mark.asyncio
    async def test_send(self) -> None:
        client = FakeLedgerClient([funded(MASTER), funded(JENNIFER)])
        engine, gate = _engine(client)
        statement = load_statement(
            {"kind": "send", "amount": "20", "currency": "XLM", "from": "master", "to": "jennifer"}
        )

        result = await engine.run(statement)

        assert result.tx_hash == SAMPLE_TX_HASH
        assert result.network is Network.TESTNET
        assert len(gate.shown) == 1
        assert len(client.submit_calls) == 1

    @pytest.mark.asyncio
    async def test_share_account(self) -> None:
        client = FakeLedgerClient([funded(MASTER), funded(JENNIFER)])
        engine, _ = _engine(client)
        result = await engine.run(
            load_statement({"kind": "share_account", "account": "master", "signers": ["jennifer"]})
        )
        assert result.source == MASTER

    @pytest.mark.asyncio
    async def test_set_data(self) -> None:
        client = FakeLedgerClient([funded(MASTER)])
        engine, _ = _engine(client)
        await engine.run(
            load_statement(
                {
                    "kind": "set_data",
                    "account": "master",
                    "entries": [{"key": "nickname", "value": "alfred"}],
                }
            )
        )
        assert client.submit_calls

    @pytest.mark.asyncio
    async def test_offer(self) -> None:
        client = FakeLedgerClient([funded(MASTER)], order_book=book(XLM, MOBI, "0.5"))
        engine, gate = _engine(client)
        await engine.run(
            load_statement(
                {
                    "kind": "offer",
                    "side": "buy",
                    "amount": "100",
                    "buying": "MOBI",
                    "selling": "XLM",
                    "account": "master",
                }
            )
        )
        assert ("Amount", "100 MOBI = 200.0000000 XLM") in gate.shown[0]

    @pytest.mark.asyncio
    async def test_assembly_failure_submits_nothing(self) -> None:
        client = FakeLedgerClient([funded(MASTER), funded(JENNIFER)])
        engine, gate = _engine(client)
        with pytest.raises(DestinationUntrusted):
            await engine.run(
                load_statement(
                    {"kind": "send", "amount": "1", "currency": "MOBI", "from": "master", "to": "jennifer"}
                )
            )
        assert gate.shown == []
        assert client.sequence_calls == []
        assert client.submit_calls == []

    @pytest.mark.asyncio
    async def test_declined(self) -> None:
        client = FakeLedgerClient([funded(MASTER), funded(JENNIFER)])
        engine, _ = _engine(client, approve=False)
        with pytest.raises(UserDeclined):
            await engine.run(
                load_statement(
                    {"kind": "send", "amount": "1", "currency": "XLM", "from": "master", "to": "jennifer"}
                )
            )
        assert client.submit_calls == []

    @pytest.mark.asyncio
    async def test_lookups_repeat_per_statement(self) -> None:
        client = FakeLedgerClient([funded(MASTER), funded(JENNIFER)])
        engine, _ = _engine(client)
        statement = load_statement(
            {"kind": "send", "amount": "1", "currency": "XLM", "from": "master", "to": "jennifer"}
        )
        await engine.run(statement)
        await engine.run(statement)
        assert client.get_account_calls == [MASTER, JENNIFER, MASTER, JENNIFER]


class TestEngineAssemble:
    @pytest.mark.asyncio
    async def test_assemble_does_not_submit(self) -> None:
        client = FakeLedgerClient([funded(MASTER), funded(JENNIFER)])
        engine, gate = _engine(client)
        draft = await engine.assemble(
            load_statement(
                {"kind": "send", "amount": "1", "currency": "XLM", "from": "master", "to": "jennifer"}
            )
        )
        assert draft.source.address == MASTER
        assert gate.shown == []
        assert client.sequence_calls == []
        assert client.submit_calls == []

    def test_default_config(self) -> None:
        engine = Engine(make_store(), FakeLedgerClient(), selector=DeterministicSelector())
        assert engine.config == EngineConfig()

"""
Tests for the confirmation gate, terminal selection and rejection messages.

Test plan:
- Summary table: right-aligned columns, bordered
- TerminalGate: y/yes approve, anything else or EOF declines
- TerminalSelector: valid number → index, invalid re-prompts, empty cancels
- DeterministicSelector: configured index or string, bad choice raises
- describe_rejection: title plus compact sorted codes, default title
"""

import io
from collections.abc import Iterator

import pytest

from alfred_please.confirm import TerminalGate, render_summary
from alfred_please.errors import SelectionRequired, UserDeclined
from alfred_please.selection import DeterministicSelector, TerminalSelector
from alfred_please.stellar.client import SubmitResult
from alfred_please.stellar.errors import describe_rejection, rejection_from_result


def _answers(*values: str):
    it: Iterator[str] = iter(values)

    def _input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return _input


class TestRenderSummary:
    def test_table(self) -> None:
        table = render_summary([("Amount", "20"), ("Network", "PUBLIC")])
        assert table.splitlines() == [
            "+---------+--------+",
            "|  Amount |     20 |",
            "| Network | PUBLIC |",
            "+---------+--------+",
        ]

    def test_empty(self) -> None:
        assert render_summary([]) == ""


class TestTerminalGate:
    @pytest.mark.parametrize("answer", ["y", "YES", " yes "])
    def test_approve(self, answer: str) -> None:
        out = io.StringIO()
        gate = TerminalGate(input_fn=_answers(answer), output=out)
        assert gate.confirm([("Amount", "1")])
        assert "Amount" in out.getvalue()

    @pytest.mark.parametrize("answer", ["", "n", "sure"])
    def test_decline(self, answer: str) -> None:
        gate = TerminalGate(input_fn=_answers(answer), output=io.StringIO())
        assert not gate.confirm([("Amount", "1")])

    def test_eof_declines(self) -> None:
        gate = TerminalGate(input_fn=_answers(), output=io.StringIO())
        assert not gate.confirm([("Amount", "1")])


class TestTerminalSelector:
    def test_pick(self) -> None:
        selector = TerminalSelector(input_fn=_answers("2"), output=io.StringIO())
        assert selector.select("Destination", ["jennifer", "exchange"]) == 1

    def test_invalid_then_valid(self) -> None:
        out = io.StringIO()
        selector = TerminalSelector(input_fn=_answers("9", "x", "1"), output=out)
        assert selector.select("Destination", ["jennifer", "exchange"]) == 0
        assert "between 1 and 2" in out.getvalue()

    def test_non_ascii_digit_reprompts(self) -> None:
        out = io.StringIO()
        selector = TerminalSelector(input_fn=_answers("\u00b2", "2"), output=out)
        assert selector.select("Destination", ["jennifer", "exchange"]) == 1
        assert "between 1 and 2" in out.getvalue()

    def test_empty_cancels(self) -> None:
        selector = TerminalSelector(input_fn=_answers(""), output=io.StringIO())
        with pytest.raises(UserDeclined):
            selector.select("Destination", ["jennifer"])

    def test_no_options(self) -> None:
        selector = TerminalSelector(input_fn=_answers("1"), output=io.StringIO())
        with pytest.raises(SelectionRequired):
            selector.select("Destination", [])


class TestDeterministicSelector:
    def test_by_string(self) -> None:
        assert DeterministicSelector({"L": "b"}).select("L", ["a", "b"]) == 1

    def test_by_index(self) -> None:
        assert DeterministicSelector({"L": 0}).select("L", ["a", "b"]) == 0

    def test_bad_choice(self) -> None:
        with pytest.raises(SelectionRequired):
            DeterministicSelector({"L": "z"}).select("L", ["a", "b"])


class TestDescribeRejection:
    def test_title_and_codes(self) -> None:
        message = describe_rejection(
            "Transaction Failed", {"transaction": "tx_failed", "operations": ["op_no_trust"]}
        )
        assert message == (
            'Transaction Failed ({"operations":["op_no_trust"],"transaction":"tx_failed"})'
        )

    def test_default_title(self) -> None:
        assert describe_rejection(None, None) == "Transaction Failed"

    def test_detail_used_without_codes(self) -> None:
        rejection = rejection_from_result(
            SubmitResult(accepted=False, title="Timeout", detail="try again")
        )
        assert rejection.message == "Timeout: try again"
        assert rejection.result_codes == {}

"""
Confirmation gate: the operator's last word before submission.

The dispatcher renders the draft summary through a gate and only submits
if the gate approves. A gate that declines never raises on its own; the
dispatcher turns a False into UserDeclined.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Protocol, TextIO, runtime_checkable

_YES = {"y", "yes"}


@runtime_checkable
class ConfirmationGate(Protocol):
    def confirm(self, rows: Sequence[tuple[str, str]]) -> bool:
        """Show ``rows`` (label, value) and return the operator's decision."""
        ...


def render_summary(rows: Sequence[tuple[str, str]]) -> str:
    """Two-column table, both columns right-aligned.

    +-------------+---------+
    |      Amount |      20 |
    |     Network |  PUBLIC |
    +-------------+---------+
    """
    if not rows:
        return ""
    label_width = max(len(label) for label, _ in rows)
    value_width = max(len(value) for _, value in rows)
    border = f"+-{'-' * label_width}-+-{'-' * value_width}-+"
    lines = [border]
    for label, value in rows:
        lines.append(f"| {label.rjust(label_width)} | {value.rjust(value_width)} |")
    lines.append(border)
    return "\n".join(lines)


class TerminalGate:
    """Prints the summary table and asks ``Are you sure [y/N]``.

    Like TerminalSelector, the prompt blocks the event loop while it waits.
    """

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_fn
        self._output = output or sys.stdout

    def confirm(self, rows: Sequence[tuple[str, str]]) -> bool:
        print(render_summary(rows), file=self._output)
        try:
            answer = self._input("Are you sure [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() in _YES


class StaticGate:
    """Always answers the same way. Records what it was shown."""

    def __init__(self, approve: bool) -> None:
        self._approve = approve
        self.shown: list[list[tuple[str, str]]] = []

    def confirm(self, rows: Sequence[tuple[str, str]]) -> bool:
        self.shown.append(list(rows))
        return self._approve

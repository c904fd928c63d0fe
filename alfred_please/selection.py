"""
Selection providers: how the engine asks the operator to choose.

Resolvers never prompt directly. When a statement leaves something open
(no source wallet, no destination, several issuers for one code) they ask
the injected ``SelectionProvider`` for an index into a list of options.

Implementations:
    - TerminalSelector: numbered list on a stream, answer read from input.
    - DeterministicSelector: automation/test policy. Picks the sole
      candidate, or a pre-configured answer per label, otherwise raises
      SelectionRequired instead of guessing.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Protocol, TextIO, runtime_checkable

from alfred_please.errors import SelectionRequired, UserDeclined


@runtime_checkable
class SelectionProvider(Protocol):
    def select(self, label: str, options: Sequence[str]) -> int:
        """Choose one of ``options``.

        Args:
            label: What is being chosen (e.g. "Select Wallet").
            options: Display strings, non-empty.

        Returns:
            Index into ``options``.

        Raises:
            UserDeclined: The operator cancelled.
            SelectionRequired: No choice could be made.
        """
        ...


class TerminalSelector:
    """Prompts on a terminal. Empty input or EOF cancels.

    ``input_fn`` blocks the calling thread. The CLI runs one statement per
    event loop, so nothing else is waiting on it.
    """

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_fn
        self._output = output or sys.stdout

    def select(self, label: str, options: Sequence[str]) -> int:
        if not options:
            raise SelectionRequired(f"{label}: nothing to choose from")

        print(f"{label}:", file=self._output)
        for index, option in enumerate(options, start=1):
            print(f"  {index}) {option}", file=self._output)

        while True:
            try:
                answer = self._input(f"{label} [1-{len(options)}]: ").strip()
            except EOFError:
                raise UserDeclined(f"{label}: selection cancelled") from None
            if not answer:
                raise UserDeclined(f"{label}: selection cancelled")
            if answer.isdecimal() and 1 <= int(answer) <= len(options):
                return int(answer) - 1
            print(f"  please enter a number between 1 and {len(options)}", file=self._output)


class DeterministicSelector:
    """Non-interactive selection policy.

    Args:
        choices: Optional answers keyed by label. A value may be an index
            or the exact option string.
    """

    def __init__(self, choices: Mapping[str, int | str] | None = None) -> None:
        self._choices = dict(choices or {})
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def select(self, label: str, options: Sequence[str]) -> int:
        self.calls.append((label, tuple(options)))
        if not options:
            raise SelectionRequired(f"{label}: nothing to choose from")

        if label in self._choices:
            choice = self._choices[label]
            if isinstance(choice, int):
                if 0 <= choice < len(options):
                    return choice
            elif choice in options:
                return list(options).index(choice)
            raise SelectionRequired(
                f"{label}: configured choice {choice!r} is not among the options"
            )

        if len(options) == 1:
            return 0

        raise SelectionRequired(
            f"{label}: {len(options)} candidates, an explicit choice is required"
        )

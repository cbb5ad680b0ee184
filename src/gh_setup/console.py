"""
Terminal implementation of the Prompter protocol, built on print() and input().
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger: logging.Logger = logging.getLogger(__name__)


class Console:
    """Interactive console.

    EOF and Ctrl-C at any prompt are treated as an abort: the prompt returns
    None (or False for confirmations).
    """

    def report_info(self, message: str) -> None:
        print(message)  # noqa: T201

    def report_warning(self, message: str) -> None:
        print(f"Warning: {message}", file=sys.stderr)  # noqa: T201

    def report_error(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)  # noqa: T201

    def note(self, message: str, title: str = "") -> None:
        if title:
            print(f"\n{title}")  # noqa: T201
            print("-" * len(title))  # noqa: T201
        print(message)  # noqa: T201
        print()  # noqa: T201

    def _ask(self, prompt: str) -> str | None:
        try:
            return input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()  # noqa: T201
            logger.debug("Prompt aborted by user")
            return None

    def confirm(self, message: str, *, default: bool = True) -> bool:
        suffix = "[Y/n]" if default else "[y/N]"
        while True:
            answer = self._ask(f"{message} {suffix} ")
            if answer is None:
                return False
            answer = answer.strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            print("Please answer 'y' or 'n'.")  # noqa: T201

    def text(
        self,
        message: str,
        *,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
    ) -> str | None:
        prompt = f"{message} [{default}] " if default else f"{message} "
        while True:
            answer = self._ask(prompt)
            if answer is None:
                return None
            answer = answer.strip() or (default or "")
            error = validate(answer) if validate else None
            if error is None:
                return answer
            print(error)  # noqa: T201

    def select[T](self, message: str, options: Sequence[tuple[T, str]]) -> T | None:
        print(message)  # noqa: T201
        for i, (_, label) in enumerate(options, start=1):
            print(f"  {i}) {label}")  # noqa: T201
        while True:
            answer = self._ask("Choose one [1]: ")
            if answer is None:
                return None
            answer = answer.strip() or "1"
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1][0]
            print(f"Enter a number between 1 and {len(options)}.")  # noqa: T201

    def multiselect[T](
        self,
        message: str,
        options: Sequence[tuple[T, str]],
        *,
        initial: Sequence[T] = (),
    ) -> list[T] | None:
        print(message)  # noqa: T201
        for i, (value, label) in enumerate(options, start=1):
            marker = "x" if value in initial else " "
            print(f"  [{marker}] {i}) {label}")  # noqa: T201
        while True:
            answer = self._ask("Numbers separated by commas (Enter keeps [x], '-' selects none): ")
            if answer is None:
                return None
            answer = answer.strip()
            if not answer:
                return [value for value, _ in options if value in initial]
            if answer == "-":
                return []
            picked = _parse_indices(answer, len(options))
            if picked is not None:
                return [options[i][0] for i in picked]
            print(f"Enter numbers between 1 and {len(options)}, separated by commas.")  # noqa: T201


def _parse_indices(answer: str, count: int) -> list[int] | None:
    """Parse "1, 3" into sorted zero-based indices, or None if invalid."""
    indices: set[int] = set()
    for part in answer.split(","):
        part = part.strip()
        if not part.isdigit() or not 1 <= int(part) <= count:
            return None
        indices.add(int(part) - 1)
    return sorted(indices)

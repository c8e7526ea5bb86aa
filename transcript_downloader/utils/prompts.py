"""Console prompts used for the interactive parts of a run."""

from __future__ import annotations

from typing import Callable, Protocol

ABORT_ANSWERS = {"q", "quit", "n", "no", "abort"}
YES_ANSWERS = {"y", "yes"}


class Prompter(Protocol):
    def confirm(self, message: str) -> bool: ...

    def prompt_retry(self, message: str) -> None: ...


class ConsolePrompter:
    """Reads operator answers from stdin."""

    def __init__(self, input_func: Callable[[str], str] = input) -> None:
        self._input = input_func

    def _ask(self, message: str) -> str | None:
        try:
            return self._input(message)
        except EOFError:
            return None

    def confirm(self, message: str) -> bool:
        """Blocks until Enter; typing q/no (or closing stdin) declines."""

        answer = self._ask(message)
        if answer is None:
            return False
        return answer.strip().lower() not in ABORT_ANSWERS

    def prompt_retry(self, message: str) -> None:
        self._ask(message)

    def ask_yes_no(self, message: str, default: bool = False) -> bool:
        answer = self._ask(message)
        if not answer or not answer.strip():
            return default
        return answer.strip().lower() in YES_ANSWERS

    def ask_int(self, message: str, default: int) -> int:
        answer = self._ask(message)
        if not answer or not answer.strip():
            return default
        return int(answer.strip())

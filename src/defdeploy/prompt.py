"""Numbered-menu prompts for the operator."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from defdeploy.errors import PromptAbortedError

logger = logging.getLogger(__name__)

__all__ = [
    "Prompter",
    "ConsolePrompter",
    "ScriptedPrompter",
    "numbered_menu",
    "ask_choice",
    "WILDCARD_LABEL",
]

WILDCARD_LABEL = "* (All)"


class Prompter(Protocol):
    """Blocking line reader.

    Implementations raise ``EOFError`` when no more input can be read.
    """

    def read_line(self, message: str) -> str: ...


class ConsolePrompter:
    """Reads answers from standard input."""

    def read_line(self, message: str) -> str:
        return input(message)


class ScriptedPrompter:
    """Replays a fixed sequence of answers and records every question asked."""

    def __init__(self, answers: Iterable[str]) -> None:
        self._answers = list(answers)
        self.questions: list[str] = []

    def read_line(self, message: str) -> str:
        self.questions.append(message)
        if not self._answers:
            raise EOFError("no scripted answers left")
        return self._answers.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._answers)


def numbered_menu(labels: list[str]) -> str:
    """Render *labels* as ``"\\n1. a\\n2. b"``."""
    return "".join(f"\n{i}. {label}" for i, label in enumerate(labels, start=1))


def ask_choice(
    prompter: Prompter,
    question: str,
    labels: list[str],
    max_attempts: int | None = None,
) -> int:
    """Ask *question* over a numbered menu of *labels* and return the 1-based choice.

    The question is repeated until the answer is one of ``"1".."N"``. With
    ``max_attempts`` set, giving that many invalid answers aborts the prompt.

    Raises:
        PromptAbortedError: If the attempt bound is reached or input ends.
    """
    if not labels:
        raise ValueError("Cannot prompt over an empty menu")

    message = question + numbered_menu(labels) + "\n"
    valid = {str(i) for i in range(1, len(labels) + 1)}

    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        try:
            answer = prompter.read_line(message)
        except EOFError as e:
            raise PromptAbortedError(question=question, attempts=attempts, reason="end of input", cause=e) from e
        attempts += 1
        answer = answer.strip().lower()
        if answer in valid:
            return int(answer)
        logger.debug("Rejected answer %r to %r", answer, question)

    raise PromptAbortedError(question=question, attempts=attempts, reason="no valid answer given")

"""Tests for numbered-menu prompts."""

from __future__ import annotations

import builtins

import pytest

from defdeploy.errors import PromptAbortedError
from defdeploy.prompt import ConsolePrompter, ScriptedPrompter, ask_choice, numbered_menu


class TestNumberedMenu:
    def test_format(self) -> None:
        assert numbered_menu(["* (All)", "a.json"]) == "\n1. * (All)\n2. a.json"

    def test_empty(self) -> None:
        assert numbered_menu([]) == ""


class TestAskChoice:
    def test_valid_answer(self) -> None:
        prompter = ScriptedPrompter(["2"])
        assert ask_choice(prompter, "Which?", ["a", "b"]) == 2
        assert prompter.questions == ["Which?\n1. a\n2. b\n"]

    def test_reprompts_until_valid(self) -> None:
        prompter = ScriptedPrompter(["", "x", "0", "3", "1"])
        assert ask_choice(prompter, "Which?", ["a", "b"]) == 1
        assert len(prompter.questions) == 5

    def test_surrounding_whitespace_ignored(self) -> None:
        assert ask_choice(ScriptedPrompter([" 2 \n"]), "Which?", ["a", "b"]) == 2

    def test_bounded_attempts(self) -> None:
        prompter = ScriptedPrompter(["x", "y", "z", "1"])
        with pytest.raises(PromptAbortedError) as exc_info:
            ask_choice(prompter, "Which?", ["a"], max_attempts=3)
        assert exc_info.value.attempts == 3
        assert prompter.remaining == 1

    def test_valid_on_last_allowed_attempt(self) -> None:
        assert ask_choice(ScriptedPrompter(["x", "1"]), "Which?", ["a"], max_attempts=2) == 1

    def test_end_of_input_aborts(self) -> None:
        with pytest.raises(PromptAbortedError) as exc_info:
            ask_choice(ScriptedPrompter(["nope"]), "Which?", ["a"])
        assert exc_info.value.attempts == 1
        assert exc_info.value.details["reason"] == "end of input"

    def test_empty_menu_rejected(self) -> None:
        with pytest.raises(ValueError):
            ask_choice(ScriptedPrompter(["1"]), "Which?", [])


class TestConsolePrompter:
    def test_reads_from_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[str] = []

        def fake_input(message: str) -> str:
            seen.append(message)
            return "1"

        monkeypatch.setattr(builtins, "input", fake_input)
        assert ConsolePrompter().read_line("Q? ") == "1"
        assert seen == ["Q? "]

"""Tests for output/console.py."""

from __future__ import annotations

import pytest

from train.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


def _narrate(console: ConsoleProtocol) -> None:
    console.header("Cutting a new Train Release...")
    console.info("Checking out the main branch.")
    console.warning("The current branch (main) is not clean.")
    console.print("train push --id 1700000000000", Style.COMMAND)


class TestMockConsole:
    def test_captures_in_order(self) -> None:
        console = MockConsole()
        _narrate(console)
        assert console.messages == [
            "Cutting a new Train Release...",
            "Checking out the main branch.",
            "Warning! The current branch (main) is not clean.",
            "train push --id 1700000000000",
        ]

    def test_error_prefix(self) -> None:
        console = MockConsole()
        console.error("Could not find the origin Git remote.")
        assert console.has_error()
        assert console.messages == ["Bonk! Could not find the origin Git remote."]

    def test_find(self) -> None:
        console = MockConsole()
        _narrate(console)
        found = console.find("--id")
        assert len(found) == 1
        assert found[0].style == Style.COMMAND

    def test_text_joins_lines(self) -> None:
        console = MockConsole()
        console.print("a")
        console.newline()
        console.print("b")
        assert console.text == "a\n\nb"


class TestRichConsole:
    def test_prints_without_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("[not markup] train-4", Style.COMMAND)
        console.warning("careful")
        out = capsys.readouterr().out
        assert "[not markup] train-4" in out
        assert "Warning! careful" in out


def test_style_str() -> None:
    assert str(Style.COMMAND) == "command"

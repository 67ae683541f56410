"""Tests for train.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from train.core.result import Err, Ok
from train.platform.process import ProcessError, format_command, run


class TestProcessError:
    def test_str(self) -> None:
        error = ProcessError(
            command=("git", "push", "origin", "v149.4.0"),
            returncode=1,
            stdout="",
            stderr="rejected",
        )
        assert str(error) == "git push origin v149.4.0 failed (exit 1)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


def test_format_command_quotes_arguments() -> None:
    assert format_command(["git", "commit", "-m", "Release 1.2.0"]) == (
        "git commit -m 'Release 1.2.0'"
    )


class TestRun:
    def test_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_nonzero_exit_is_error(self, tmp_path: Path) -> None:
        result = run(
            [sys.executable, "-c", "import sys; sys.stderr.write('nope'); sys.exit(3)"],
            cwd=tmp_path,
        )
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "nope"

    def test_stderr_on_success_is_not_an_error(self, tmp_path: Path) -> None:
        result = run(
            [sys.executable, "-c", "import sys; sys.stderr.write('progress 50%')"],
            cwd=tmp_path,
        )
        assert isinstance(result, Ok)

    def test_missing_executable_is_error(self, tmp_path: Path) -> None:
        result = run(["definitely-not-a-command-xyz"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_logs_executed_command(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("DEBUG", logger="train.platform.process"):
            run([sys.executable, "-c", "pass"], cwd=tmp_path)
        assert any(r.getMessage().startswith("executed: ") for r in caplog.records)

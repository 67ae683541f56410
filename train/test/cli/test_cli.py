from __future__ import annotations

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

import train.cli.commands.cut as cut_cmd
import train.cli.commands.push as push_cmd
from train import __version__
from train.cli.app import app
from train.cli.commands._helpers import release_error_code
from train.cli.context import CLIContext
from train.core.config import Config
from train.core.errors import ErrorCode
from train.output.console import MockConsole
from train.services.release.store import ReleaseRecord, ReleaseStore
from train.test.services.fakes import FakeGit

runner = CliRunner()


def _ctx(tmp_path: Path, git: FakeGit, console: MockConsole) -> CLIContext:
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    return CLIContext(
        root=root,
        config=Config(),
        repo=git,  # type: ignore[arg-type]
        store=ReleaseStore(tmp_path / "store"),
        console=console,
    )


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_guide_lists_glossary() -> None:
    result = runner.invoke(app, ["guide"])
    assert result.exit_code == 0
    assert "Pending release" in result.output


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("required_option", ErrorCode.USER_ERROR),
        ("precondition_failed", ErrorCode.USER_ERROR),
        ("not_found", ErrorCode.USER_ERROR),
        ("configuration", ErrorCode.ENV_ERROR),
        ("git_command_failed", ErrorCode.GIT_ERROR),
        ("io_error", ErrorCode.IO_ERROR),
    ],
)
def test_release_error_code(kind: str, code: ErrorCode) -> None:
    assert release_error_code(kind) == code  # type: ignore[arg-type]


def test_cut_requires_force_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRAIN_REQUIRE_FORCE", "1")
    result = runner.invoke(app, ["cut"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)
    assert "--force" in result.output


def test_cut_rejects_unknown_type(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TRAIN_REQUIRE_FORCE", raising=False)
    result = runner.invoke(app, ["cut", "--type", "hotfix"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_cut_dry_run(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TRAIN_REQUIRE_FORCE", raising=False)
    git = FakeGit()
    console = MockConsole()
    ctx = _ctx(tmp_path, git, console)
    monkeypatch.setattr(cut_cmd, "build_context", lambda *, verbose: ctx)

    cut_cmd.cut(
        release_type="train",
        remote=None,
        default_branch=None,
        dry=True,
        force=False,
        verbose=False,
    )

    assert git.calls == ["git fetch origin train-4"]
    assert console.find("conditional: git push origin v149.4.0")


def test_cut_with_unknown_remote_exits_env_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("TRAIN_REQUIRE_FORCE", raising=False)
    git = FakeGit()
    console = MockConsole()
    ctx = _ctx(tmp_path, git, console)
    monkeypatch.setattr(cut_cmd, "build_context", lambda *, verbose: ctx)

    with pytest.raises(typer.Exit) as exc:
        cut_cmd.cut(
            release_type="train",
            remote="upstream",
            default_branch=None,
            dry=False,
            force=False,
            verbose=False,
        )

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
    assert git.calls == []


def test_push_without_id_lists_pending_releases(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    console = MockConsole()
    ctx = _ctx(tmp_path, FakeGit(), console)
    saved = ctx.store.save(ReleaseRecord(branch="train-4", tag="v149.4.0"))
    monkeypatch.setattr(push_cmd, "build_context", lambda *, verbose: ctx)

    with pytest.raises(typer.Exit) as exc:
        push_cmd.push(release_id=None, remote=None, default_branch=None, verbose=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find(f"- {saved.unwrap()}")


def test_push_unknown_id_exits_user_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    console = MockConsole()
    ctx = _ctx(tmp_path, FakeGit(), console)
    monkeypatch.setattr(push_cmd, "build_context", lambda *, verbose: ctx)

    with pytest.raises(typer.Exit) as exc:
        push_cmd.push(release_id="1700000000000", remote=None, default_branch=None, verbose=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert console.find("There was a problem fetching the Release data")


def test_push_confirmed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    git = FakeGit()
    console = MockConsole()
    ctx = _ctx(tmp_path, git, console)
    saved = ctx.store.save(ReleaseRecord(branch="train-4", tag="v149.4.0"))
    monkeypatch.setattr(push_cmd, "build_context", lambda *, verbose: ctx)
    monkeypatch.setattr(push_cmd, "ask_confirmation", lambda prompt="": "push")

    push_cmd.push(release_id=saved.unwrap(), remote=None, default_branch=None, verbose=False)

    assert git.calls == ["git push origin train-4:train-4", "git push origin v149.4.0"]
    assert ctx.store.list_ids() == []

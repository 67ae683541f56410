from __future__ import annotations

from pathlib import Path

from train.core.codebase import check_codebase, list_packages, package_path
from train.core.config import Config
from train.core.result import Err, Ok


def test_requires_git_working_copy(tmp_path: Path) -> None:
    result = check_codebase(tmp_path, Config())
    assert isinstance(result, Err)
    assert "not a git working copy" in result.error.message


def test_codebase_name_must_match_manifest(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / "package.json").write_text('{"name": "fxa"}', encoding="utf-8")

    assert isinstance(check_codebase(tmp_path, Config(codebase_name="fxa")), Ok)

    wrong = check_codebase(tmp_path, Config(codebase_name="other"))
    assert isinstance(wrong, Err)
    assert wrong.error.message == "This CLI needs to be run in the other codebase."


def test_missing_manifest_fails_name_check(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    assert isinstance(check_codebase(tmp_path, Config(codebase_name="fxa")), Err)


def test_list_packages_discovers_directories(tmp_path: Path) -> None:
    for name in ("b-pkg", "a-pkg", ".hidden"):
        (tmp_path / "packages" / name).mkdir(parents=True)
    (tmp_path / "packages" / "README.md").write_text("", encoding="utf-8")

    assert list_packages(tmp_path, Config()) == ("a-pkg", "b-pkg")


def test_list_packages_prefers_configured_list(tmp_path: Path) -> None:
    config = Config(packages=("zeta", "alpha"))
    assert list_packages(tmp_path, config) == ("zeta", "alpha")


def test_list_packages_without_root(tmp_path: Path) -> None:
    assert list_packages(tmp_path, Config()) == ()


def test_package_path(tmp_path: Path) -> None:
    path = package_path(tmp_path, Config(packages_root="libs"), "auth")
    assert path == tmp_path / "libs" / "auth"

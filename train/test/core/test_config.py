"""Tests for train.core.config module."""

from __future__ import annotations

from pathlib import Path

from train.core.config import (
    DEFAULT_BRANCH,
    DEFAULT_REMOTE,
    Config,
    load_config,
    load_repo_config,
)
from train.core.result import Err, Ok


class TestConfigFromDict:
    def test_empty_uses_defaults(self) -> None:
        config = Config.from_dict({})
        assert config == Config()
        assert config.remote == DEFAULT_REMOTE
        assert config.default_branch == DEFAULT_BRANCH
        assert config.authors_file == "AUTHORS"

    def test_values_are_read(self) -> None:
        config = Config.from_dict(
            {
                "remote": "upstream",
                "default_branch": "develop",
                "packages": ["auth", "content"],
                "repo_url": "https://github.com/example/monorepo/",
                "version_files": ["pyproject.toml"],
            }
        )
        assert config.remote == "upstream"
        assert config.default_branch == "develop"
        assert config.packages == ("auth", "content")
        assert config.repo_url == "https://github.com/example/monorepo"
        assert config.version_files == ("pyproject.toml",)

    def test_empty_authors_file_disables_update(self) -> None:
        assert Config.from_dict({"authors_file": ""}).authors_file == ""

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        config = Config.from_dict({"remote": 3, "packages": ["ok", 1]})
        assert config.remote == DEFAULT_REMOTE
        assert config.packages == ()


class TestLoadConfig:
    def test_load_train_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "train.toml"
        path.write_text('remote = "upstream"\npackages_root = "libs"\n', encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.remote == "upstream"
        assert result.value.packages_root == "libs"

    def test_load_pyproject_tool_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "x"\n\n[tool.train]\ndefault_branch = "trunk"\n',
            encoding="utf-8",
        )

        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.default_branch == "trunk"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "train.toml"
        path.write_text("remote = [", encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "train.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message


class TestLoadRepoConfig:
    def test_defaults_without_files(self, tmp_path: Path) -> None:
        result = load_repo_config(tmp_path)
        assert isinstance(result, Ok)
        assert result.value == Config()

    def test_train_toml_wins_over_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "train.toml").write_text('remote = "a"\n', encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text('[tool.train]\nremote = "b"\n', encoding="utf-8")

        result = load_repo_config(tmp_path)
        assert isinstance(result, Ok)
        assert result.value.remote == "a"

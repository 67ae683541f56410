from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from train.core.config import Config, load_repo_config
from train.core.errors import ErrorCode
from train.core.result import Err
from train.git.repository import Repository
from train.logging import configure_logging
from train.output.console import ConsoleProtocol, RichConsole
from train.platform.paths import user_data_dir
from train.services.release.store import ReleaseStore


ROOT_ENV = "TRAIN_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    repo: Repository
    store: ReleaseStore
    console: ConsoleProtocol


def store_dir(config: Config) -> Path:
    if config.store_dir is not None:
        return Path(config.store_dir).expanduser()
    return user_data_dir() / "releases"


def build_context(*, verbose: bool) -> CLIContext:
    configure_logging(verbose=verbose)

    env_root = os.environ.get(ROOT_ENV)
    root = Path(env_root).expanduser().resolve() if env_root else Path.cwd().resolve()
    config_result = load_repo_config(root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    return CLIContext(
        root=root,
        config=config,
        repo=Repository(root),
        store=ReleaseStore(store_dir(config)),
        console=RichConsole(),
    )

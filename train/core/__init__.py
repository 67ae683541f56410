"""Core types: results, exit codes, configuration, codebase checks."""

from .codebase import CodebaseError, check_codebase, list_packages
from .config import Config, ConfigError, load_config, load_repo_config
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # codebase
    "CodebaseError",
    "check_codebase",
    "list_packages",
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_repo_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]

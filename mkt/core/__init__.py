"""Core types: results, exit codes, configuration and workspace."""

from .config import (
    CONFIG_FILE_NAME,
    ConfigError,
    MarketplaceConfig,
    MarketplacePaths,
    load_marketplace_config,
)
from .errors import ErrorCode
from .result import Err, Ok, Result
from .workspace import Workspace, WorkspaceError, detect_workspace

__all__ = [
    # config
    "CONFIG_FILE_NAME",
    "ConfigError",
    "MarketplaceConfig",
    "MarketplacePaths",
    "load_marketplace_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    # workspace
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
]

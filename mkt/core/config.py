"""Typed loading of marketplace.json.

marketplace.json sits at the workspace root and tells the release tool
where bundles and package descriptors live:

    {
      "title": "Marketplace",
      "description": "Installable bundles",
      "paths": {"packages": "packages", "bundles": "bundles"}
    }
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "MarketplaceConfig",
    "MarketplacePaths",
    "load_marketplace_config",
]

CONFIG_FILE_NAME = "marketplace.json"

DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_BUNDLES_DIR = "bundles"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when marketplace.json cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class MarketplacePaths:
    """Directories relative to the workspace root."""

    packages: str = DEFAULT_PACKAGES_DIR
    bundles: str = DEFAULT_BUNDLES_DIR


@dataclass(frozen=True, slots=True)
class MarketplaceConfig:
    """Contents of marketplace.json."""

    paths: MarketplacePaths = field(default_factory=MarketplacePaths)
    title: str | None = None
    description: str | None = None

    def bundles_dir(self, workspace_root: Path) -> Path:
        return workspace_root / self.paths.bundles

    def packages_dir(self, workspace_root: Path) -> Path:
        return workspace_root / self.paths.packages

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> MarketplaceConfig:
        paths: StrDict = get_table(data, "paths") or {}
        return cls(
            paths=MarketplacePaths(
                packages=get_str(paths, "packages") or DEFAULT_PACKAGES_DIR,
                bundles=get_str(paths, "bundles") or DEFAULT_BUNDLES_DIR,
            ),
            title=get_str(data, "title"),
            description=get_str(data, "description"),
        )


def _parse_json(path: Path) -> Result[StrDict, ConfigError]:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"Invalid JSON syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(obj)
    if data is None:
        return Err(ConfigError("Config root must be a JSON object", path=path))
    return Ok(data)


def load_marketplace_config(path: Path) -> Result[MarketplaceConfig, ConfigError]:
    """Load and parse marketplace.json.

    Args:
        path: Path to marketplace.json

    Returns:
        Ok(MarketplaceConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_json(path)
    if isinstance(result, Err):
        return result
    return Ok(MarketplaceConfig.from_dict(result.value))

"""Toolchain configuration loader.

This module provides access to JSON toolchain configurations. Packaged
configurations are read with importlib.resources so they work when installed
as a wheel; a user file can be loaded instead by path.

The packaged "default.json" describes a prebuilt rustc/clang toolchain laid
out the way the build tree expects it.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from ..build.errors import ToolchainConfigError
from .toolchain_config_model import ToolchainConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "default"

__all__ = [
    "DEFAULT_CONFIG",
    "ToolchainConfig",
    "list_available_configs",
    "load_config_dict",
    "load_toolchain_config",
]


def load_config_dict(name: str) -> dict[str, Any] | None:
    """Load a packaged toolchain configuration as a raw dictionary.

    Args:
        name: Configuration name without the .json extension

    Returns:
        The configuration dictionary if found, None otherwise.
    """
    try:
        config_file = resources.files(__package__).joinpath(f"{name}.json")
        if config_file.is_file():
            with config_file.open("r", encoding="utf-8") as f:
                return json.load(f)
    except (FileNotFoundError, TypeError):
        pass

    return None


def list_available_configs() -> list[str]:
    """List packaged toolchain configuration names."""
    configs = []
    try:
        for f in resources.files(__package__).iterdir():
            if f.name.endswith(".json") and f.is_file():
                configs.append(f.name[:-5])
    except (TypeError, AttributeError, FileNotFoundError):
        pass

    return sorted(configs)


def load_toolchain_config(path: Path | None = None, name: str = DEFAULT_CONFIG) -> ToolchainConfig:
    """Load a toolchain configuration.

    Args:
        path: User configuration file; when None the packaged config is used
        name: Packaged configuration name (ignored when path is given)

    Returns:
        Parsed ToolchainConfig

    Raises:
        ToolchainConfigError: If the file is missing, not valid JSON, or incomplete
    """
    if path is not None:
        if not path.is_file():
            raise ToolchainConfigError(f"Toolchain config not found: {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ToolchainConfigError(f"Invalid JSON in toolchain config {path}: {e}") from e
        logger.debug(f"Loaded toolchain config from {path}")
    else:
        data = load_config_dict(name)
        if data is None:
            raise ToolchainConfigError(
                f"No packaged toolchain config named {name!r} (available: {', '.join(list_available_configs())})"
            )
        logger.debug(f"Loaded packaged toolchain config {name!r}")

    if not isinstance(data, dict):
        raise ToolchainConfigError("Toolchain config must be a JSON object")
    return ToolchainConfig.from_dict(data)

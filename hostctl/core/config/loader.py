"""
Configuration loader — hostctl.yml → HostConfig.

The file is optional: without one every recipe runs with the stock
settings. It is looked up from the working directory upwards, so the
recipes work from anywhere inside the configuration repository.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hostctl.core.models.config import HostConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "hostctl.yml"


class ConfigError(Exception):
    """hostctl.yml exists but cannot be used."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest hostctl.yml in ``start_dir`` (default: cwd) or above it."""
    here = (start_dir or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def _read_mapping(path: Path) -> dict[str, Any]:
    """Parse ``path`` as YAML; an empty file is an empty mapping."""
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(
            f"{path} must contain a YAML mapping, not a {type(document).__name__}"
        )
    return document


def load_config(path: Path | None = None) -> HostConfig:
    """Load the host configuration.

    Args:
        path: File given with ``--config``. When None, the nearest
            hostctl.yml is used, or the defaults if there is none.

    Raises:
        ConfigError: ``path`` does not exist, or the file is not a valid
            configuration.
    """
    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    path = path or find_config_file()
    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return HostConfig()

    try:
        config = HostConfig.model_validate(_read_mapping(path))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Using %s", path)
    return config


def config_root(config_path: Path | None) -> Path:
    """Directory that relative config paths are resolved against."""
    if config_path is None:
        return Path.cwd()
    return config_path.parent.resolve()

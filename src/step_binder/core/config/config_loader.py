"""Load BindingConfig from YAML."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from step_binder.exceptions import ConfigurationError
from step_binder.schemas.binding_config import BindingConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".step-binder.yaml"
CONFIG_ENV_VAR = "STEP_BINDER_CONFIG"
NAMESPACE_KEY = "step_binder"


def default_config_path() -> Path:
    """Return the config path from STEP_BINDER_CONFIG or the working directory."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.cwd() / DEFAULT_CONFIG_FILE


def _read_yaml(file_path: Path) -> dict[str, Any]:
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {file_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{file_path} must contain a mapping")
    return data


def load_config(file_path: Path | str | None = None) -> BindingConfig:
    """Load the binding configuration.

    Settings may sit at the top level or under a ``step_binder:`` key.
    A missing file yields the default configuration.

    Args:
        file_path: Config file; defaults to ``default_config_path()``

    Returns:
        The validated configuration

    Raises:
        ConfigurationError: If the file cannot be read or fails validation
    """
    path = Path(file_path) if file_path is not None else default_config_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return BindingConfig()

    data = _read_yaml(path)
    if NAMESPACE_KEY in data:
        ignored = sorted(k for k in data if k != NAMESPACE_KEY)
        if ignored:
            logger.warning("Ignoring keys outside '%s': %s", NAMESPACE_KEY, ignored)
        data = data[NAMESPACE_KEY] or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"'{NAMESPACE_KEY}' in {path} must be a mapping")

    try:
        return BindingConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

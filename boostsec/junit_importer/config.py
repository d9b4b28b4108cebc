"""Load importer configuration from a file, the environment and CLI flags."""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from boostsec.junit_importer.errors import ConfigurationError
from boostsec.junit_importer.models.config import ImporterConfig

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load a YAML or JSON configuration file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Raw configuration mapping (empty for an empty file)

    Raises:
        ConfigurationError: If the file is missing or not a mapping

    """
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {config_path}")
    return data


def substitute_env(value: Any, environ: Mapping[str, str] | None = None) -> Any:
    """Replace ``${VAR}`` placeholders in every string of ``value``.

    Placeholders for unset variables are kept verbatim.
    """
    env = os.environ if environ is None else environ

    if isinstance(value, str):
        return PLACEHOLDER.sub(lambda m: env.get(m.group(1), m.group(0)), value)
    if isinstance(value, dict):
        return {key: substitute_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env(item, env) for item in value]
    return value


def merge_overrides(
    base: dict[str, Any], overrides: Mapping[str, Mapping[str, Any]]
) -> dict[str, Any]:
    """Merge section overrides into ``base``, ignoring None values."""
    merged = {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in base.items()
    }
    for section, values in overrides.items():
        current = merged.get(section)
        target = dict(current) if isinstance(current, dict) else {}
        for key, value in values.items():
            if value is not None:
                target[key] = value
        merged[section] = target
    return merged


def build_config(
    config_path: Path | None,
    overrides: Mapping[str, Mapping[str, Any]],
    environ: Mapping[str, str] | None = None,
) -> ImporterConfig:
    """Build and validate the importer configuration.

    Precedence, lowest first: model defaults, config file, CLI flags and
    their environment variables.

    Raises:
        ConfigurationError: If the file cannot be loaded or validation fails

    """
    data: dict[str, Any] = {}
    if config_path is not None:
        data = load_config_file(config_path)
        logger.debug(f"Loaded configuration file {config_path}")

    data = substitute_env(merge_overrides(data, overrides), environ)

    try:
        return ImporterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

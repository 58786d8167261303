"""
Configuration loader — reads matchergen.yml into a GeneratorConfig.

The file is optional: without one the generator runs on defaults and
whatever the command line supplies. The YAML may be flat or wrap its
keys under a top-level ``matchergen:`` mapping.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from matchergen.core.models import GeneratorConfig

logger = logging.getLogger(__name__)

# Searched for upward from the working directory
CONFIG_FILE = "matchergen.yml"
CONFIG_SECTION = "matchergen"


class ConfigError(Exception):
    """Raised when the generator configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest matchergen.yml in *start_dir* (default: cwd) or any ancestor."""
    here = (start_dir or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, search: bool = True) -> GeneratorConfig:
    """Load and validate the generator configuration.

    Args:
        path: Explicit config file. Must exist when given.
        search: Look upward from the cwd when *path* is None.

    Returns:
        GeneratorConfig with paths resolved to absolute ones.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return GeneratorConfig().resolved(Path.cwd())

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading generator config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    section = data.get(CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected '{CONFIG_SECTION}' to be a mapping in {path}")

    try:
        config = GeneratorConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid generator configuration in {path}: {e}") from e

    config = config.resolved(path.parent.resolve())
    config = config.model_copy(update={"config_file": path.resolve()})
    logger.info("Loaded config from %s (%d input(s))", path, len(config.inputs))
    return config

"""
Config check use case — validate matchergen.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from matchergen.core.config.loader import CONFIG_FILE, ConfigError, find_config_file, load_config
from matchergen.core.models import GeneratorConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: GeneratorConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "input_count": len(self.config.inputs) if self.config else 0,
            "output_root": str(self.config.output_root) if self.config else None,
            "naming": self.config.naming.strategy if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the generator configuration and report issues.

    Args:
        config_path: Optional explicit path to matchergen.yml.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append(f"No {CONFIG_FILE} found.")
        return result
    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if not config.inputs:
        result.warnings.append("No inputs defined. Pass names to 'matchergen generate'.")

    for path in config.source_paths:
        if not path.is_dir():
            result.warnings.append(f"Source path does not exist: {path}")

    dupes = sorted({n for n in config.inputs if config.inputs.count(n) > 1})
    if dupes:
        result.warnings.append(f"Duplicate inputs: {', '.join(dupes)}")

    if config.output_root in config.source_paths and config.naming.strategy == "same-package":
        result.warnings.append(
            "output_root is also a source path: generated matchers will sit next to "
            "the beans they were generated from."
        )

    result.valid = len(result.errors) == 0
    return result

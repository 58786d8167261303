"""
Generator configuration models — the schema of matchergen.yml.

Example:

    matchergen:
      inputs:
        - shop.models
        - shop.orders.Order
      output_root: build/generated-matchers
      source_paths: [src]
      naming:
        strategy: sub-package
        sub_package: matchers
      max_workers: 4
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from matchergen.core.persistence.audit import DEFAULT_AUDIT_DIR, DEFAULT_AUDIT_FILE

DEFAULT_OUTPUT_ROOT = Path("build/generated-matchers")


class NamingConfig(BaseModel):
    """Which naming strategy to use and how to parameterize it."""

    strategy: Literal["same-package", "sub-package"] = "same-package"
    suffix: str = "Matcher"
    sub_package: str = "matchers"
    strip_suffixes: list[str] = Field(default_factory=list)

    @field_validator("sub_package")
    @classmethod
    def _dotted_identifier(cls, v: str) -> str:
        if not v or not all(part.isidentifier() for part in v.split(".")):
            raise ValueError(f"'{v}' is not a dotted package name")
        return v


class GeneratorConfig(BaseModel):
    """Top-level generator configuration.

    Relative paths are resolved against the directory of the config
    file by the loader (see ``resolved``).
    """

    inputs: list[str] = Field(default_factory=list)
    output_root: Path = DEFAULT_OUTPUT_ROOT
    source_paths: list[Path] = Field(default_factory=list)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    include_private: bool = False
    max_workers: int = Field(default=1, ge=1)
    audit: bool = True

    # Where the config was loaded from (None for defaults)
    config_file: Path | None = None

    @property
    def audit_path(self) -> Path:
        return self.output_root / DEFAULT_AUDIT_DIR / DEFAULT_AUDIT_FILE

    def resolved(self, base_dir: Path) -> GeneratorConfig:
        """Copy with every relative path made absolute against *base_dir*."""

        def absolute(p: Path) -> Path:
            return p if p.is_absolute() else (base_dir / p).resolve()

        return self.model_copy(
            update={
                "output_root": absolute(self.output_root),
                "source_paths": [absolute(p) for p in self.source_paths],
            }
        )

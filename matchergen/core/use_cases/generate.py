"""
Generate use case — load config, apply CLI overrides, run the pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from matchergen.core.config.loader import ConfigError, load_config
from matchergen.core.engine.executor import GenerationReport, build_pipeline
from matchergen.core.errors import MatcherGenerationError
from matchergen.core.models import GeneratorConfig

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Result of a generate invocation."""

    report: GenerationReport | None = None
    config: GeneratorConfig | None = None
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.failed == 0

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            result["error_kind"] = self.error_kind
            return result

        if self.config:
            result["output_root"] = str(self.config.output_root)
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def apply_overrides(
    config: GeneratorConfig,
    names: Sequence[str] = (),
    output_root: Path | str | None = None,
    source_paths: Sequence[Path | str] = (),
    naming: str | None = None,
    suffix: str | None = None,
    workers: int | None = None,
    audit: bool | None = None,
) -> GeneratorConfig:
    """Return *config* with command-line values taking precedence."""
    update: dict = {}
    if names:
        update["inputs"] = list(names)
    if output_root is not None:
        update["output_root"] = Path(output_root).resolve()
    if source_paths:
        update["source_paths"] = [
            *config.source_paths,
            *(Path(p).resolve() for p in source_paths),
        ]

    naming_update: dict = {}
    if naming is not None:
        naming_update["strategy"] = naming
    if suffix is not None:
        naming_update["suffix"] = suffix
    if naming_update:
        update["naming"] = config.naming.model_copy(update=naming_update)

    if workers is not None:
        update["max_workers"] = workers
    if audit is not None:
        update["audit"] = audit
    return config.model_copy(update=update)


def run_generate(
    names: Sequence[str] = (),
    config_path: Path | None = None,
    output_root: Path | str | None = None,
    source_paths: Sequence[Path | str] = (),
    naming: str | None = None,
    suffix: str | None = None,
    workers: int | None = None,
    audit: bool | None = None,
) -> GenerateResult:
    """Generate matchers for *names* (or the configured inputs).

    Returns:
        GenerateResult; batch-scoped failures land in ``error``.
    """
    result = GenerateResult()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        result.error_kind = "config"
        return result

    config = apply_overrides(
        config,
        names=names,
        output_root=output_root,
        source_paths=source_paths,
        naming=naming,
        suffix=suffix,
        workers=workers,
        audit=audit,
    )
    result.config = config

    try:
        result.report = build_pipeline(config).run(config.inputs)
    except MatcherGenerationError as e:
        logger.error("Generation run failed: %s", e)
        result.error = str(e)
        result.error_kind = e.kind
    return result

"""
Engine executor — the batch driver of the generation pipeline.

One run per invocation, no state carried across runs:

    START → FIND → FILTER → GENERATE[i] → COMPILE_LOAD → DONE

FIND and FILTER work on the whole input set. GENERATE runs once per
eligible candidate, each isolated from the others: a failure becomes a
failed outcome in the report and the batch carries on. COMPILE_LOAD
consumes only the sources that survived GENERATE.

Only batch-scoped problems raise: no inputs, no resolvable input, or
sources produced but none of them loadable.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from matchergen.core.engine.loader import MatcherLoader
from matchergen.core.errors import BatchError, CompileError, MatcherGenerationError
from matchergen.core.models import (
    Candidate,
    GeneratedArtifact,
    GenerationFailure,
    GenerationOutcome,
    GeneratorConfig,
    MatcherSource,
)
from matchergen.core.persistence.audit import AuditEntry, AuditWriter
from matchergen.core.services.discovery import (
    CandidateFinder,
    DefaultEligibilityFilter,
    EligibilityFilter,
)
from matchergen.core.services.generators import (
    MatcherClassGenerator,
    OutputClaims,
    SourceRenderer,
)
from matchergen.core.services.naming import NamingStrategy, naming_strategy_from_config
from matchergen.core.services.properties import PropertyExtractor

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """Result of one pipeline run."""

    run_id: str = ""
    inputs: list[str] = field(default_factory=list)
    discovered: int = 0
    eligible: int = 0
    outcomes: list[GenerationOutcome] = field(default_factory=list)
    unresolved: list[GenerationFailure] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def artifacts(self) -> list[GeneratedArtifact]:
        return [o.artifact for o in self.outcomes if o.ok and o.artifact is not None]

    @property
    def failures(self) -> list[GenerationFailure]:
        """Unresolved inputs first, then failed candidates."""
        failed = [o.failure for o in self.outcomes if o.failed and o.failure is not None]
        return [*self.unresolved, *failed]

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "inputs": self.inputs,
            "status": self.status,
            "discovered": self.discovered,
            "eligible": self.eligible,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "duration_ms": self.duration_ms,
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
            "unresolved": [f.model_dump(mode="json") for f in self.unresolved],
        }


class MatcherPipeline:
    """Composes finder, filter, generator and loader into one batch run.

    Every collaborator is pluggable; defaults follow the conventions in
    ``matchergen.core.services``.

    Args:
        output_root: Directory generated matchers are written under.
        max_workers: Run GENERATE in a thread pool when greater than 1.
        audit_writer: Append one ledger entry per run when given.
    """

    def __init__(
        self,
        output_root: Path | str,
        finder: CandidateFinder | None = None,
        eligibility_filter: EligibilityFilter | None = None,
        extractor: PropertyExtractor | None = None,
        naming_strategy: NamingStrategy | None = None,
        renderer: SourceRenderer | None = None,
        loader: MatcherLoader | None = None,
        max_workers: int = 1,
        audit_writer: AuditWriter | None = None,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.finder = finder or CandidateFinder()
        self.eligibility_filter = eligibility_filter or DefaultEligibilityFilter()
        self.generator = MatcherClassGenerator(
            output_root,
            extractor=extractor,
            naming_strategy=naming_strategy,
            renderer=renderer,
        )
        self.loader = loader or MatcherLoader()
        self.max_workers = max_workers
        self.audit_writer = audit_writer

    @property
    def output_root(self) -> Path:
        return self.generator.output_root

    def generate(self, *inputs: str) -> list[GeneratedArtifact]:
        """Run the pipeline and return the loaded matchers only.

        Failures are reported through logging (and the audit ledger);
        use ``run`` to get them as values.
        """
        return self.run(inputs).artifacts

    def run(self, inputs: Iterable[str]) -> GenerationReport:
        """Run one batch over *inputs*.

        Raises:
            BatchError: If there are no inputs or none can be resolved.
            CompileError: If sources were generated but none could be loaded.
        """
        started = time.monotonic()
        names = [name for name in inputs if name and name.strip()]
        if not names:
            raise BatchError("no inputs given")

        report = GenerationReport(run_id=generate_run_id(), inputs=names)
        logger.info("Run %s: %d input(s)", report.run_id, len(names))

        # ── FIND ────────────────────────────────────────────────
        discovery = self.finder.find(names)
        report.unresolved = [
            GenerationFailure.from_error(e, stage="find") for e in discovery.unresolved
        ]
        if not discovery.resolved_any:
            raise BatchError(f"none of the {len(names)} input(s) could be resolved")
        report.discovered = len(discovery.candidates)

        # ── FILTER ──────────────────────────────────────────────
        eligible = self.eligibility_filter.filter(discovery.candidates)
        report.eligible = len(eligible)
        logger.info(
            "%d of %d candidate(s) eligible", len(eligible), len(discovery.candidates)
        )

        # ── GENERATE ────────────────────────────────────────────
        outcomes: dict[str, GenerationOutcome] = {}
        sources: list[MatcherSource] = []
        for candidate, result in zip(eligible, self._generate_all(eligible)):
            if isinstance(result, GenerationFailure):
                outcomes[candidate.qualified_name] = GenerationOutcome.failure_of(result)
            else:
                sources.append(result)

        # ── COMPILE_LOAD ────────────────────────────────────────
        loaded = self.loader.load(sources)
        for artifact in loaded.artifacts:
            outcomes[artifact.candidate] = GenerationOutcome.success(artifact)
        for failure in loaded.failures:
            outcomes[failure.candidate] = GenerationOutcome.failure_of(failure)

        report.outcomes = [
            outcomes[c.qualified_name] for c in eligible if c.qualified_name in outcomes
        ]
        self._finish(report, started)

        if sources and not loaded.artifacts:
            raise CompileError(
                f"none of the {len(sources)} generated matcher(s) could be compiled and loaded"
            )
        return report

    # ── GENERATE helpers ────────────────────────────────────────

    def _generate_all(self, eligible: list[Candidate]) -> list[MatcherSource | GenerationFailure]:
        claims = OutputClaims()
        if self.max_workers > 1 and len(eligible) > 1:
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="matchergen"
            ) as pool:
                return list(pool.map(lambda c: self._generate_one(c, claims), eligible))
        return [self._generate_one(c, claims) for c in eligible]

    def _generate_one(
        self, candidate: Candidate, claims: OutputClaims
    ) -> MatcherSource | GenerationFailure:
        identity = candidate.qualified_name
        try:
            return self.generator.generate(candidate, claims)
        except MatcherGenerationError as e:
            failure = GenerationFailure.from_error(e, stage="generate", candidate=identity)
        except Exception as e:
            # Defect in a plugged-in collaborator
            logger.debug("Unexpected error for %s", identity, exc_info=True)
            failure = GenerationFailure.from_error(e, stage="generate", candidate=identity)

        logger.error(
            "Matcher generation failed for %s [%s]: %s",
            identity,
            failure.kind,
            failure.cause,
        )
        return failure

    def _finish(self, report: GenerationReport, started: float) -> None:
        report.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "Run %s %s: %d matcher(s) generated, %d failure(s) in %dms",
            report.run_id,
            report.status,
            report.succeeded,
            report.failed,
            report.duration_ms,
        )
        if self.audit_writer is not None:
            write_audit_entry(report, self.audit_writer)


def write_audit_entry(report: GenerationReport, audit_writer: AuditWriter) -> None:
    """Append the run summary of *report* to the audit ledger."""
    entry = AuditEntry(
        run_id=report.run_id,
        inputs=report.inputs,
        status=report.status,
        candidates_found=report.discovered,
        candidates_eligible=report.eligible,
        matchers_generated=report.succeeded,
        matchers_failed=report.failed,
        duration_ms=report.duration_ms,
        errors=[str(f) for f in report.failures],
        artifacts=[a.module_name for a in report.artifacts],
    )
    audit_writer.write(entry)


def build_pipeline(config: GeneratorConfig) -> MatcherPipeline:
    """Wire a pipeline with the default collaborators from *config*."""
    naming = config.naming
    return MatcherPipeline(
        output_root=config.output_root,
        finder=CandidateFinder(
            search_paths=config.source_paths,
            include_private=config.include_private,
        ),
        naming_strategy=naming_strategy_from_config(
            strategy=naming.strategy,
            suffix=naming.suffix,
            sub_package=naming.sub_package,
            strip_suffixes=naming.strip_suffixes,
        ),
        max_workers=config.max_workers,
        audit_writer=AuditWriter(path=config.audit_path) if config.audit else None,
    )


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"

"""
Properties use case — show what the pipeline sees for one input.

Lists every candidate the input resolves to, whether it is eligible,
and the properties the extractor derives from it. Nothing is written.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from matchergen.core.config.loader import ConfigError, load_config
from matchergen.core.models import Candidate, Property
from matchergen.core.services.discovery import CandidateFinder, DefaultEligibilityFilter
from matchergen.core.services.generators import ImportTable, render_annotation
from matchergen.core.services.properties import BeanPropertyExtractor


@dataclass
class CandidateReport:
    candidate: Candidate
    excluded_because: str | None = None
    properties: list[Property] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "candidate": self.candidate.qualified_name,
            "eligible": self.excluded_because is None,
            "excluded_because": self.excluded_because,
            "properties": [
                {
                    "name": p.name,
                    "type": display_type(p),
                    "kind": p.kind,
                    "writable": p.writable,
                    "matcher": p.is_matcher,
                    "accessor": p.accessor,
                }
                for p in self.properties
            ],
        }


@dataclass
class InspectResult:
    candidates: list[CandidateReport] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "candidates": [c.to_dict() for c in self.candidates],
            "errors": self.errors,
        }


def display_type(prop: Property) -> str:
    """Annotation text of a property's value type."""
    return render_annotation(prop.value_type, ImportTable())


def inspect_input(
    name: str,
    config_path: Path | None = None,
    source_paths: Sequence[Path | str] = (),
) -> InspectResult:
    result = InspectResult()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    finder = CandidateFinder(
        search_paths=[*config.source_paths, *(Path(p).resolve() for p in source_paths)],
        include_private=config.include_private,
    )
    discovery = finder.find([name])
    result.errors.extend(str(e) for e in discovery.unresolved)

    eligibility = DefaultEligibilityFilter()
    extractor = BeanPropertyExtractor()
    for candidate in discovery.candidates:
        result.candidates.append(
            CandidateReport(
                candidate=candidate,
                excluded_because=eligibility.exclusion_reason(candidate),
                properties=extractor.properties_of(candidate),
            )
        )
    return result

"""
Eligibility filter — drop candidates that cannot receive a matcher.

Ineligibility is expected, not exceptional: excluded candidates are
only logged at DEBUG level and never reported as failures.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from matchergen.core.models import Candidate

logger = logging.getLogger(__name__)


class EligibilityFilter(ABC):
    """Decides which candidates are legal generation inputs.

    To plug in a custom policy, subclass and implement
    ``exclusion_reason``; ``filter`` keeps the input order.
    """

    @abstractmethod
    def exclusion_reason(self, candidate: Candidate) -> str | None:
        """Return why *candidate* is excluded, or None if it is eligible."""

    def is_eligible(self, candidate: Candidate) -> bool:
        return self.exclusion_reason(candidate) is None

    def filter(self, candidates: Iterable[Candidate]) -> list[Candidate]:
        """Return the eligible subset of *candidates*, order preserved."""
        eligible = []
        for candidate in candidates:
            reason = self.exclusion_reason(candidate)
            if reason is None:
                eligible.append(candidate)
            else:
                logger.debug("Excluding %s: %s", candidate.qualified_name, reason)
        return eligible


class DefaultEligibilityFilter(EligibilityFilter):
    """Excludes interfaces, abstract, annotation-only, enum, synthetic,
    already generated and not default-constructible classes."""

    def exclusion_reason(self, candidate: Candidate) -> str | None:
        if candidate.is_interface:
            return "protocol class"
        if candidate.is_abstract:
            return "abstract class"
        if candidate.is_annotation:
            return "annotation-only type"
        if candidate.is_enum:
            return "enum"
        if candidate.is_synthetic:
            return "anonymous or local class"
        if candidate.is_generated:
            return "generated by matchergen"
        if not candidate.has_default_constructor:
            return "no argument-free constructor"
        return None

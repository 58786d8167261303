"""
Discovery — finding candidates and deciding which are eligible.
"""

from matchergen.core.services.discovery.eligibility import (
    DefaultEligibilityFilter,
    EligibilityFilter,
)
from matchergen.core.services.discovery.finder import (
    CandidateFinder,
    DiscoveryResult,
    candidate_for,
)

__all__ = [
    "CandidateFinder",
    "DefaultEligibilityFilter",
    "DiscoveryResult",
    "EligibilityFilter",
    "candidate_for",
]

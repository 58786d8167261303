"""
Domain models — Pydantic types for the generation pipeline.

All models are re-exported here for convenient access:

    from matchergen.core.models import Candidate, Property, NamingDecision
"""

from matchergen.core.models.candidate import Candidate, Property, is_matcher_type
from matchergen.core.models.config import GeneratorConfig, NamingConfig
from matchergen.core.models.naming import NamingDecision
from matchergen.core.models.outcome import GenerationFailure, GenerationOutcome
from matchergen.core.models.template import GeneratedArtifact, MatcherSource

__all__ = [
    # candidate.py
    "Candidate",
    "Property",
    "is_matcher_type",
    # config.py
    "GeneratorConfig",
    "NamingConfig",
    # naming.py
    "NamingDecision",
    # outcome.py
    "GenerationFailure",
    "GenerationOutcome",
    # template.py
    "GeneratedArtifact",
    "MatcherSource",
]

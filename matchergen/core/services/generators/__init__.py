"""
Matcher generators — IR, annotation rendering, text backends and the
matcher class generator itself.
"""

from matchergen.core.services.generators.annotations import ImportTable, render_annotation
from matchergen.core.services.generators.matcher_class import (
    MatcherClassGenerator,
    OutputClaims,
    snake_case,
)
from matchergen.core.services.generators.render import AstSourceRenderer, SourceRenderer

__all__ = [
    "AstSourceRenderer",
    "ImportTable",
    "MatcherClassGenerator",
    "OutputClaims",
    "SourceRenderer",
    "render_annotation",
    "snake_case",
]

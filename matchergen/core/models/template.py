"""
Generated file models — the synthesized source and the loaded artifact.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MatcherSource(BaseModel):
    """A matcher module produced by the generate phase.

    Written once by the generator and never mutated afterwards.

    Attributes:
        candidate:   Identity of the candidate the matcher is for.
        module_name: Dotted module name the file is loaded under.
        type_name:   Name of the generated matcher class.
        path:        Absolute path of the written file.
        content:     Full module source.
    """

    model_config = ConfigDict(frozen=True)

    candidate: str
    module_name: str
    type_name: str
    path: Path
    content: str


class GeneratedArtifact(BaseModel):
    """A compiled and loaded matcher class."""

    model_config = ConfigDict(frozen=True)

    candidate: str
    module_name: str
    source_path: Path
    matcher_type: type[Any] = Field(exclude=True)

    @property
    def type_name(self) -> str:
        return self.matcher_type.__name__

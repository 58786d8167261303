"""
Candidate and Property models — what the pipeline generates matchers for.

A Candidate is a class under consideration together with the structural
flags the eligibility filter needs. A Property is one readable attribute
of a candidate, discovered from its accessor-shaped members.
"""

from __future__ import annotations

import typing
from typing import Any, Literal

from hamcrest.core.matcher import Matcher
from pydantic import BaseModel, ConfigDict, Field


class Candidate(BaseModel):
    """A class considered for matcher generation.

    Candidates are immutable; they are produced by the finder and
    consumed by the filter and the generator.
    """

    model_config = ConfigDict(frozen=True)

    bean_type: type[Any]
    qualified_name: str             # module.QualName, the candidate identity
    module: str                     # module the class is declared in
    package: str = ""               # "" means top-level (default package)
    simple_name: str

    is_interface: bool = False
    is_abstract: bool = False
    is_annotation: bool = False
    is_enum: bool = False
    is_synthetic: bool = False
    has_default_constructor: bool = True
    is_generated: bool = False

    @property
    def qualname(self) -> str:
        """Qualified name of the class inside its module."""
        return self.qualified_name[len(self.module) + 1:]

    def __str__(self) -> str:
        return self.qualified_name


class Property(BaseModel):
    """One readable property of a candidate."""

    model_config = ConfigDict(frozen=True)

    name: str
    value_type: Any = Field(default=Any)
    accessor: str                   # e.g. "Person.get_age"
    kind: Literal["field", "property", "getter"] = "getter"
    writable: bool = False

    @property
    def is_matcher(self) -> bool:
        """Whether the property itself holds a matcher."""
        return is_matcher_type(self.value_type)


def is_matcher_type(value_type: Any) -> bool:
    """Return True when *value_type* is ``Matcher`` or ``Matcher[...]``."""
    origin = typing.get_origin(value_type) or value_type
    return isinstance(origin, type) and issubclass(origin, Matcher)

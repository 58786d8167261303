"""
Generated-type marker.

Generated matcher classes are decorated with ``@generated(...)`` which
records the generator and the originating candidate on the class. The
eligibility filter uses the marker to skip matchergen's own output when
an output package is scanned again.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

GENERATOR_NAME = "matchergen"
MARKER_ATTRIBUTE = "__matchergen_generated__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class GeneratedMarker:
    """Traceability record attached to a generated class."""

    generator: str
    based_on: str


def generated(generator: str, based_on: str) -> Callable[[T], T]:
    """Class decorator tagging a class as machine-generated."""

    def decorate(cls: T) -> T:
        setattr(cls, MARKER_ATTRIBUTE, GeneratedMarker(generator=generator, based_on=based_on))
        return cls

    return decorate


def generated_marker(cls: type) -> GeneratedMarker | None:
    """Return the marker declared directly on *cls* (not inherited)."""
    marker = cls.__dict__.get(MARKER_ATTRIBUTE)
    return marker if isinstance(marker, GeneratedMarker) else None


def is_generated(cls: type, generator: str = GENERATOR_NAME) -> bool:
    """Whether *cls* was generated by *generator*."""
    marker = generated_marker(cls)
    return marker is not None and marker.generator == generator

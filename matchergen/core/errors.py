"""
Error kinds raised by the generation pipeline.

Candidate-scoped errors (naming, persistence, compilation of one file)
are caught by the engine and turned into failed outcomes. Batch-scoped
errors (nothing resolvable, nothing loadable) propagate to the caller.
"""

from __future__ import annotations


class MatcherGenerationError(Exception):
    """Base class for every pipeline error.

    Attributes:
        candidate: Identity of the candidate (or input name) the error
            belongs to. ``None`` for batch-scoped errors.
        kind: Short machine-readable error kind used in reports.
    """

    kind = "generation"

    def __init__(self, message: str, candidate: str | None = None):
        super().__init__(message)
        self.candidate = candidate


class UnresolvedInputError(MatcherGenerationError):
    """An input names neither an importable module nor a class."""

    kind = "unresolved_input"


class NamingError(MatcherGenerationError):
    """A naming strategy could not derive a valid target identifier."""

    kind = "naming"


class GenerationIOError(MatcherGenerationError):
    """Persisting a synthesized matcher module failed."""

    kind = "generation_io"


class OutputCollisionError(GenerationIOError):
    """Another candidate of the same batch already claimed the output path."""

    kind = "output_collision"


class CompileError(MatcherGenerationError):
    """A generated module failed to compile or load.

    Generated sources are valid by construction, so this always points
    at a generator defect or a broken candidate import.
    """

    kind = "compile"


class BatchError(MatcherGenerationError):
    """The batch as a whole cannot proceed."""

    kind = "batch"

"""
Compiler/loader — byte-compile generated modules and load their classes.

Generated sources are valid by construction, so any failure here is an
integrity violation: it is logged at ERROR and recorded as a failure,
but isolated to the one file that broke.
"""

from __future__ import annotations

import importlib.util
import logging
import py_compile
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from types import ModuleType

from matchergen.core.errors import CompileError
from matchergen.core.models import GeneratedArtifact, GenerationFailure, MatcherSource

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Loaded artifacts and per-file failures of one COMPILE_LOAD step."""

    artifacts: list[GeneratedArtifact] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)


class MatcherLoader:
    """Compiles and imports generated matcher modules."""

    def load(self, sources: Iterable[MatcherSource]) -> LoadResult:
        result = LoadResult()
        for source in sources:
            try:
                artifact = self.load_one(source)
            except CompileError as e:
                logger.error(
                    "Integrity violation: matcher for %s failed to compile or load: %s",
                    source.candidate,
                    e.__cause__ or e,
                )
                result.failures.append(GenerationFailure.from_error(e, stage="compile_load"))
                continue
            result.artifacts.append(artifact)
            logger.debug("Loaded %s from %s", source.module_name, source.path)
        return result

    def load_one(self, source: MatcherSource) -> GeneratedArtifact:
        """Compile, import and return the matcher class of *source*.

        Raises:
            CompileError: If any step fails.
        """
        self.compile(source)
        module = self._import(source)

        matcher_type = getattr(module, source.type_name, None)
        if not isinstance(matcher_type, type):
            raise CompileError(
                f"{source.module_name} does not define class {source.type_name}",
                candidate=source.candidate,
            )
        return GeneratedArtifact(
            candidate=source.candidate,
            module_name=source.module_name,
            source_path=source.path,
            matcher_type=matcher_type,
        )

    def compile(self, source: MatcherSource) -> None:
        try:
            py_compile.compile(str(source.path), doraise=True)
        except (py_compile.PyCompileError, OSError) as e:
            raise CompileError(
                f"compiling {source.path} failed",
                candidate=source.candidate,
            ) from e

    def _import(self, source: MatcherSource) -> ModuleType:
        spec = importlib.util.spec_from_file_location(source.module_name, source.path)
        if spec is None or spec.loader is None:
            raise CompileError(
                f"no loader for {source.path}",
                candidate=source.candidate,
            )

        module = importlib.util.module_from_spec(spec)
        previous = sys.modules.get(source.module_name)
        sys.modules[source.module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            if previous is None:
                sys.modules.pop(source.module_name, None)
            else:
                sys.modules[source.module_name] = previous
            raise CompileError(
                f"importing {source.module_name} failed",
                candidate=source.candidate,
            ) from e
        return module

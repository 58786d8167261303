"""
Candidate finder — resolve module and class names into candidates.

Each input is either a dotted module/package name, in which case every
class declared in it becomes a candidate, or a fully-qualified class
name (``shop.models.Person``, nested classes allowed). Either way the
public classes nested in a found class are candidates too. Names that
cannot be resolved are reported one by one and never abort the whole
lookup.
"""

from __future__ import annotations

import enum
import importlib
import inspect
import logging
import pkgutil
import sys
import typing
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

from matchergen.core.errors import UnresolvedInputError
from matchergen.core.models import Candidate
from matchergen.runtime.markers import is_generated

logger = logging.getLogger(__name__)

_MISSING = object()


# ── Candidate description ───────────────────────────────────────


def candidate_for(cls: type) -> Candidate:
    """Describe *cls* as a Candidate, computing its structural flags."""
    return Candidate(
        bean_type=cls,
        qualified_name=f"{cls.__module__}.{cls.__qualname__}",
        module=cls.__module__,
        package=_package_of(cls),
        simple_name=cls.__name__,
        is_interface=bool(getattr(cls, "_is_protocol", False)),
        is_abstract=inspect.isabstract(cls),
        is_annotation=typing.is_typeddict(cls),
        is_enum=issubclass(cls, enum.Enum),
        is_synthetic=_is_synthetic(cls),
        has_default_constructor=_has_default_constructor(cls),
        is_generated=is_generated(cls),
    )


def _package_of(cls: type) -> str:
    module = sys.modules.get(cls.__module__)
    package = getattr(module, "__package__", None)
    if package is None:
        package = cls.__module__.rpartition(".")[0]
    return package


def _is_synthetic(cls: type) -> bool:
    qualname = cls.__qualname__
    if "<locals>" in qualname:
        return True
    return not all(part.isidentifier() for part in qualname.split("."))


def _has_default_constructor(cls: type) -> bool:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if parameter.default is parameter.empty:
            return False
    return True


# ── Finder ──────────────────────────────────────────────────────


@dataclass
class DiscoveryResult:
    """Candidates found for a set of inputs, plus per-input errors."""

    candidates: list[Candidate] = field(default_factory=list)
    unresolved: list[UnresolvedInputError] = field(default_factory=list)
    resolved_inputs: list[str] = field(default_factory=list)

    @property
    def resolved_any(self) -> bool:
        return bool(self.resolved_inputs)


class CandidateFinder:
    """Resolve input names to candidate classes.

    Args:
        search_paths: Extra import roots, prepended to ``sys.path``.
        include_private: Also consider classes and submodules whose name
            starts with an underscore.
    """

    def __init__(
        self,
        search_paths: Sequence[Path | str] = (),
        include_private: bool = False,
    ):
        self._search_paths = [Path(p) for p in search_paths]
        self._include_private = include_private

    def find(self, names: Iterable[str]) -> DiscoveryResult:
        """Expand *names* into a duplicate-free list of candidates."""
        self._ensure_search_paths()
        importlib.invalidate_caches()

        result = DiscoveryResult()
        seen: set[str] = set()
        for raw_name in names:
            name = raw_name.strip()
            try:
                classes = self._resolve(name, result)
            except UnresolvedInputError as e:
                logger.warning("Skipping input '%s': %s", name, e)
                result.unresolved.append(e)
                continue

            result.resolved_inputs.append(name)
            for cls in classes:
                candidate = candidate_for(cls)
                if candidate.qualified_name in seen:
                    continue
                seen.add(candidate.qualified_name)
                result.candidates.append(candidate)

        logger.info(
            "Found %d candidate(s) for %d input(s)",
            len(result.candidates),
            len(result.resolved_inputs),
        )
        return result

    def _ensure_search_paths(self) -> None:
        for path in reversed(self._search_paths):
            entry = str(path.resolve())
            if entry not in sys.path:
                sys.path.insert(0, entry)
                logger.debug("Added import root %s", entry)

    def _resolve(self, name: str, result: DiscoveryResult) -> list[type]:
        if not name or not all(part.isidentifier() for part in name.split(".")):
            raise UnresolvedInputError(f"'{name}' is not a dotted Python name", candidate=name)

        module = self._import(name, requested=name)
        if module is not None:
            return self._classes_in(module, result)
        return self._with_nested(self._resolve_class(name))

    def _import(self, module_name: str, requested: str) -> ModuleType | None:
        """Import *module_name*, returning None if no such module exists."""
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            missing = e.name or ""
            if module_name == missing or module_name.startswith(missing + "."):
                return None
            raise UnresolvedInputError(
                f"importing '{module_name}' failed: {e}", candidate=requested
            ) from e
        except Exception as e:
            # Import-time errors raised by the user's own module
            raise UnresolvedInputError(
                f"importing '{module_name}' failed: {e}", candidate=requested
            ) from e

    def _resolve_class(self, name: str) -> type:
        parts = name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            module = self._import(module_name, requested=name)
            if module is None:
                continue

            obj: object = module
            for attr in parts[split:]:
                obj = getattr(obj, attr, _MISSING)
                if obj is _MISSING:
                    raise UnresolvedInputError(
                        f"module '{module_name}' has no attribute '{'.'.join(parts[split:])}'",
                        candidate=name,
                    )
            if not inspect.isclass(obj):
                raise UnresolvedInputError(f"'{name}' is not a class", candidate=name)
            return obj

        raise UnresolvedInputError(f"'{name}' names neither a module nor a class", candidate=name)

    def _classes_in(self, module: ModuleType, result: DiscoveryResult) -> list[type]:
        classes = self._declared_classes(module)
        if not hasattr(module, "__path__"):
            return classes

        # Packages: direct submodules only, subpackages are not descended into
        for info in pkgutil.iter_modules(module.__path__):
            if info.ispkg or (info.name.startswith("_") and not self._include_private):
                continue
            sub_name = f"{module.__name__}.{info.name}"
            try:
                submodule = importlib.import_module(sub_name)
            except Exception as e:
                error = UnresolvedInputError(
                    f"importing '{sub_name}' failed: {e}", candidate=sub_name
                )
                logger.warning("Skipping module '%s': %s", sub_name, e)
                result.unresolved.append(error)
                continue
            classes.extend(self._declared_classes(submodule))
        return classes

    def _declared_classes(self, module: ModuleType) -> list[type]:
        classes: list[type] = []
        for name, obj in vars(module).items():
            if (
                inspect.isclass(obj)
                and obj.__module__ == module.__name__
                and self._is_visible(name)
            ):
                classes.extend(self._with_nested(obj))
        return classes

    def _with_nested(self, cls: type) -> list[type]:
        """*cls* followed by its nested classes, depth first."""
        classes = [cls]
        for name, obj in vars(cls).items():
            # Only classes defined in this body, not aliases of outer ones
            if (
                inspect.isclass(obj)
                and obj.__module__ == cls.__module__
                and obj.__qualname__ == f"{cls.__qualname__}.{name}"
            ):
                if self._is_visible(name):
                    classes.extend(self._with_nested(obj))
                else:
                    logger.debug("Skipping private nested class %s.%s", cls.__qualname__, name)
        return classes

    def _is_visible(self, name: str) -> bool:
        return self._include_private or not name.startswith("_")

"""
Naming strategies — where a candidate's matcher goes and what it is called.

A strategy is a pure function from Candidate to NamingDecision. The
default places the matcher in the namespace of the candidate's own
module (``shop.models.Person`` becomes ``shop.models.PersonMatcher``),
since a module is where Python keeps class names unique. Nested classes
are named after their full qualified name (``Outer.Inner`` becomes
``OuterInnerMatcher``). Strategies are looked up by name from
configuration through ``NAMING_STRATEGIES``.
"""

from __future__ import annotations

import keyword
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from matchergen.core.errors import NamingError
from matchergen.core.models import Candidate, NamingDecision

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = "Matcher"
DEFAULT_SUB_PACKAGE = "matchers"


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


class NamingStrategy(ABC):
    """Maps a candidate to its target package and matcher type name."""

    @abstractmethod
    def package_for(self, candidate: Candidate) -> str:
        """Dotted target package, or "" for the default package."""

    @abstractmethod
    def type_name_for(self, candidate: Candidate) -> str:
        """Name of the generated matcher class."""

    def decide(self, candidate: Candidate) -> NamingDecision:
        """Resolve and validate the naming decision for *candidate*.

        Raises:
            NamingError: If the policy fails or yields an invalid name.
        """
        identity = candidate.qualified_name
        try:
            package = self.package_for(candidate)
            type_name = self.type_name_for(candidate)
        except NamingError:
            raise
        except Exception as e:
            raise NamingError(f"naming policy failed for {identity}", candidate=identity) from e

        if not type_name or not _is_identifier(type_name):
            raise NamingError(
                f"no valid matcher type name for {identity} (got {type_name!r})",
                candidate=identity,
            )
        if package and not all(_is_identifier(part) for part in package.split(".")):
            raise NamingError(
                f"invalid target package {package!r} for {identity}",
                candidate=identity,
            )
        return NamingDecision(package=package, type_name=type_name)


class SamePackageNamingStrategy(NamingStrategy):
    """Matcher lives beside the candidate, in its module's namespace.

    Args:
        suffix: Appended to the candidate's name.
        strip_suffixes: Tokens removed from the end of the name first
            (e.g. ``"Dto"`` turns ``PersonDto`` into ``PersonMatcher``).
    """

    def __init__(self, suffix: str = DEFAULT_SUFFIX, strip_suffixes: Sequence[str] = ()):
        self.suffix = suffix
        self.strip_suffixes = tuple(strip_suffixes)

    def package_for(self, candidate: Candidate) -> str:
        return candidate.module

    def type_name_for(self, candidate: Candidate) -> str:
        base = "".join(candidate.qualname.split("."))
        for token in self.strip_suffixes:
            if token and base.endswith(token):
                base = base[: -len(token)]
                break
        if not base:
            return ""
        return f"{base}{self.suffix}"


class SubPackageNamingStrategy(SamePackageNamingStrategy):
    """Matcher lives in a dedicated sub-package below the candidate's module."""

    def __init__(
        self,
        sub_package: str = DEFAULT_SUB_PACKAGE,
        suffix: str = DEFAULT_SUFFIX,
        strip_suffixes: Sequence[str] = (),
    ):
        super().__init__(suffix=suffix, strip_suffixes=strip_suffixes)
        self.sub_package = sub_package

    def package_for(self, candidate: Candidate) -> str:
        if candidate.module:
            return f"{candidate.module}.{self.sub_package}"
        return self.sub_package


NAMING_STRATEGIES: dict[str, type[SamePackageNamingStrategy]] = {
    "same-package": SamePackageNamingStrategy,
    "sub-package": SubPackageNamingStrategy,
}


def naming_strategy_from_config(
    strategy: str = "same-package",
    suffix: str = DEFAULT_SUFFIX,
    sub_package: str = DEFAULT_SUB_PACKAGE,
    strip_suffixes: Sequence[str] = (),
) -> NamingStrategy:
    """Build a registered naming strategy by name.

    Raises:
        ValueError: If *strategy* is not registered.
    """
    if strategy not in NAMING_STRATEGIES:
        known = ", ".join(sorted(NAMING_STRATEGIES))
        raise ValueError(f"Unknown naming strategy '{strategy}' (known: {known})")
    if strategy == "sub-package":
        return SubPackageNamingStrategy(
            sub_package=sub_package, suffix=suffix, strip_suffixes=strip_suffixes
        )
    return NAMING_STRATEGIES[strategy](suffix=suffix, strip_suffixes=strip_suffixes)

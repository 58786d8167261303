"""
Matcher IR — declarative description of a generated matcher module.

The generator assembles these frozen nodes; a SourceRenderer turns them
into text. Nothing here knows about a concrete text backend.

Type annotations are carried as source strings (``"Matcher[str]"``)
already resolved against the module's import table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union


# ── Imports ─────────────────────────────────────────────────────


@dataclass(frozen=True, order=True)
class Import:
    """``from <module> import <name> [as <alias>]``."""

    module: str
    name: str
    alias: str | None = None

    @property
    def local_name(self) -> str:
        return self.alias or self.name


# ── Expressions ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Name:
    id: str


@dataclass(frozen=True)
class Attr:
    value: Expr
    attr: str


@dataclass(frozen=True)
class Const:
    value: Any


@dataclass(frozen=True)
class Call:
    func: Expr
    args: tuple[Expr, ...] = ()
    keywords: tuple[tuple[str, Expr], ...] = ()


Expr = Union[Name, Attr, Const, Call]


def self_attr(attr: str) -> Attr:
    """``self.<attr>``."""
    return Attr(Name("self"), attr)


# ── Statements ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Assign:
    target: Expr
    value: Expr


@dataclass(frozen=True)
class Return:
    value: Expr


@dataclass(frozen=True)
class Evaluate:
    """An expression statement."""

    value: Expr


Statement = Union[Assign, Return, Evaluate]


# ── Definitions ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: str | None = None


@dataclass(frozen=True)
class Signature:
    """Parameters after the implicit ``self`` of instance methods."""

    parameters: tuple[Parameter, ...] = ()
    returns: str | None = None
    positional_only: bool = False


MethodKind = Literal["instance", "static"]
MethodRole = Literal["constructor", "property", "factory", "delegate"]


@dataclass(frozen=True)
class MethodSpec:
    """One method of the generated class.

    ``overloads`` holds the public signatures of an overloaded method;
    ``signature`` is then the signature of the single implementation.
    """

    name: str
    signature: Signature
    body: tuple[Statement, ...]
    kind: MethodKind = "instance"
    role: MethodRole = "property"
    docstring: str | None = None
    overloads: tuple[Signature, ...] = ()
    overload_marker: str = "overload"

    @property
    def public_signatures(self) -> tuple[Signature, ...]:
        return self.overloads or (self.signature,)


@dataclass(frozen=True)
class ClassSpec:
    name: str
    bases: tuple[str, ...] = ()
    decorators: tuple[Expr, ...] = ()
    docstring: str | None = None
    methods: tuple[MethodSpec, ...] = ()

    def methods_with_role(self, role: MethodRole) -> tuple[MethodSpec, ...]:
        return tuple(m for m in self.methods if m.role == role)

    def api_signatures(self) -> int:
        """Count of public signatures beyond the constructor and delegates.

        One per matcher-valued property, two per other property, plus
        the static factory.
        """
        return sum(
            len(m.public_signatures)
            for m in self.methods
            if m.role in ("property", "factory")
        )


@dataclass(frozen=True)
class ModuleSpec:
    header: tuple[str, ...] = ()
    docstring: str | None = None
    imports: tuple[Import, ...] = ()
    classes: tuple[ClassSpec, ...] = field(default_factory=tuple)
    future_annotations: bool = True

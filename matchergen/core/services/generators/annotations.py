"""
Annotation rendering — runtime type objects to source text.

Classes are imported by name through an ImportTable, which hands out a
unique local name per (module, name) pair and aliases clashes
(``Name_1``, ``Name_2``, ...). Anything that cannot be named from a
generated module (local classes, type variables, forward references,
unresolved string annotations) renders as ``Any``.
"""

from __future__ import annotations

import builtins
import sys
import types
import typing
from typing import Any

from matchergen.core.services.generators.ir import Import

_NONE_TYPE = type(None)


class ImportTable:
    """Import bookkeeping for one generated module.

    Args:
        reserved: Local names that must never be bound by an import
            (e.g. the generated class name).
    """

    def __init__(self, reserved: typing.Iterable[str] = ()):
        self._local: dict[tuple[str, str], str] = {}
        self._taken: set[str] = set(reserved)

    def name_for(self, module: str, name: str) -> str:
        """Local name bound to ``module.name``, importing it if needed."""
        key = (module, name)
        if key in self._local:
            return self._local[key]

        local = name
        counter = 0
        while local in self._taken or hasattr(builtins, local):
            counter += 1
            local = f"{name}_{counter}"
        self._taken.add(local)
        self._local[key] = local
        return local

    def imports(self) -> tuple[Import, ...]:
        """All imports, sorted for deterministic output."""
        return tuple(
            sorted(
                Import(module=module, name=name, alias=None if local == name else local)
                for (module, name), local in self._local.items()
            )
        )

    def __contains__(self, local_name: str) -> bool:
        return local_name in self._taken


def render_annotation(value_type: Any, table: ImportTable) -> str:
    """Render *value_type* as annotation source, registering imports."""
    if value_type is Any:
        return table.name_for("typing", "Any")
    if value_type is None or value_type is _NONE_TYPE:
        return "None"
    if value_type is Ellipsis:
        return "..."
    if isinstance(value_type, list):
        return "[" + ", ".join(render_annotation(v, table) for v in value_type) + "]"
    if isinstance(value_type, (str, typing.ForwardRef, typing.TypeVar)):
        return table.name_for("typing", "Any")

    origin = typing.get_origin(value_type)
    args = typing.get_args(value_type)

    if origin is typing.Annotated:
        return render_annotation(args[0], table)
    if origin is typing.Union or origin is types.UnionType:
        return " | ".join(render_annotation(arg, table) for arg in args)
    if origin is typing.Literal:
        literal = table.name_for("typing", "Literal")
        return f"{literal}[{', '.join(repr(arg) for arg in args)}]"
    if origin is not None:
        if not _is_nameable(origin):
            return table.name_for("typing", "Any")
        base = render_class(origin, table)
        if not args:
            return base
        return f"{base}[{', '.join(render_annotation(arg, table) for arg in args)}]"
    return render_class(value_type, table)


def render_class(cls: Any, table: ImportTable) -> str:
    """Render a class reference, importing its top-level name."""
    if not _is_nameable(cls):
        return table.name_for("typing", "Any")
    if cls.__module__ == "builtins":
        return cls.__qualname__

    top, _, rest = cls.__qualname__.partition(".")
    local = table.name_for(cls.__module__, top)
    return f"{local}.{rest}" if rest else local


def _is_nameable(cls: Any) -> bool:
    if not isinstance(cls, type):
        return False
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", "")
    if module == "builtins":
        return True
    return bool(module) and "<locals>" not in qualname and _importable(module, qualname)


def _importable(module: str, qualname: str) -> bool:
    """Whether ``from <module> import <top>`` would bind the class."""
    loaded = sys.modules.get(module)
    if loaded is None:
        return False
    obj: Any = loaded
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return False
    return True

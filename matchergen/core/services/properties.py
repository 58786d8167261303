"""
Property extractor — turn a candidate class into its readable properties.

A property is discovered from an accessor-shaped member:

    - annotated class attributes (dataclass, pydantic and plain fields)
    - ``property`` / ``functools.cached_property`` descriptors
    - argument-free getters ``get_x()`` / ``getX()``
    - argument-free boolean getters ``is_x()`` / ``isX()``

Setters (``set_x(value)`` / ``setX(value)``) only mark a property as
writable. When a setter's value type disagrees with the getter's return
type, the getter wins and the setter is ignored.

The class itself is scanned first, then its bases in MRO order; the
first accessor found for a name wins. Within one class the annotated
fields come first, in annotation order, followed by the accessor members
in definition order. A field without a value has no slot in the class
namespace, so its place among the methods is not known here. Extraction
does no I/O and never raises: unresolvable annotations degrade to the
raw annotation or Any.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
import re
import typing
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from matchergen.core.models import Candidate, Property

logger = logging.getLogger(__name__)

# Bases whose members never contribute properties
DEFAULT_STOP_TYPES: tuple[type, ...] = (object, typing.Generic, typing.Protocol, BaseModel)

_SNAKE_ACCESSOR = re.compile(r"^(get|is|set)_([a-z_]\w*)$")
_CAMEL_ACCESSOR = re.compile(r"^(get|is|set)([A-Z]\w*)$")
_NONE_TYPE = type(None)
_UNANNOTATED = object()


class PropertyExtractor(ABC):
    """Produces the ordered property list of a candidate."""

    @abstractmethod
    def properties_of(self, candidate: Candidate) -> list[Property]:
        """Return the properties of *candidate*, names unique, order stable."""


class BeanPropertyExtractor(PropertyExtractor):
    """Default extractor following the accessor conventions above.

    Args:
        stop_types: Base classes that are not scanned for accessors.
    """

    def __init__(self, stop_types: Sequence[type] = DEFAULT_STOP_TYPES):
        self._stop_types = tuple(stop_types)

    def properties_of(self, candidate: Candidate) -> list[Property]:
        found: dict[str, Property] = {}
        setters: dict[str, tuple[Any, str]] = {}

        for klass in candidate.bean_type.__mro__:
            if klass in self._stop_types:
                continue
            for prop in self._fields_of(klass):
                found.setdefault(prop.name, prop)
            self._scan_members(klass, found, setters)

        return [self._apply_setter(prop, setters.get(prop.name)) for prop in found.values()]

    # ── Fields ──────────────────────────────────────────────────

    def _fields_of(self, klass: type) -> list[Property]:
        params = getattr(klass, "__dataclass_params__", None)
        writable = not (params is not None and params.frozen)

        fields = []
        for name, value_type in _own_annotations(klass).items():
            if name.startswith("_"):
                continue
            if _is_class_level(value_type):
                continue
            fields.append(
                Property(
                    name=name,
                    value_type=value_type,
                    accessor=f"{klass.__qualname__}.{name}",
                    kind="field",
                    writable=writable,
                )
            )
        return fields

    # ── Accessor methods and descriptors ────────────────────────

    def _scan_members(
        self,
        klass: type,
        found: dict[str, Property],
        setters: dict[str, tuple[Any, str]],
    ) -> None:
        for attr, member in vars(klass).items():
            if attr.startswith("_") or isinstance(member, (staticmethod, classmethod)):
                continue
            accessor = f"{klass.__qualname__}.{attr}"

            if isinstance(member, (property, functools.cached_property)):
                fget = member.fget if isinstance(member, property) else member.func
                if fget is None:
                    continue
                found.setdefault(
                    attr,
                    Property(
                        name=attr,
                        value_type=_annotation_or_any(_return_type(fget)),
                        accessor=accessor,
                        kind="property",
                        writable=isinstance(member, property) and member.fset is not None,
                    ),
                )
                continue

            if not inspect.isfunction(member):
                continue
            parsed = _parse_accessor_name(attr)
            if parsed is None:
                continue
            prefix, name = parsed

            if prefix == "set":
                if _required_arity(member) == 2:
                    setters.setdefault(name, (_setter_value_type(member), accessor))
                continue

            if _required_arity(member) != 1:
                continue
            return_type = _return_type(member)
            if return_type is _NONE_TYPE or return_type is None:
                continue
            if prefix == "is":
                if return_type is not _UNANNOTATED and return_type is not bool:
                    continue
                return_type = bool
            found.setdefault(
                name,
                Property(
                    name=name,
                    value_type=_annotation_or_any(return_type),
                    accessor=accessor,
                    kind="getter",
                ),
            )

    def _apply_setter(self, prop: Property, setter: tuple[Any, str] | None) -> Property:
        if setter is None or prop.writable:
            return prop
        setter_type, accessor = setter
        if setter_type in (Any, _UNANNOTATED) or prop.value_type is Any or setter_type == prop.value_type:
            return prop.model_copy(update={"writable": True})
        logger.debug(
            "Ignoring setter %s: value type %r does not match getter type %r",
            accessor,
            setter_type,
            prop.value_type,
        )
        return prop


# ── Helpers ─────────────────────────────────────────────────────


def _parse_accessor_name(attr: str) -> tuple[str, str] | None:
    """Split an accessor name into (prefix, property name)."""
    match = _SNAKE_ACCESSOR.match(attr)
    if match:
        return match.group(1), match.group(2)
    match = _CAMEL_ACCESSOR.match(attr)
    if match:
        rest = match.group(2)
        return match.group(1), rest[0].lower() + rest[1:]
    return None


def _own_annotations(klass: type) -> dict[str, Any]:
    """Annotations declared on *klass* itself, evaluated where possible."""
    try:
        return inspect.get_annotations(klass, eval_str=True)
    except Exception:
        logger.debug("Unresolvable annotations on %s, using raw annotations", klass.__qualname__)
    try:
        return dict(inspect.get_annotations(klass))
    except Exception:
        return {}


def _type_hints(obj: Any) -> dict[str, Any]:
    """Resolved annotations of *obj*, falling back to the raw ones."""
    try:
        return typing.get_type_hints(obj)
    except Exception:
        logger.debug("Unresolvable annotations on %r, using raw annotations", obj)
    try:
        return dict(inspect.get_annotations(obj))
    except Exception:
        return {}


def _return_type(func: Callable[..., Any]) -> Any:
    return _type_hints(func).get("return", _UNANNOTATED)


def _setter_value_type(func: Callable[..., Any]) -> Any:
    parameters = list(inspect.signature(func).parameters)
    return _type_hints(func).get(parameters[1], _UNANNOTATED)


def _annotation_or_any(value_type: Any) -> Any:
    return Any if value_type is _UNANNOTATED else value_type


def _required_arity(func: Callable[..., Any]) -> int:
    """Number of required positional parameters, ``self`` included."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return -1
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    return sum(
        1
        for p in signature.parameters.values()
        if p.kind in positional and p.default is p.empty
    )


def _is_class_level(value_type: Any) -> bool:
    if typing.get_origin(value_type) is typing.ClassVar or value_type is typing.ClassVar:
        return True
    if isinstance(value_type, dataclasses.InitVar):
        return True
    if isinstance(value_type, str):
        return value_type.startswith(("ClassVar", "typing.ClassVar", "InitVar"))
    return False

"""
BeanPropertyMatcher — the composite every generated matcher delegates to.

Holds one matcher per property name and evaluates all of them against
an instance of the bean type. Property values are read through the same
accessor conventions the extractor recognises: plain attributes and
properties first, then ``get_x``/``is_x``/``getX``/``isX`` methods.
"""

from __future__ import annotations

import inspect
from typing import Any, TypeVar

from hamcrest.core.base_matcher import BaseMatcher
from hamcrest.core.description import Description
from hamcrest.core.matcher import Matcher

T = TypeVar("T")

_MISSING = object()


class UnreadablePropertyError(AttributeError):
    """The bean has neither an attribute nor an accessor for a property."""


def _accessor_names(name: str) -> list[str]:
    capitalized = name[:1].upper() + name[1:]
    return [f"get_{name}", f"is_{name}", f"get{capitalized}", f"is{capitalized}"]


def _member(item: Any, name: str) -> Any:
    """Value of the member *name* of *item*, or _MISSING if it has none.

    Only the existence check is guarded: an AttributeError raised inside
    a property getter propagates.
    """
    declared = inspect.getattr_static(type(item), name, _MISSING)
    if declared is _MISSING:
        instance_dict = getattr(item, "__dict__", None)
        if not isinstance(instance_dict, dict) or name not in instance_dict:
            return _MISSING
    elif inspect.ismemberdescriptor(declared):
        # Unset __slots__ entry
        return getattr(item, name, _MISSING)
    return getattr(item, name)


def read_property(item: Any, name: str) -> Any:
    """Read the property *name* of *item*.

    Raises:
        UnreadablePropertyError: If neither an attribute nor an accessor exists.
    """
    value = _member(item, name)
    if value is not _MISSING and not inspect.ismethod(value):
        return value
    for accessor in _accessor_names(name):
        method = _member(item, accessor)
        if callable(method):
            return method()
    raise UnreadablePropertyError(f"{type(item).__qualname__!r} has no readable property {name!r}")


class BeanPropertyMatcher(BaseMatcher[T]):
    """Matches instances of *bean_type* whose properties satisfy all
    registered matchers.

    Registering a second matcher for the same property replaces the first.
    """

    def __init__(self, bean_type: type[T]) -> None:
        self._bean_type = bean_type
        self._matchers: dict[str, Matcher[Any]] = {}

    @property
    def bean_type(self) -> type[T]:
        return self._bean_type

    @property
    def property_matchers(self) -> dict[str, Matcher[Any]]:
        """Registered matchers by property name, in registration order."""
        return dict(self._matchers)

    def with_property(self, name: str, matcher: Matcher[Any]) -> BeanPropertyMatcher[T]:
        """Register *matcher* for the property *name*."""
        self._matchers[name] = matcher
        return self

    def _matches(self, item: Any) -> bool:
        if not isinstance(item, self._bean_type):
            return False
        for name, matcher in self._matchers.items():
            try:
                value = read_property(item, name)
            except UnreadablePropertyError:
                return False
            if not matcher.matches(value):
                return False
        return True

    def describe_to(self, description: Description) -> None:
        description.append_text(f"an instance of {self._bean_type.__qualname__}")
        separator = " with "
        for name, matcher in self._matchers.items():
            description.append_text(f"{separator}{name} ").append_description_of(matcher)
            separator = " and "

    def describe_mismatch(self, item: Any, mismatch_description: Description) -> None:
        if not isinstance(item, self._bean_type):
            mismatch_description.append_text("was ").append_description_of(item)
            return

        separator = ""
        for name, matcher in self._matchers.items():
            try:
                value = read_property(item, name)
            except UnreadablePropertyError:
                mismatch_description.append_text(f"{separator}{name} was not readable")
                separator = ", "
                continue
            if matcher.matches(value):
                continue
            mismatch_description.append_text(f"{separator}{name} ")
            matcher.describe_mismatch(value, mismatch_description)
            separator = ", "

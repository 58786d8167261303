"""
Tests for the property extractor.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from hamcrest.core.matcher import Matcher
from pydantic import BaseModel

from matchergen.core.services.discovery import candidate_for
from matchergen.core.services.properties import BeanPropertyExtractor


def _props(cls: type) -> dict[str, Any]:
    return {p.name: p for p in BeanPropertyExtractor().properties_of(candidate_for(cls))}


def _names(cls: type) -> list[str]:
    return [p.name for p in BeanPropertyExtractor().properties_of(candidate_for(cls))]


# ── Fixture classes ──────────────────────────────────────────────────


class Person:
    def get_name(self) -> str:
        return ""

    def set_name(self, name: str) -> None:
        pass

    def get_age(self) -> int:
        return 0

    def is_active(self) -> bool:
        return True


class JavaStyle:
    def getFirstName(self) -> str:
        return ""

    def isVerified(self) -> bool:
        return False

    def setFirstName(self, value: str) -> None:
        pass


class Mixed:
    def get_label(self) -> str:
        return ""

    count: int = 0

    @property
    def ratio(self) -> float:
        return 0.0

    weight: float


class NotAccessors:
    def get(self) -> int:
        return 0

    def get_with_arg(self, key: str) -> int:
        return 0

    def get_nothing(self) -> None:
        return None

    def is_counted(self) -> int:
        return 1

    def compute_total(self) -> int:
        return 0

    def _get_secret(self) -> str:
        return ""

    @staticmethod
    def get_static() -> int:
        return 0

    @classmethod
    def get_cls(cls) -> int:
        return 0


class Descriptors:
    @property
    def area(self) -> float:
        return 0.0

    @property
    def title(self) -> str:
        return ""

    @title.setter
    def title(self, value: str) -> None:
        pass

    @functools.cached_property
    def checksum(self) -> str:
        return ""


@dataclass
class Line:
    sku: str = ""
    quantity: int = 0
    tags: list[str] = field(default_factory=list)
    registry: ClassVar[dict] = {}
    _internal: int = 0


@dataclass(frozen=True)
class Money:
    amount: int = 0
    currency: str = "EUR"


class Base:
    def get_id(self) -> int:
        return 0

    def get_label(self) -> str:
        return ""


class Derived(Base):
    def get_label(self) -> bytes:
        return b""

    def get_extra(self) -> float:
        return 0.0


class Mismatched:
    def get_count(self) -> int:
        return 0

    def set_count(self, value: str) -> None:
        pass


class WithMatcher:
    def get_criterion(self) -> Matcher[str]:
        raise NotImplementedError


class Unresolvable:
    def get_thing(self) -> DoesNotExist:  # noqa: F821
        raise NotImplementedError


class Untyped:
    def get_value(self):
        return 1

    def is_ready(self):
        return True


class Order(BaseModel):
    number: str = ""
    total: Optional[int] = None


class Empty:
    pass


# ── Tests ────────────────────────────────────────────────────────────


class TestAccessorShapes:
    def test_getters_in_declaration_order(self):
        assert _names(Person) == ["name", "age", "active"]

    def test_getter_types(self):
        props = _props(Person)
        assert props["name"].value_type is str
        assert props["age"].value_type is int
        assert props["active"].value_type is bool
        assert props["name"].accessor == "Person.get_name"
        assert props["name"].kind == "getter"

    def test_camel_case_accessors(self):
        props = _props(JavaStyle)
        assert list(props) == ["firstName", "verified"]
        assert props["firstName"].writable

    def test_non_accessors_ignored(self):
        assert _names(NotAccessors) == []

    def test_property_descriptors(self):
        props = _props(Descriptors)
        assert list(props) == ["area", "title", "checksum"]
        assert props["area"].kind == "property"
        assert props["area"].value_type is float
        assert not props["area"].writable
        assert props["title"].writable
        assert not props["checksum"].writable

    def test_untyped_getters(self):
        props = _props(Untyped)
        assert props["value"].value_type is Any
        assert props["ready"].value_type is bool

    def test_zero_properties(self):
        assert _names(Empty) == []


class TestFields:
    def test_dataclass_fields(self):
        props = _props(Line)
        assert list(props) == ["sku", "quantity", "tags"]
        assert props["tags"].value_type == list[str]
        assert props["sku"].kind == "field"
        assert props["sku"].writable

    def test_frozen_dataclass_read_only(self):
        props = _props(Money)
        assert list(props) == ["amount", "currency"]
        assert not any(p.writable for p in props.values())

    def test_pydantic_model_fields_only(self):
        props = _props(Order)
        assert list(props) == ["number", "total"]
        assert props["total"].value_type == Optional[int]

    def test_fields_precede_accessors_within_a_class(self):
        assert _names(Mixed) == ["count", "weight", "label", "ratio"]


class TestInheritanceAndConflicts:
    def test_subclass_accessor_wins(self):
        props = _props(Derived)
        assert list(props) == ["label", "extra", "id"]
        assert props["label"].value_type is bytes
        assert props["label"].accessor == "Derived.get_label"
        assert props["id"].accessor == "Base.get_id"

    def test_setter_marks_writable(self):
        props = _props(Person)
        assert props["name"].writable
        assert not props["age"].writable

    def test_mismatched_setter_ignored(self):
        props = _props(Mismatched)
        assert props["count"].value_type is int
        assert not props["count"].writable

    def test_matcher_valued_property(self):
        props = _props(WithMatcher)
        assert props["criterion"].is_matcher

    def test_unresolvable_annotation_degrades(self):
        props = _props(Unresolvable)
        assert list(props) == ["thing"]
        assert props["thing"].value_type == "DoesNotExist"

    def test_deterministic(self):
        assert _names(Derived) == _names(Derived)

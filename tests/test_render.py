"""
Tests for the AST source renderer.
"""

import ast

from matchergen.core.services.generators import AstSourceRenderer
from matchergen.core.services.generators.ir import (
    Assign,
    Call,
    ClassSpec,
    Const,
    Evaluate,
    Import,
    MethodSpec,
    ModuleSpec,
    Name,
    Parameter,
    Return,
    Signature,
    self_attr,
)


def _module(*methods: MethodSpec, **kwargs) -> ModuleSpec:
    cls = ClassSpec(
        name="ThingMatcher",
        bases=("BaseMatcher[Thing]",),
        decorators=(Call(Name("generated"), keywords=(("based_on", Const("m.Thing")),)),),
        docstring="Matcher for m.Thing instances.",
        methods=methods,
    )
    return ModuleSpec(
        header=kwargs.pop("header", ("Generated by matchergen. Do not edit.",)),
        imports=(Import("hamcrest.core.base_matcher", "BaseMatcher"), Import("m", "Thing")),
        classes=(cls,),
        **kwargs,
    )


def _overloaded() -> MethodSpec:
    def signature(name: str, annotation: str) -> Signature:
        return Signature(
            parameters=(Parameter(name, annotation),),
            returns="ThingMatcher",
            positional_only=True,
        )

    return MethodSpec(
        name="with_size",
        signature=signature("matcher_or_value", "Matcher[int] | int"),
        overloads=(signature("matcher", "Matcher[int]"), signature("value", "int")),
        body=(
            Evaluate(Call(Name("register"), (Const("size"), Name("matcher_or_value")))),
            Return(Name("self")),
        ),
    )


def _factory() -> MethodSpec:
    return MethodSpec(
        name="is_thing",
        signature=Signature(returns="ThingMatcher"),
        body=(Return(Call(Name("ThingMatcher"))),),
        kind="static",
        role="factory",
    )


class TestAstSourceRenderer:
    def test_output_parses(self):
        source = AstSourceRenderer().render(_module(_overloaded(), _factory()))
        ast.parse(source)
        assert source.endswith("\n")

    def test_header_and_future_import(self):
        source = AstSourceRenderer().render(_module(header=("Line one", "", "Line three")))
        lines = source.splitlines()
        assert lines[:3] == ["# Line one", "#", "# Line three"]
        assert lines[3] == "from __future__ import annotations"

    def test_without_future_import(self):
        source = AstSourceRenderer().render(_module(future_annotations=False))
        assert "__future__" not in source

    def test_imports_with_alias(self):
        module = ModuleSpec(imports=(Import("shop.models", "Item", "Item_1"),))
        assert "from shop.models import Item as Item_1" in AstSourceRenderer().render(module)

    def test_class_shape(self):
        source = AstSourceRenderer().render(_module())
        assert "@generated(based_on='m.Thing')" in source
        assert "class ThingMatcher(BaseMatcher[Thing]):" in source
        assert "Matcher for m.Thing instances." in source

    def test_overloads_then_implementation(self):
        tree = ast.parse(AstSourceRenderer().render(_module(_overloaded())))
        cls = next(n for n in tree.body if isinstance(n, ast.ClassDef))
        functions = [n for n in cls.body if isinstance(n, ast.FunctionDef)]
        assert [f.name for f in functions] == ["with_size"] * 3
        assert [len(f.decorator_list) for f in functions] == [1, 1, 0]
        assert all(len(f.args.posonlyargs) == 2 for f in functions)
        assert [f.args.posonlyargs[1].arg for f in functions] == [
            "matcher", "value", "matcher_or_value",
        ]

    def test_positional_only_marker(self):
        source = AstSourceRenderer().render(_module(_overloaded()))
        assert "def with_size(self, value: int, /) -> ThingMatcher:" in source

    def test_overload_marker_alias(self):
        method = _overloaded()
        aliased = MethodSpec(
            name=method.name,
            signature=method.signature,
            body=method.body,
            overloads=method.overloads,
            overload_marker="overload_1",
        )
        assert "@overload_1" in AstSourceRenderer().render(_module(aliased))

    def test_static_method(self):
        source = AstSourceRenderer().render(_module(_factory()))
        assert "@staticmethod\n    def is_thing() -> ThingMatcher:" in source

    def test_constructor_assignment(self):
        init = MethodSpec(
            name="__init__",
            signature=Signature(returns="None"),
            body=(Assign(self_attr("_composite"), Call(Name("Composite"), (Name("Thing"),))),),
            role="constructor",
        )
        source = AstSourceRenderer().render(_module(init))
        assert "self._composite = Composite(Thing)" in source

    def test_empty_class_gets_pass(self):
        module = ModuleSpec(classes=(ClassSpec(name="Nothing"),))
        assert "class Nothing:\n    pass" in AstSourceRenderer().render(module)

    def test_deterministic(self):
        module = _module(_overloaded(), _factory())
        renderer = AstSourceRenderer()
        assert renderer.render(module) == renderer.render(module)


class TestClassSpec:
    def test_api_signatures(self):
        cls = ClassSpec(name="X", methods=(_overloaded(), _factory()))
        assert cls.api_signatures() == 3
        assert [m.name for m in cls.methods_with_role("factory")] == ["is_thing"]

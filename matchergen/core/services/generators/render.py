"""
Source renderers — turn a ModuleSpec into Python source text.

The default backend lowers the IR to the standard ``ast`` tree and lets
``ast.unparse`` do the formatting, so the output is syntactically valid
by construction. Header lines are emitted as comments ahead of the code.
"""

from __future__ import annotations

import ast
from abc import ABC, abstractmethod
from typing import Any

from matchergen.core.services.generators.ir import (
    Assign,
    Attr,
    Call,
    ClassSpec,
    Const,
    Evaluate,
    Expr,
    MethodSpec,
    ModuleSpec,
    Name,
    Return,
    Signature,
    Statement,
)


class SourceRenderer(ABC):
    """Text backend for the matcher IR."""

    @abstractmethod
    def render(self, module: ModuleSpec) -> str:
        """Return the full source of *module*, ending with a newline."""


class AstSourceRenderer(SourceRenderer):
    """Renders through ``ast.unparse``."""

    def render(self, module: ModuleSpec) -> str:
        tree = ast.Module(body=self._module_body(module), type_ignores=[])
        ast.fix_missing_locations(tree)
        code = ast.unparse(tree)

        header = "".join(f"# {line}\n" if line else "#\n" for line in module.header)
        return f"{header}{code}\n"

    # ── Module ──────────────────────────────────────────────────

    def _module_body(self, module: ModuleSpec) -> list[ast.stmt]:
        body: list[ast.stmt] = []
        if module.docstring:
            body.append(_docstring(module.docstring))
        if module.future_annotations:
            body.append(
                ast.ImportFrom(
                    module="__future__", names=[ast.alias(name="annotations")], level=0
                )
            )
        for imp in module.imports:
            body.append(
                ast.ImportFrom(
                    module=imp.module,
                    names=[ast.alias(name=imp.name, asname=imp.alias)],
                    level=0,
                )
            )
        body.extend(self._class(cls) for cls in module.classes)
        return body

    def _class(self, cls: ClassSpec) -> ast.ClassDef:
        body: list[ast.stmt] = []
        if cls.docstring:
            body.append(_docstring(cls.docstring))
        for method in cls.methods:
            body.extend(self._method(method))
        return _node(
            ast.ClassDef,
            name=cls.name,
            bases=[_annotation(base) for base in cls.bases],
            keywords=[],
            body=body or [ast.Pass()],
            decorator_list=[_expr(d) for d in cls.decorators],
        )

    # ── Methods ─────────────────────────────────────────────────

    def _method(self, method: MethodSpec) -> list[ast.stmt]:
        static = method.kind == "static"
        functions = [
            _function(
                method.name,
                signature,
                body=[ast.Expr(ast.Constant(Ellipsis))],
                decorators=[ast.Name(method.overload_marker), *_static_decorator(static)],
                static=static,
            )
            for signature in method.overloads
        ]

        body: list[ast.stmt] = []
        if method.docstring:
            body.append(_docstring(method.docstring))
        body.extend(_statement(s) for s in method.body)
        functions.append(
            _function(
                method.name,
                method.signature,
                body=body or [ast.Pass()],
                decorators=_static_decorator(static),
                static=static,
            )
        )
        return functions


# ── Lowering helpers ────────────────────────────────────────────


def _node(node_type: type[ast.AST], **fields: Any) -> Any:
    # type_params exists on definitions from Python 3.12 onwards
    if "type_params" in node_type._fields:
        fields.setdefault("type_params", [])
    return node_type(**fields)


def _static_decorator(static: bool) -> list[ast.expr]:
    return [ast.Name("staticmethod")] if static else []


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(ast.Constant(text))


def _annotation(text: str | None) -> ast.expr | None:
    if text is None:
        return None
    return ast.parse(text, mode="eval").body


def _function(
    name: str,
    signature: Signature,
    body: list[ast.stmt],
    decorators: list[ast.expr],
    static: bool,
) -> ast.FunctionDef:
    params = [ast.arg(arg=p.name, annotation=_annotation(p.annotation)) for p in signature.parameters]
    if not static:
        params.insert(0, ast.arg(arg="self", annotation=None))

    if signature.positional_only:
        posonly, regular = params, []
    else:
        posonly, regular = [], params

    arguments = ast.arguments(
        posonlyargs=posonly,
        args=regular,
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )
    return _node(
        ast.FunctionDef,
        name=name,
        args=arguments,
        body=body,
        decorator_list=decorators,
        returns=_annotation(signature.returns),
        type_comment=None,
    )


def _expr(expr: Expr) -> ast.expr:
    if isinstance(expr, Name):
        return ast.Name(expr.id)
    if isinstance(expr, Attr):
        return ast.Attribute(value=_expr(expr.value), attr=expr.attr)
    if isinstance(expr, Const):
        return ast.Constant(expr.value)
    if isinstance(expr, Call):
        return ast.Call(
            func=_expr(expr.func),
            args=[_expr(a) for a in expr.args],
            keywords=[ast.keyword(arg=k, value=_expr(v)) for k, v in expr.keywords],
        )
    raise TypeError(f"Unsupported expression node: {expr!r}")


def _statement(statement: Statement) -> ast.stmt:
    if isinstance(statement, Assign):
        return ast.Assign(targets=[_expr(statement.target)], value=_expr(statement.value))
    if isinstance(statement, Return):
        return ast.Return(_expr(statement.value))
    if isinstance(statement, Evaluate):
        return ast.Expr(_expr(statement.value))
    raise TypeError(f"Unsupported statement node: {statement!r}")

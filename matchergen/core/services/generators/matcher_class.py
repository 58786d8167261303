"""
Matcher class generator — synthesize one matcher module per candidate.

For a candidate ``shop.models.Person`` with properties ``name: str`` and
``age: int`` the default naming produces ``shop/models/PersonMatcher.py``:

    @generated(generator='matchergen', based_on='shop.models.Person')
    class PersonMatcher(BaseMatcher[Person]):
        def __init__(self) -> None: ...          # owns a BeanPropertyMatcher
        with_name(matcher) / with_name(value)    # two overloads, one impl
        with_age(matcher) / with_age(value)
        describe_to / _matches / describe_mismatch   # forward to the composite
        @staticmethod
        def is_person() -> PersonMatcher: ...

Matcher-valued properties get a single ``with_x(matcher)``. The module is
built as IR first and only then rendered, so the text backend can be
swapped without touching the shape rules here.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

from matchergen.core.errors import GenerationIOError, OutputCollisionError
from matchergen.core.models import Candidate, MatcherSource, NamingDecision, Property
from matchergen.core.services.generators.annotations import (
    ImportTable,
    render_annotation,
    render_class,
)
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
    Parameter,
    Return,
    Signature,
    self_attr,
)
from matchergen.core.services.generators.render import AstSourceRenderer, SourceRenderer
from matchergen.core.services.naming import NamingStrategy, SamePackageNamingStrategy
from matchergen.core.services.properties import BeanPropertyExtractor, PropertyExtractor
from matchergen.runtime.markers import GENERATOR_NAME

logger = logging.getLogger(__name__)

COMPOSITE_FIELD = "_bean_property_matcher"
WITH_PREFIX = "with_"
FACTORY_PREFIX = "is_"

# Parameter names used inside generated methods; never bound by imports
_LOCAL_NAMES = (
    "self",
    "matcher",
    "value",
    "matcher_or_value",
    "description",
    "item",
    "mismatch_description",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """``firstName`` → ``first_name``, ``HTTPServer`` → ``http_server``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _dotted(path: str) -> Expr:
    head, *rest = path.split(".")
    expr: Expr = Name(head)
    for attr in rest:
        expr = Attr(expr, attr)
    return expr


# ── Output claims ───────────────────────────────────────────────


class OutputClaims:
    """Output paths claimed by the candidates of one batch.

    Thread-safe. The first candidate to claim a path owns it; any other
    candidate claiming the same path gets an OutputCollisionError.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._owners: dict[Path, str] = {}

    def claim(self, path: Path, candidate: str) -> None:
        with self._lock:
            owner = self._owners.setdefault(path, candidate)
        if owner != candidate:
            raise OutputCollisionError(
                f"output {path} is already claimed by {owner}",
                candidate=candidate,
            )

    def owner_of(self, path: Path) -> str | None:
        with self._lock:
            return self._owners.get(path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._owners)


# ── Generator ───────────────────────────────────────────────────


class MatcherClassGenerator:
    """Build, render and persist matcher modules.

    Args:
        output_root: Directory generated packages are written under.
        extractor: Property extractor (default: BeanPropertyExtractor).
        naming_strategy: Naming policy (default: the candidate's module + "Matcher").
        renderer: IR text backend (default: AstSourceRenderer).
    """

    def __init__(
        self,
        output_root: Path | str,
        extractor: PropertyExtractor | None = None,
        naming_strategy: NamingStrategy | None = None,
        renderer: SourceRenderer | None = None,
    ):
        self.output_root = Path(output_root).absolute()
        self.extractor = extractor or BeanPropertyExtractor()
        self.naming_strategy = naming_strategy or SamePackageNamingStrategy()
        self.renderer = renderer or AstSourceRenderer()

    def build_module(self, candidate: Candidate) -> tuple[NamingDecision, ModuleSpec]:
        """Naming decision and module IR for *candidate*.

        Raises:
            NamingError: If no valid target name can be derived.
        """
        decision = self.naming_strategy.decide(candidate)
        properties = self.extractor.properties_of(candidate)
        return decision, _MatcherModuleBuilder(candidate, decision, properties).build()

    def render(self, candidate: Candidate) -> MatcherSource:
        """Synthesize the matcher source without touching the filesystem."""
        decision, module = self.build_module(candidate)
        return MatcherSource(
            candidate=candidate.qualified_name,
            module_name=decision.module_name,
            type_name=decision.type_name,
            path=self.output_root / decision.relative_path,
            content=self.renderer.render(module),
        )

    def generate(self, candidate: Candidate, claims: OutputClaims | None = None) -> MatcherSource:
        """Synthesize and write the matcher for *candidate*.

        Raises:
            NamingError: If no valid target name can be derived.
            OutputCollisionError: If another candidate claimed the path.
            GenerationIOError: If the file cannot be written.
        """
        source = self.render(candidate)
        if claims is not None:
            claims.claim(source.path, source.candidate)
        self._write(source)
        logger.info("Generated %s -> %s", source.candidate, source.path)
        return source

    def _write(self, source: MatcherSource) -> None:
        try:
            source.path.parent.mkdir(parents=True, exist_ok=True)
            source.path.write_text(source.content, encoding="utf-8")
        except OSError as e:
            raise GenerationIOError(
                f"writing {source.path} failed",
                candidate=source.candidate,
            ) from e


# ── IR assembly ─────────────────────────────────────────────────


class _MatcherModuleBuilder:
    """Assembles the ModuleSpec of one candidate's matcher."""

    def __init__(self, candidate: Candidate, decision: NamingDecision, properties: list[Property]):
        self.candidate = candidate
        self.decision = decision
        self.properties = properties
        self.type_name = decision.type_name
        self.imports = ImportTable(reserved=(self.type_name, *_LOCAL_NAMES))

        # The bean keeps its own name whenever possible
        self.bean = render_class(candidate.bean_type, self.imports)

    def build(self) -> ModuleSpec:
        matcher_cls = ClassSpec(
            name=self.type_name,
            bases=(f"{self._name('hamcrest.core.base_matcher', 'BaseMatcher')}[{self.bean}]",),
            decorators=(
                Call(
                    Name(self._name("matchergen.runtime", "generated")),
                    keywords=(
                        ("generator", Const(GENERATOR_NAME)),
                        ("based_on", Const(self.candidate.qualified_name)),
                    ),
                ),
            ),
            docstring=f"Matcher for {self.candidate.qualified_name} instances.",
            methods=(
                self._constructor(),
                *self._property_methods(),
                *self._delegates(),
                self._factory(),
            ),
        )
        return ModuleSpec(
            header=(
                f"Generated by {GENERATOR_NAME}. Do not edit.",
                f"Source: {self.candidate.qualified_name}",
            ),
            imports=self.imports.imports(),
            classes=(matcher_cls,),
        )

    def _name(self, module: str, name: str) -> str:
        return self.imports.name_for(module, name)

    def _composite_call(self, method: str, *args: Expr) -> Call:
        return Call(Attr(self_attr(COMPOSITE_FIELD), method), args)

    # ── Members ─────────────────────────────────────────────────

    def _constructor(self) -> MethodSpec:
        composite = self._name("matchergen.runtime", "BeanPropertyMatcher")
        return MethodSpec(
            name="__init__",
            signature=Signature(returns="None"),
            body=(
                Assign(
                    self_attr(COMPOSITE_FIELD),
                    Call(Name(composite), (_dotted(self.bean),)),
                ),
            ),
            role="constructor",
        )

    def _property_methods(self) -> list[MethodSpec]:
        methods = []
        taken: dict[str, str] = {}
        for prop in self.properties:
            method_name = f"{WITH_PREFIX}{snake_case(prop.name)}"
            if method_name in taken:
                logger.warning(
                    "Skipping property '%s' of %s: %s() already generated for '%s'",
                    prop.name,
                    self.candidate.qualified_name,
                    method_name,
                    taken[method_name],
                )
                continue
            taken[method_name] = prop.name
            if prop.is_matcher:
                methods.append(self._matcher_valued_method(method_name, prop))
            else:
                methods.append(self._overloaded_method(method_name, prop))
        return methods

    def _matcher_valued_method(self, method_name: str, prop: Property) -> MethodSpec:
        matcher = self._name("hamcrest.core.matcher", "Matcher")
        any_ = self._name("typing", "Any")
        return MethodSpec(
            name=method_name,
            signature=Signature(
                parameters=(Parameter("matcher", f"{matcher}[{any_}]"),),
                returns=self.type_name,
                positional_only=True,
            ),
            body=(
                Evaluate(self._composite_call("with_property", Const(prop.name), Name("matcher"))),
                Return(Name("self")),
            ),
        )

    def _overloaded_method(self, method_name: str, prop: Property) -> MethodSpec:
        value_type = render_annotation(prop.value_type, self.imports)
        matcher_type = f"{self._name('hamcrest.core.matcher', 'Matcher')}[{value_type}]"
        wrap = self._name("hamcrest.core.helpers.wrap_matcher", "wrap_matcher")

        def signature(name: str, annotation: str) -> Signature:
            return Signature(
                parameters=(Parameter(name, annotation),),
                returns=self.type_name,
                positional_only=True,
            )

        return MethodSpec(
            name=method_name,
            signature=signature("matcher_or_value", f"{matcher_type} | {value_type}"),
            overloads=(
                signature("matcher", matcher_type),
                signature("value", value_type),
            ),
            overload_marker=self._name("typing", "overload"),
            body=(
                Evaluate(
                    self._composite_call(
                        "with_property",
                        Const(prop.name),
                        Call(Name(wrap), (Name("matcher_or_value"),)),
                    )
                ),
                Return(Name("self")),
            ),
        )

    def _delegates(self) -> list[MethodSpec]:
        description = self._name("hamcrest.core.description", "Description")
        return [
            MethodSpec(
                name="describe_to",
                signature=Signature(
                    parameters=(Parameter("description", description),),
                    returns="None",
                ),
                body=(Evaluate(self._composite_call("describe_to", Name("description"))),),
                role="delegate",
            ),
            MethodSpec(
                name="_matches",
                signature=Signature(parameters=(Parameter("item", self.bean),), returns="bool"),
                body=(Return(self._composite_call("matches", Name("item"))),),
                role="delegate",
            ),
            MethodSpec(
                name="describe_mismatch",
                signature=Signature(
                    parameters=(
                        Parameter("item", self.bean),
                        Parameter("mismatch_description", description),
                    ),
                    returns="None",
                ),
                body=(
                    Evaluate(
                        self._composite_call(
                            "describe_mismatch", Name("item"), Name("mismatch_description")
                        )
                    ),
                ),
                role="delegate",
            ),
        ]

    def _factory(self) -> MethodSpec:
        return MethodSpec(
            name=f"{FACTORY_PREFIX}{snake_case(self.candidate.simple_name)}",
            signature=Signature(returns=self.type_name),
            body=(Return(Call(Name(self.type_name))),),
            kind="static",
            role="factory",
        )

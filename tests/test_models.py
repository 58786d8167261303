"""
Tests for domain models — candidates, naming decisions, outcomes, config.
"""

from pathlib import Path
from typing import Any

import pytest
from hamcrest.core.base_matcher import BaseMatcher
from hamcrest.core.matcher import Matcher
from pydantic import ValidationError

from matchergen.core.errors import GenerationIOError, NamingError
from matchergen.core.models import (
    Candidate,
    GeneratedArtifact,
    GenerationFailure,
    GenerationOutcome,
    GeneratorConfig,
    NamingConfig,
    NamingDecision,
    Property,
    is_matcher_type,
)


class Sample:
    class Inner:
        pass


# ── Candidate / Property ─────────────────────────────────────────────


class TestCandidate:
    def test_qualname(self):
        c = Candidate(
            bean_type=Sample.Inner,
            qualified_name="tests.test_models.Sample.Inner",
            module="tests.test_models",
            package="tests",
            simple_name="Inner",
        )
        assert c.qualname == "Sample.Inner"
        assert str(c) == "tests.test_models.Sample.Inner"

    def test_frozen(self):
        c = Candidate(bean_type=Sample, qualified_name="m.Sample", module="m", simple_name="Sample")
        with pytest.raises(ValidationError):
            c.simple_name = "Other"

    def test_defaults(self):
        c = Candidate(bean_type=Sample, qualified_name="m.Sample", module="m", simple_name="Sample")
        assert c.package == ""
        assert c.has_default_constructor is True
        assert not c.is_abstract and not c.is_generated


class TestProperty:
    def test_value_type_defaults_to_any(self):
        p = Property(name="anything", accessor="Bag.anything")
        assert p.value_type is Any
        assert not p.is_matcher
        assert Property.model_fields["value_type"].default is Any

    def test_plain_property_is_not_matcher(self):
        p = Property(name="age", value_type=int, accessor="Person.get_age")
        assert not p.is_matcher
        assert p.kind == "getter"
        assert p.writable is False

    @pytest.mark.parametrize("value_type", [Matcher, Matcher[str], BaseMatcher, BaseMatcher[int]])
    def test_matcher_valued(self, value_type: Any):
        assert is_matcher_type(value_type)

    @pytest.mark.parametrize("value_type", [Any, int, list[str], "Matcher", None])
    def test_not_matcher_valued(self, value_type: Any):
        assert not is_matcher_type(value_type)


# ── NamingDecision ───────────────────────────────────────────────────


class TestNamingDecision:
    def test_packaged(self):
        d = NamingDecision(package="shop.models", type_name="PersonMatcher")
        assert d.module_name == "shop.models.PersonMatcher"
        assert d.relative_path == Path("shop", "models", "PersonMatcher.py")

    def test_default_package(self):
        d = NamingDecision(type_name="PersonMatcher")
        assert d.module_name == "PersonMatcher"
        assert d.relative_path == Path("PersonMatcher.py")


# ── Outcomes ─────────────────────────────────────────────────────────


class TestGenerationFailure:
    def test_from_pipeline_error(self):
        err = NamingError("no valid name", candidate="shop.models.X")
        f = GenerationFailure.from_error(err, stage="generate")
        assert f.candidate == "shop.models.X"
        assert f.kind == "naming"
        assert f.stage == "generate"
        assert "no valid name" in f.cause

    def test_cause_chain_included(self):
        try:
            try:
                raise PermissionError("read-only file system")
            except OSError as e:
                raise GenerationIOError("writing x.py failed", candidate="m.X") from e
        except GenerationIOError as err:
            f = GenerationFailure.from_error(err, stage="generate")
        assert f.kind == "generation_io"
        assert "writing x.py failed" in f.cause
        assert "read-only file system" in f.cause

    def test_unexpected_error_is_internal(self):
        f = GenerationFailure.from_error(RuntimeError("boom"), stage="generate", candidate="m.X")
        assert f.kind == "internal"
        assert f.candidate == "m.X"

    def test_str(self):
        f = GenerationFailure(candidate="m.X", kind="naming", stage="generate", cause="bad")
        assert str(f) == "m.X [naming] bad"


class TestGenerationOutcome:
    def test_success(self, tmp_path: Path):
        artifact = GeneratedArtifact(
            candidate="m.X",
            module_name="m.XMatcher",
            source_path=tmp_path / "XMatcher.py",
            matcher_type=Sample,
        )
        o = GenerationOutcome.success(artifact)
        assert o.ok and not o.failed
        assert o.candidate == "m.X"
        assert o.artifact.type_name == "Sample"
        assert "matcher_type" not in o.model_dump(mode="json")["artifact"]

    def test_failure(self):
        f = GenerationFailure(candidate="m.X", kind="naming", stage="generate")
        o = GenerationOutcome.failure_of(f)
        assert o.failed
        assert o.status == "failed"
        assert o.failure is f
        assert o.finished_at


# ── Config ───────────────────────────────────────────────────────────


class TestGeneratorConfig:
    def test_defaults(self):
        c = GeneratorConfig()
        assert c.inputs == []
        assert c.output_root == Path("build/generated-matchers")
        assert c.naming.strategy == "same-package"
        assert c.max_workers == 1
        assert c.audit is True

    def test_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(max_workers=0)

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            NamingConfig(strategy="elsewhere")

    def test_sub_package_must_be_dotted_name(self):
        with pytest.raises(ValidationError):
            NamingConfig(sub_package="not a package")

    def test_resolved(self, tmp_path: Path):
        c = GeneratorConfig(output_root="out", source_paths=["src", tmp_path / "abs"])
        r = c.resolved(tmp_path)
        assert r.output_root == (tmp_path / "out").resolve()
        assert r.source_paths == [(tmp_path / "src").resolve(), tmp_path / "abs"]
        assert r.audit_path == r.output_root / ".matchergen" / "audit.ndjson"

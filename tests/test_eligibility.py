"""
Tests for the eligibility filter.
"""

import logging
from pathlib import Path

from matchergen.core.models import Candidate
from matchergen.core.services.discovery import (
    CandidateFinder,
    DefaultEligibilityFilter,
    EligibilityFilter,
)


def _candidates(names: list[str]) -> list[Candidate]:
    return CandidateFinder().find(names).candidates


class TestDefaultEligibilityFilter:
    def test_keeps_only_concrete_default_constructible(self, shop: Path):
        eligible = DefaultEligibilityFilter().filter(_candidates(["shop.models"]))
        assert [c.simple_name for c in eligible] == ["Person", "Empty", "Address"]

    def test_exclusion_reasons(self, shop: Path):
        by_name = {c.simple_name: c for c in _candidates(["shop.models"])}
        f = DefaultEligibilityFilter()
        assert f.exclusion_reason(by_name["Greeter"]) == "protocol class"
        assert f.exclusion_reason(by_name["Shape"]) == "abstract class"
        assert f.exclusion_reason(by_name["Color"]) == "enum"
        assert f.exclusion_reason(by_name["Point"]) == "annotation-only type"
        assert f.exclusion_reason(by_name["NeedsArgs"]) == "no argument-free constructor"
        assert f.exclusion_reason(by_name["Person"]) is None

    def test_generated_matchers_excluded(self, make_package):
        make_package("out", {"PersonMatcher": """\
            from matchergen.runtime import generated

            @generated(generator="matchergen", based_on="shop.models.Person")
            class PersonMatcher:
                pass
        """})
        candidates = _candidates(["out.PersonMatcher"])
        assert DefaultEligibilityFilter().filter(candidates) == []

    def test_order_preserved(self, shop: Path):
        candidates = _candidates(["shop.models.Address", "shop.models.Empty", "shop.models.Person"])
        eligible = DefaultEligibilityFilter().filter(candidates)
        assert [c.simple_name for c in eligible] == ["Address", "Empty", "Person"]

    def test_exclusions_are_silent(self, shop: Path, caplog):
        candidates = _candidates(["shop.models"])
        with caplog.at_level(logging.INFO):
            DefaultEligibilityFilter().filter(candidates)
        assert not [r for r in caplog.records if r.name.endswith("eligibility")]

    def test_empty_input(self):
        assert DefaultEligibilityFilter().filter([]) == []


class TestCustomFilter:
    def test_pluggable_policy(self, shop: Path):
        class OnlyPersons(EligibilityFilter):
            def exclusion_reason(self, candidate):
                return None if candidate.simple_name == "Person" else "not a person"

        eligible = OnlyPersons().filter(_candidates(["shop.models"]))
        assert [c.simple_name for c in eligible] == ["Person"]
        assert OnlyPersons().is_eligible(eligible[0])

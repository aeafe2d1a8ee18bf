"""Tests for taxonomy loading, matchers and hot reloading."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from conftest import FILLER
from privacy_guard.analyzer import RiskAnalyzer
from privacy_guard.errors import PatternEvaluationError, TaxonomyError
from privacy_guard.lexicons import DEFAULT_TAXONOMY
from privacy_guard.models import Severity
from privacy_guard.taxonomy import (
    Matcher,
    RegexMatcher,
    Taxonomy,
    TaxonomyStore,
    default_taxonomy,
    load_taxonomy,
)


class TestRegexMatcher:
    def test_case_insensitive(self) -> None:
        matcher = RegexMatcher([r"binding arbitration"])
        assert matcher.matches("Disputes go to BINDING Arbitration.") == ["BINDING Arbitration"]

    def test_all_matches_in_order(self) -> None:
        matcher = RegexMatcher([r"sell", r"share"])
        assert matcher.matches("share then sell then share") == ["sell", "share", "share"]

    def test_invalid_regex(self) -> None:
        with pytest.raises(PatternEvaluationError) as info:
            RegexMatcher([r"(unclosed"], key="broken")
        assert info.value.key == "broken"

    def test_empty_pattern_list(self) -> None:
        with pytest.raises(PatternEvaluationError):
            RegexMatcher([])

    def test_literal_specs_are_escaped(self) -> None:
        matcher = RegexMatcher.from_specs(["a.b"])
        assert matcher.matches("axb a.b") == ["a.b"]

    def test_regex_specs(self) -> None:
        matcher = RegexMatcher.from_specs([{"regex": r"waive.{0,10}jury"}])
        assert matcher.matches("you waive any jury trial") == ["waive any jury"]

    def test_unsupported_matcher_entry(self) -> None:
        with pytest.raises(PatternEvaluationError):
            RegexMatcher.from_specs([42])  # type: ignore[list-item]

    def test_satisfies_protocol(self) -> None:
        assert isinstance(RegexMatcher(["x"]), Matcher)


class TestDefaultTaxonomy:
    def test_contents(self, taxonomy: Taxonomy) -> None:
        assert len(taxonomy.red_flags) == 16
        assert len(taxonomy.legal_patterns) == 8
        assert len(taxonomy.contradictions) == 3
        assert taxonomy.source == "<builtin>"

    def test_cached(self) -> None:
        assert default_taxonomy() is default_taxonomy()

    def test_pattern_lookup(self, taxonomy: Taxonomy) -> None:
        pattern = taxonomy.pattern("data_monetization")
        assert pattern is not None
        assert pattern.severity is Severity.CRITICAL
        assert taxonomy.pattern("missing") is None

    def test_red_flag_keywords_ordered(self, taxonomy: Taxonomy) -> None:
        rule = next(r for r in taxonomy.red_flags if r.key == "data_sharing")
        assert rule.keywords[0] == "share your personal"
        assert rule.severity is Severity.HIGH

    def test_vague_classes(self, taxonomy: Taxonomy) -> None:
        assert set(taxonomy.vague_classes) == {"qualifiers", "hedging", "undefined"}

    def test_every_keyword_free_of_negation(self, taxonomy: Taxonomy) -> None:
        cues = set(taxonomy.negation_cues)
        for rule in taxonomy.red_flags:
            for keyword in rule.keywords:
                assert not cues & set(keyword.split()), (rule.key, keyword)


class TestFromDict:
    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(TaxonomyError):
            Taxonomy.from_dict(["not", "a", "mapping"])  # type: ignore[arg-type]

    def test_empty_mapping(self) -> None:
        taxonomy = Taxonomy.from_dict({})
        assert taxonomy.legal_patterns == ()
        assert taxonomy.negation_cues == ()

    def test_bad_entries_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        data = {
            "legal_patterns": {
                "broken": {"matchers": [{"regex": "(oops"}], "severity": "high"},
                "odd_severity": {"matchers": ["x"], "severity": "extreme"},
                "no_matchers": {"severity": "low"},
                "fine": {"matchers": ["binding arbitration"], "severity": "critical"},
            },
            "red_flags": {
                "empty": {"keywords": []},
                "ok": {"keywords": ["sell your data"]},
            },
        }
        with caplog.at_level(logging.WARNING, logger="privacy_guard.taxonomy"):
            taxonomy = Taxonomy.from_dict(data)
        assert [p.key for p in taxonomy.legal_patterns] == ["fine"]
        assert [r.key for r in taxonomy.red_flags] == ["ok"]
        assert taxonomy.red_flags[0].severity is Severity.LOW
        assert "broken" in caplog.text

    def test_string_lexicon_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        data = {
            "lexicons": {
                "negation": ["not"],
                "data_types": {"high_risk": "biometric", "medium_risk": ["email"]},
            }
        }
        with caplog.at_level(logging.WARNING, logger="privacy_guard.taxonomy"):
            taxonomy = Taxonomy.from_dict(data)
        assert taxonomy.high_risk_data == ()
        assert taxonomy.medium_risk_data == ("email",)
        assert taxonomy.negation_cues == ("not",)
        assert "data_types.high_risk" in caplog.text

    @pytest.mark.parametrize(
        "lexicons",
        [
            {"vague": ["may", "might"]},
            {"data_types": ["biometric"]},
            ["not", "never"],
            "not",
        ],
    )
    def test_non_mapping_sections_ignored(
        self, lexicons: object, caplog: pytest.LogCaptureFixture
    ) -> None:
        data = {
            "lexicons": lexicons,
            "legal_patterns": {
                "fine": {"matchers": ["binding arbitration"], "severity": "critical"},
            },
        }
        with caplog.at_level(logging.WARNING, logger="privacy_guard.taxonomy"):
            taxonomy = Taxonomy.from_dict(data)
        assert [p.key for p in taxonomy.legal_patterns] == ["fine"]
        assert taxonomy.vague_terms == ()
        assert taxonomy.high_risk_data == ()
        assert "expected a mapping" in caplog.text

    def test_string_keywords_skip_rule(self) -> None:
        data = {"red_flags": {"bad": {"keywords": "sell"}, "ok": {"keywords": ["sell"]}}}
        assert [r.key for r in Taxonomy.from_dict(data).red_flags] == ["ok"]

    def test_malformed_lexicon_does_not_inflate_score(self) -> None:
        taxonomy = Taxonomy.from_dict({"lexicons": {"data_types": {"high_risk": "biometric"}}})
        report = RiskAnalyzer(taxonomy=taxonomy).analyze(FILLER)
        assert report.risk_score == 0
        assert report.entities.high_risk == ()

    def test_list_entries_use_key_field(self) -> None:
        data = {
            "legal_patterns": [
                {"key": "first", "matchers": ["a"], "severity": "low"},
                {"matchers": ["b"], "severity": "low"},
            ]
        }
        keys = [p.key for p in Taxonomy.from_dict(data).legal_patterns]
        assert keys == ["first", "entry_1"]

    def test_duplicate_keys_skipped(self) -> None:
        data = {
            "legal_patterns": [
                {"key": "dup", "matchers": ["a"], "severity": "low", "description": "one"},
                {"key": "dup", "matchers": ["b"], "severity": "low", "description": "two"},
            ]
        }
        patterns = Taxonomy.from_dict(data).legal_patterns
        assert len(patterns) == 1
        assert patterns[0].description == "one"

    def test_lexicons_lowercased_and_deduplicated(self) -> None:
        taxonomy = Taxonomy.from_dict({"lexicons": {"negation": ["Not", "not", " NEVER ", ""]}})
        assert taxonomy.negation_cues == ("not", "never")

    def test_contradiction_entries(self) -> None:
        data = {
            "contradictions": {
                "pair": {"claim": "we never sell", "contradiction": ["we sell"],
                         "description": "Says both"},
            }
        }
        pair = Taxonomy.from_dict(data).contradictions[0]
        assert pair.description == "Says both"
        assert pair.claim.matches("We never sell.") == ["We never sell"]


class TestLoadTaxonomy:
    def test_round_trip_builtin(self, tmp_path: Path) -> None:
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps(DEFAULT_TAXONOMY), encoding="utf-8")
        loaded = load_taxonomy(path)
        builtin = default_taxonomy()
        assert loaded.source == str(path)
        assert [p.key for p in loaded.legal_patterns] == [p.key for p in builtin.legal_patterns]
        assert loaded.red_flags == builtin.red_flags
        assert loaded.high_risk_data == builtin.high_risk_data

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_taxonomy(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TaxonomyError):
            load_taxonomy(path)


class TestTaxonomyStore:
    def test_empty_store(self) -> None:
        assert TaxonomyStore().get() is None

    def test_publish(self, taxonomy: Taxonomy) -> None:
        store = TaxonomyStore()
        store.publish(taxonomy)
        assert store.get() is taxonomy

    def test_reload_swaps(self, taxonomy: Taxonomy) -> None:
        store = TaxonomyStore(taxonomy)
        replacement = Taxonomy.from_dict({}, source="empty")
        assert store.reload(lambda: replacement) is replacement
        assert store.get() is replacement

    def test_failed_reload_keeps_current(self, taxonomy: Taxonomy) -> None:
        store = TaxonomyStore(taxonomy)

        def broken() -> Taxonomy:
            raise TaxonomyError("bad file")

        with pytest.raises(TaxonomyError):
            store.reload(broken)
        assert store.get() is taxonomy

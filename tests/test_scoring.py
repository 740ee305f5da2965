"""Unit tests for the scoring engine.

Tests score_condition and MatchScorer for:
- Exact vs substring matching and weight priority
- Case, whitespace and number handling
- Prefix-qualified keywords and parenthesized aliases
- Array field aggregation and partial-match halving
- Multi-keyword combination and the whole-match penalty
- Input normalization and shape errors
"""

import logging
from dataclasses import dataclass
from typing import List

import pytest

from search_score import Condition, match_score
from search_score.scoring import (
    ConditionShapeError,
    InvalidConditionError,
    MatchScorer,
    ScoreResult,
    resolve_search_key,
    score_condition,
)


@pytest.fixture
def package_conditions():
    """Condition table for package metadata."""
    return [
        {"name": "name", "equal": 100, "include": 50},
        {"name": "description", "include": 25},
        {"name": "keywords", "equal": 50, "include": 10, "array": True},
        {"name": "type", "equal": 100, "prefix": ":"},
        {"name": "author", "equal": 100, "prefix": "@"},
    ]


@pytest.fixture
def package_record():
    return {
        "name": "left-pad",
        "description": "String left pad",
        "keywords": ["pad", "left", "string"],
        "type": "library",
        "author": "Azer",
    }


class TestResolveSearchKey:
    """Tests for prefix handling of keywords."""

    def test_no_prefix_keeps_keyword(self):
        assert resolve_search_key("Alice", None) == "Alice"
        assert resolve_search_key("alice", "") == "alice"

    def test_prefix_is_stripped(self):
        assert resolve_search_key("@alice", "@") == "alice"

    def test_keyword_without_prefix_is_ineligible(self):
        assert resolve_search_key("alice", "@") is None

    def test_bare_prefix_is_ineligible(self):
        assert resolve_search_key("@", "@") is None

    def test_parenthesized_alias(self):
        assert resolve_search_key(":Foo(bar)", ":") == "bar"

    def test_alias_uses_last_parenthesis(self):
        assert resolve_search_key(":a(b)(c)", ":") == "c"

    def test_unclosed_parenthesis_strips_prefix(self):
        assert resolve_search_key(":Foo(bar", ":") == "Foo(bar"

    def test_multi_character_prefix(self):
        assert resolve_search_key("by:alice", "by:") == "alice"
        assert resolve_search_key("by:", "by:") is None


class TestScoreConditionScalar:
    """Tests for conditions on single-valued fields."""

    def test_exact_match_awards_equal(self):
        condition = {"name": "name", "equal": 100, "include": 50}
        assert score_condition(condition, "test", {"name": "test"}) == 100

    def test_exact_match_takes_priority_over_substring(self):
        condition = {"name": "name", "equal": 100, "include": 50}
        # Never equal + include
        assert score_condition(condition, "test", {"name": "Test"}) == 100

    def test_substring_match_awards_include(self):
        condition = {"name": "name", "equal": 100, "include": 50}
        assert score_condition(condition, "test", {"name": "Testing"}) == 50

    def test_exact_value_with_only_include_weight(self):
        condition = {"name": "name", "include": 50}
        assert score_condition(condition, "test", {"name": "test"}) == 50

    def test_no_match(self):
        condition = {"name": "name", "equal": 100, "include": 50}
        assert score_condition(condition, "react", {"name": "vue"}) == 0

    def test_case_and_whitespace_insensitive(self):
        condition = {"name": "name", "equal": 100}
        assert score_condition(condition, "test", {"name": " Test "}) == 100

    def test_keyword_is_not_lowercased(self):
        condition = {"name": "name", "equal": 100, "include": 50}
        assert score_condition(condition, "Test", {"name": "test"}) == 0

    def test_integer_field_compared_as_text(self):
        condition = {"name": "version", "equal": 10}
        assert score_condition(condition, "42", {"version": 42}) == 10

    def test_integral_float_field_drops_fraction(self):
        condition = {"name": "version", "equal": 10}
        assert score_condition(condition, "42", {"version": 42.0}) == 10

    def test_float_field_compared_as_text(self):
        condition = {"name": "version", "equal": 10, "include": 5}
        assert score_condition(condition, "1.5", {"version": 1.5}) == 10
        assert score_condition(condition, "1", {"version": 1.5}) == 5

    def test_huge_float_field_uses_exponent_notation(self):
        condition = {"name": "size", "equal": 10, "include": 5}
        assert score_condition(condition, "1e+21", {"size": 1e21}) == 10
        assert score_condition(condition, "1000000000000000000000", {"size": 1e21}) == 0

    def test_large_integral_float_below_exponent_range(self):
        condition = {"name": "size", "equal": 10}
        assert score_condition(condition, "100000000000000000000", {"size": 1e20}) == 10

    def test_tiny_float_field_uses_exponent_notation(self):
        condition = {"name": "ratio", "equal": 10}
        assert score_condition(condition, "1.5e-7", {"ratio": 1.5e-7}) == 10

    def test_small_float_field_written_out(self):
        condition = {"name": "ratio", "equal": 10}
        assert score_condition(condition, "0.000001", {"ratio": 0.000001}) == 10
        assert score_condition(condition, "0.000015", {"ratio": 1.5e-5}) == 10

    def test_negative_zero_reads_as_zero(self):
        condition = {"name": "offset", "equal": 10}
        assert score_condition(condition, "0", {"offset": -0.0}) == 10

    def test_missing_field_scores_zero(self):
        condition = {"name": "homepage", "equal": 100, "include": 50}
        assert score_condition(condition, "test", {"name": "test"}) == 0

    def test_none_field_scores_zero(self):
        condition = {"name": "homepage", "equal": 100, "include": 50}
        assert score_condition(condition, "test", {"homepage": None}) == 0

    def test_unweighted_condition_scores_zero(self):
        assert score_condition({"name": "name"}, "test", {"name": "test"}) == 0
        assert score_condition({"name": "name", "equal": 0, "include": 0}, "test", {"name": "test"}) == 0

    def test_condition_model_accepted(self):
        condition = Condition(name="name", equal=100)
        assert score_condition(condition, "test", {"name": "test"}) == 100

    def test_attribute_access_on_objects(self):
        @dataclass
        class Package:
            name: str
            keywords: List[str]

        condition = {"name": "name", "equal": 100}
        assert score_condition(condition, "lodash", Package("Lodash", [])) == 100

    def test_list_value_on_scalar_condition_raises(self):
        condition = {"name": "keywords", "equal": 100}
        with pytest.raises(ConditionShapeError) as exc_info:
            score_condition(condition, "pad", {"keywords": ["pad"]})

        assert exc_info.value.condition_name == "keywords"
        assert exc_info.value.actual_type == "list"

    def test_boolean_value_on_scalar_condition_raises(self):
        condition = {"name": "private", "equal": 100}
        with pytest.raises(ConditionShapeError):
            score_condition(condition, "true", {"private": True})


class TestScoreConditionPrefix:
    """Tests for prefix-qualified conditions."""

    def test_prefixed_keyword_matches(self):
        condition = {"name": "author", "equal": 100, "prefix": "@"}
        assert score_condition(condition, "@alice", {"author": "Alice"}) == 100

    def test_unprefixed_keyword_is_ineligible(self):
        condition = {"name": "author", "equal": 100, "prefix": "@"}
        assert score_condition(condition, "alice", {"author": "alice"}) == 0

    def test_bare_prefix_is_ineligible(self):
        condition = {"name": "author", "equal": 100, "include": 50, "prefix": "@"}
        assert score_condition(condition, "@", {"author": "alice"}) == 0

    def test_parenthesized_alias_matches_inner_text(self):
        condition = {"name": "type", "equal": 100, "prefix": ":"}
        assert score_condition(condition, ":Foo(bar)", {"type": "bar"}) == 100

    def test_alias_outer_text_is_ignored(self):
        condition = {"name": "type", "equal": 100, "prefix": ":"}
        assert score_condition(condition, ":bar(foo)", {"type": "bar"}) == 0

    def test_empty_alias_matches_any_value_by_substring(self):
        condition = {"name": "type", "include": 20, "prefix": ":"}
        assert score_condition(condition, ":theme()", {"type": "plugin"}) == 20

    def test_prefixed_keyword_on_missing_field(self):
        condition = {"name": "publisher", "equal": 100, "prefix": "@"}
        assert score_condition(condition, "@alice", {"author": "alice"}) == 0


class TestScoreConditionArray:
    """Tests for conditions on list-valued fields."""

    @pytest.fixture
    def keywords_condition(self):
        return {"name": "keywords", "equal": 50, "include": 10, "array": True}

    def test_every_element_matching_is_not_halved(self, keywords_condition):
        record = {"keywords": ["react", "React-DOM", " preact "]}
        # 50 + 10 + 10
        assert score_condition(keywords_condition, "react", record) == 70

    def test_partial_match_is_halved(self, keywords_condition):
        record = {"keywords": ["react", "react-dom", "vue"]}
        # (50 + 10) / 2
        assert score_condition(keywords_condition, "react", record) == 30

    def test_no_element_matching(self, keywords_condition):
        record = {"keywords": ["vue", "svelte"]}
        assert score_condition(keywords_condition, "react", record) == 0

    def test_empty_array(self, keywords_condition):
        assert score_condition(keywords_condition, "react", {"keywords": []}) == 0

    def test_tuple_field(self, keywords_condition):
        assert score_condition(keywords_condition, "react", {"keywords": ("react",)}) == 50

    def test_numeric_elements_compared_as_text(self, keywords_condition):
        assert score_condition(keywords_condition, "2024", {"keywords": [2024, "2024"]}) == 100

    def test_prefixed_array_condition(self):
        condition = {"name": "maintainers", "equal": 40, "array": True, "prefix": "@"}
        record = {"maintainers": ["alice", "bob"]}
        assert score_condition(condition, "@alice", record) == 20
        assert score_condition(condition, "alice", record) == 0

    def test_string_value_on_array_condition_raises(self, keywords_condition):
        with pytest.raises(ConditionShapeError) as exc_info:
            score_condition(keywords_condition, "react", {"keywords": "react"})

        assert exc_info.value.expected == "a list of strings"

    def test_non_text_element_raises(self, keywords_condition):
        with pytest.raises(ConditionShapeError):
            score_condition(keywords_condition, "react", {"keywords": ["react", {"x": 1}]})


class TestMatchScore:
    """Tests for keyword x condition combination."""

    def test_single_keyword_single_condition_exact(self):
        assert match_score([{"name": "name", "equal": 100}], {"name": "Test"}, "test") == 100

    def test_single_condition_not_in_list(self):
        assert match_score({"name": "name", "equal": 100}, {"name": "Test"}, ["test"]) == 100

    def test_unrelated_conditions_do_not_change_score(self):
        conditions = [
            {"name": "name", "equal": 100},
            {"name": "homepage", "equal": 100, "include": 50},
            {"name": "license", "include": 10},
        ]
        assert match_score(conditions, {"name": "test"}, "test") == 100

    def test_two_keywords_one_matching_halves_total(self):
        conditions = [{"name": "name", "equal": 100}]
        assert match_score(conditions, {"name": "test"}, ["test", "other"]) == 50

    def test_every_keyword_matching_once(self, package_conditions, package_record):
        # name equal 100, author equal 100
        assert match_score(package_conditions, package_record, ["left-pad", "@azer"]) == 200

    def test_one_keyword_matching_two_conditions_is_halved(self):
        conditions = [
            {"name": "name", "include": 50},
            {"name": "description", "include": 25},
        ]
        record = {"name": "react", "description": "react ui"}
        # match_count 2 != 1 keyword
        assert match_score(conditions, record, "react") == 37.5

    def test_pair_count_equal_to_keyword_count_is_not_halved(self):
        conditions = [
            {"name": "name", "include": 50},
            {"name": "description", "include": 25},
        ]
        record = {"name": "react", "description": "react ui"}
        # "zzz" matches nothing, but two pairs matched for two keywords
        assert match_score(conditions, record, ["react", "zzz"]) == 75

    def test_empty_keywords_count_toward_penalty(self):
        conditions = [{"name": "name", "equal": 100}]
        assert match_score(conditions, {"name": "test"}, ["test", ""]) == 50
        assert match_score(conditions, {"name": "test"}, ["test", None]) == 50

    def test_empty_inputs_score_zero(self):
        conditions = [{"name": "name", "equal": 100}]
        assert match_score(conditions, {"name": "test"}, []) == 0
        assert match_score([], {"name": "test"}, "test") == 0
        assert match_score(conditions, {}, "test") == 0
        assert match_score(conditions, {"name": "test"}, "") == 0
        assert match_score(conditions, {"name": "test"}, None) == 0

    def test_full_package_table(self, package_conditions, package_record):
        # "pad": name include 50, description include 25,
        # keywords: "pad" equal 50 of 3 elements -> 25. Three pairs, one keyword.
        assert match_score(package_conditions, package_record, "pad") == (50 + 25 + 25) / 2

    def test_type_alias_keyword(self, package_conditions, package_record):
        assert match_score(package_conditions, package_record, ":Lib(library)") == 100

    def test_score_is_never_negative(self, package_conditions, package_record):
        keyword_sets = [
            "left",
            ["left", "pad"],
            ["@azer", ":library", "string"],
            ["", None, "zzz"],
            [],
            ":",
            "@",
        ]
        for keys in keyword_sets:
            assert match_score(package_conditions, package_record, keys) >= 0

    def test_invalid_condition_raises(self):
        with pytest.raises(InvalidConditionError) as exc_info:
            match_score([{"equal": 100}], {"name": "test"}, "test")

        assert any("name" in error for error in exc_info.value.errors)

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidConditionError):
            match_score([{"name": "name", "equal": -5}], {"name": "test"}, "test")

    def test_unknown_condition_keys_are_ignored(self):
        conditions = [{"name": "name", "equal": 100, "label": "Name"}]
        assert match_score(conditions, {"name": "a"}, "a") == 100


class TestMatchScorer:
    """Tests for the reusable MatchScorer and its ScoreResult."""

    def test_conditions_validated_once(self, package_conditions):
        scorer = MatchScorer(package_conditions)

        assert len(scorer.conditions) == 5
        assert all(isinstance(condition, Condition) for condition in scorer.conditions)

    def test_evaluate_reports_hits(self, package_conditions, package_record):
        scorer = MatchScorer(package_conditions)
        result = scorer.evaluate(package_record, ["left-pad", "@azer"])

        assert isinstance(result, ScoreResult)
        assert result.score == 200
        assert result.raw_score == 200
        assert result.match_count == 2
        assert result.keyword_count == 2
        assert result.penalized is False
        assert [(hit.keyword, hit.condition_name) for hit in result.hits] == [
            ("left-pad", "name"),
            ("@azer", "author"),
        ]
        assert [hit.position for hit in result.hits] == [0, 1]
        assert result.is_match is True
        assert result.all_keywords_matched is True

    def test_evaluate_reports_penalty(self, package_conditions, package_record):
        scorer = MatchScorer(package_conditions)
        result = scorer.evaluate(package_record, ["left-pad", "zzz"])

        assert result.raw_score == 100
        assert result.score == 50
        assert result.penalized is True
        assert result.matched_keywords == ["left-pad"]
        assert result.all_keywords_matched is False

    def test_repeated_keyword_counts_per_position(self, package_conditions, package_record):
        result = MatchScorer(package_conditions).evaluate(package_record, ["left-pad", "left-pad"])

        assert [hit.position for hit in result.hits] == [0, 1]
        assert result.matched_keywords == ["left-pad"]
        assert result.all_keywords_matched is True

    def test_skipped_keyword_is_not_covered(self, package_conditions, package_record):
        result = MatchScorer(package_conditions).evaluate(package_record, ["left-pad", ""])

        assert result.keyword_count == 2
        assert result.all_keywords_matched is False

    def test_no_match_result(self, package_conditions):
        result = MatchScorer(package_conditions).evaluate({"name": "vue"}, "react")

        assert result.score == 0
        assert result.is_match is False
        assert result.hits == []

    def test_score_matches_function(self, package_conditions, package_record):
        scorer = MatchScorer(package_conditions)
        for keys in ("pad", ["left", "@azer"], [":library"]):
            assert scorer.score(package_record, keys) == match_score(
                package_conditions, package_record, keys
            )

    def test_evaluate_logs_debug_event(self, caplog, package_conditions, package_record):
        caplog.set_level(logging.DEBUG, logger="search_score.scoring.engine")

        MatchScorer(package_conditions).evaluate(package_record, "left-pad")

        records = [r for r in caplog.records if getattr(r, "event", None) == "scoring.record.scored"]
        assert len(records) == 1
        assert records[0].component == "scoring"
        assert records[0].score == 100
        assert records[0].penalized is False

"""Tests for the query parser."""

from __future__ import annotations

import pytest

from data_alchemist.core.models import FilterCondition, Operator
from data_alchemist.core.query import parse_query


class TestSingleShapes:
    def test_greater_than(self):
        assert parse_query("PriorityLevel > 3") == [
            FilterCondition("PriorityLevel", Operator.GT, 3)
        ]

    def test_less_than_without_spaces(self):
        assert parse_query("Duration<10") == [FilterCondition("Duration", Operator.LT, 10)]

    def test_equals_takes_one_word(self):
        assert parse_query("GroupTag = Sales team") == [
            FilterCondition("GroupTag", Operator.EQ, "Sales")
        ]

    def test_contains_unquoted_token(self):
        assert parse_query("Skills contains python") == [
            FilterCondition("Skills", Operator.CONTAINS, "python")
        ]

    @pytest.mark.parametrize("quoted", ['"data science"', "'data science'"])
    def test_contains_quoted_phrase(self, quoted):
        assert parse_query(f"Skills contains {quoted}") == [
            FilterCondition("Skills", Operator.CONTAINS, "data science")
        ]

    def test_contains_keyword_is_case_insensitive(self):
        (condition,) = parse_query("Skills CONTAINS sql")
        assert condition.operator == Operator.CONTAINS
        assert condition.value == "sql"

    def test_between(self):
        assert parse_query("Category between 1 and 3") == [
            FilterCondition("Category", Operator.BETWEEN, (1, 3))
        ]

    def test_between_keeps_reversed_bounds(self):
        (condition,) = parse_query("Category between 9 and 2")
        assert condition.value == (9, 2)


class TestCombination:
    def test_no_match_yields_empty(self):
        assert parse_query("sales") == []
        assert parse_query("") == []

    def test_first_occurrence_per_shape_only(self):
        conditions = parse_query("A > 1 and B > 2")
        assert conditions == [FilterCondition("A", Operator.GT, 1)]

    def test_conditions_follow_matcher_priority(self):
        text = "Category between 1 and 3 and Duration < 5 and PriorityLevel > 2"
        ops = [c.operator for c in parse_query(text)]
        assert ops == [Operator.GT, Operator.LT, Operator.BETWEEN]

    def test_every_shape_at_once(self):
        text = "P > 1, D < 9, G = ops, S contains py, C between 2 and 4"
        conditions = parse_query(text)
        assert [c.field for c in conditions] == ["P", "D", "G", "S", "C"]

    def test_to_dict(self):
        (condition,) = parse_query("Category between 1 and 3")
        assert condition.to_dict() == {"field": "Category", "operator": "between", "value": [1, 3]}

    def test_oversized_number_skips_only_that_shape(self):
        huge = "1" * 5000
        assert parse_query(f"PriorityLevel > {huge}") == []
        assert parse_query(f"Category between 1 and {huge}") == []
        assert parse_query(f"Duration < {huge} and GroupTag = ops") == [
            FilterCondition("GroupTag", Operator.EQ, "ops")
        ]

"""Tests for the filter evaluator and the search entry point."""

from __future__ import annotations

import pytest

from data_alchemist.core.filters import apply_filters, fallback_search, row_contains, search
from data_alchemist.core.models import FilterCondition, Operator
from data_alchemist.core.query import parse_query


class TestApplyFilters:
    def test_greater_than_keeps_order(self):
        rows = [{"PriorityLevel": 2}, {"PriorityLevel": 4}, {"PriorityLevel": 5}]
        result = apply_filters(rows, parse_query("PriorityLevel > 3"))
        assert result == [{"PriorityLevel": 4}, {"PriorityLevel": 5}]

    def test_returns_original_objects(self):
        rows = [{"PriorityLevel": "4"}]
        result = apply_filters(rows, parse_query("PriorityLevel > 3"))
        assert result[0] is rows[0]

    def test_numeric_comparison_on_text(self):
        rows = [{"Duration": "10"}, {"Duration": "9"}, {"Duration": "abc"}]
        result = apply_filters(rows, [FilterCondition("Duration", Operator.GT, 9)])
        assert result == [{"Duration": "10"}]

    def test_less_than(self):
        rows = [{"Duration": 1}, {"Duration": 3}]
        assert apply_filters(rows, parse_query("Duration < 2")) == [{"Duration": 1}]

    def test_between_inclusive(self):
        cond = parse_query("Category between 1 and 3")
        assert apply_filters([{"Category": 2}], cond) == [{"Category": 2}]
        assert apply_filters([{"Category": 5}], cond) == []
        assert apply_filters([{"Category": 1}, {"Category": "3"}], cond) == [
            {"Category": 1},
            {"Category": "3"},
        ]

    def test_reversed_between_matches_nothing(self):
        cond = [FilterCondition("Category", Operator.BETWEEN, (3, 1))]
        assert apply_filters([{"Category": 2}], cond) == []

    def test_equals_is_case_insensitive(self):
        rows = [{"GroupTag": "Sales"}, {"GroupTag": "salesforce"}, {"GroupTag": "Ops"}]
        assert apply_filters(rows, parse_query("GroupTag = SALES")) == [{"GroupTag": "Sales"}]

    def test_equals_on_number(self):
        rows = [{"Category": 2.0}, {"Category": 3}]
        assert apply_filters(rows, parse_query("Category = 2")) == [{"Category": 2.0}]

    def test_contains_is_case_insensitive(self):
        rows = [{"Skills": "Python, SQL"}, {"Skills": "Java"}]
        assert apply_filters(rows, parse_query("Skills contains sql")) == [{"Skills": "Python, SQL"}]

    def test_contains_is_not_a_regex(self):
        rows = [{"Skills": "c++"}, {"Skills": "c"}]
        cond = [FilterCondition("Skills", Operator.CONTAINS, "c++")]
        assert apply_filters(rows, cond) == [{"Skills": "c++"}]

    @pytest.mark.parametrize("op,value", [
        (Operator.GT, -1), (Operator.LT, 100), (Operator.EQ, "none"),
        (Operator.CONTAINS, "n"), (Operator.BETWEEN, (-10, 10)),
    ])
    def test_missing_values_never_match(self, op, value):
        rows = [{"A": None, "B": 1}, {"B": 2}]
        assert apply_filters(rows, [FilterCondition("A", op, value)]) == []

    def test_unknown_field_matches_nothing(self):
        rows = [{"A": 1}]
        assert apply_filters(rows, [FilterCondition("a", Operator.GT, 0)]) == []

    def test_conditions_are_anded(self):
        rows = [
            {"PriorityLevel": 4, "GroupTag": "Sales"},
            {"PriorityLevel": 5, "GroupTag": "Ops"},
            {"PriorityLevel": 1, "GroupTag": "Sales"},
        ]
        conditions = parse_query("PriorityLevel > 3 GroupTag = sales")
        assert apply_filters(rows, conditions) == [rows[0]]

    def test_empty_conditions_keep_everything(self):
        rows = [{"A": 1}, {"A": 2}]
        assert apply_filters(rows, []) == rows

    def test_empty_dataset(self):
        assert apply_filters([], parse_query("A > 1")) == []


class TestFallbackSearch:
    def test_row_contains_any_field(self):
        assert row_contains({"GroupTag": "Sales", "Name": "x"}, "sales")
        assert not row_contains({"GroupTag": "Ops"}, "sales")

    def test_nulls_are_skipped(self):
        assert not row_contains({"A": None}, "none")

    def test_numbers_render_without_decimal(self):
        assert row_contains({"Duration": 4.0}, "4")
        assert not row_contains({"Duration": 4.0}, "4.0")

    def test_fallback_search(self):
        rows = [{"GroupTag": "Sales"}, {"GroupTag": "Ops"}]
        assert fallback_search(rows, "sales") == [{"GroupTag": "Sales"}]


class TestSearch:
    def test_structured_path(self):
        rows = [{"PriorityLevel": 2}, {"PriorityLevel": 4}, {"PriorityLevel": 5}]
        assert search(rows, "PriorityLevel > 3") == rows[1:]

    def test_fallback_when_no_condition(self):
        rows = [{"GroupTag": "Sales"}, {"GroupTag": "Ops"}]
        assert search(rows, "sales") == [{"GroupTag": "Sales"}]

    def test_structured_path_does_not_fall_back(self):
        # "Ops" appears in a cell but the structured condition rules it out.
        rows = [{"GroupTag": "Ops", "PriorityLevel": 1}]
        assert search(rows, "PriorityLevel > 3") == []

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_query_returns_everything(self, blank):
        rows = [{"A": 1}, {"A": 2}]
        assert search(rows, blank) == rows

    def test_query_is_stripped(self):
        rows = [{"GroupTag": "Sales"}]
        assert search(rows, "  sales  ") == rows

    def test_oversized_number_in_query_does_not_raise(self):
        rows = [{"PriorityLevel": 5, "Note": "x"}]
        assert search(rows, "PriorityLevel > " + "1" * 5000) == []

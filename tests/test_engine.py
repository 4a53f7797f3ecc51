"""Tests for ValidationEngine."""

from __future__ import annotations

import pytest

from data_alchemist.core.engine import ValidationEngine, validate
from data_alchemist.core.models import (
    EntityType,
    ErrorType,
    Severity,
    UnknownEntityTypeError,
    ValidationError,
    ValidationResult,
)
from data_alchemist.core.rule_base import Rule, RuleRegistry, Stage
from data_alchemist.core.rules.clients import PriorityLevelRule


def _assert_consistent(result: ValidationResult) -> None:
    s = result.summary
    assert s.error_count + s.warning_count == len(result.errors)
    assert result.is_valid == (s.error_count == 0)


class TestValidationEngine:
    engine = ValidationEngine()

    def test_clean_datasets_are_valid(self, clients, workers, tasks):
        for records, et in ((clients, "clients"), (workers, "workers"), (tasks, "tasks")):
            result = self.engine.validate(records, et)
            assert result.is_valid, result.errors
            assert result.summary.total_rows == 2
            _assert_consistent(result)

    def test_empty_dataset(self):
        result = self.engine.validate([], EntityType.TASKS)
        assert result.is_valid is False
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.error_type == ErrorType.EMPTY_DATASET
        assert error.field == "dataset"
        assert error.row_index == 0
        assert result.summary.to_dict() == {"totalRows": 0, "errorCount": 1, "warningCount": 0}

    def test_missing_value_reported_at_row_and_field(self, tasks):
        tasks[1]["TaskName"] = ""
        result = self.engine.validate(tasks, "tasks")
        missing = [e for e in result.errors if e.error_type == ErrorType.MISSING_VALUE]
        assert [(e.row_index, e.field) for e in missing] == [(1, "TaskName")]
        _assert_consistent(result)

    def test_duration_zero_vs_five(self, tasks):
        tasks[0]["Duration"] = "0"
        tasks[1]["Duration"] = "5"
        result = self.engine.validate(tasks, "tasks")
        flagged = [
            e.row_index
            for e in result.errors
            if e.field == "Duration" and e.error_type == ErrorType.INVALID_RANGE
        ]
        assert flagged == [0]

    def test_duplicates_appended_last(self, clients):
        clients.append(dict(clients[0], PriorityLevel="9"))
        result = self.engine.validate(clients, "clients")
        types = [e.error_type for e in result.errors]
        assert types == [ErrorType.INVALID_RANGE, ErrorType.DUPLICATE_ID]
        assert result.errors[-1].row_index == 2

    @pytest.mark.parametrize(
        "entity_type,field,bad,huge",
        [("clients", "PriorityLevel", "99", "9" * 5000), ("tasks", "Duration", "0", "1" * 5000)],
    )
    def test_oversized_number_does_not_hide_other_rows(
        self, request, entity_type, field, bad, huge, caplog
    ):
        records = request.getfixturevalue(entity_type)
        records[0][field] = bad
        records[1][field] = huge
        with caplog.at_level("ERROR"):
            result = self.engine.validate(records, entity_type)
        assert [(e.row_index, e.field, e.error_type) for e in result.errors] == [
            (0, field, ErrorType.INVALID_RANGE),
            (1, field, ErrorType.INVALID_RANGE),
        ]
        assert "failed" not in caplog.text

    def test_scan_never_stops_on_first_error(self):
        records = [
            {"WorkerID": "W1", "WorkerName": "", "Skills": "x", "AvailableSlots": "bad"},
            {"WorkerID": "W1", "WorkerName": "B", "Skills": "", "AvailableSlots": "1",
             "MaxLoadPerPhase": "0"},
        ]
        result = self.engine.validate(records, "workers")
        got = {(e.row_index, e.field, e.error_type) for e in result.errors}
        assert got == {
            (0, "WorkerName", ErrorType.MISSING_VALUE),
            (0, "AvailableSlots", ErrorType.INVALID_FORMAT),
            (1, "Skills", ErrorType.MISSING_VALUE),
            (1, "MaxLoadPerPhase", ErrorType.INVALID_RANGE),
            (1, "WorkerID", ErrorType.DUPLICATE_ID),
        }
        assert result.summary.error_count == 5
        _assert_consistent(result)

    def test_errors_ordered_by_stage_then_row(self):
        records = [
            {"ClientID": "C1", "ClientName": "A"},
            {"ClientID": "C2", "ClientName": ""},
        ]
        result = self.engine.validate(records, "clients")
        pairs = [(e.error_type, e.row_index) for e in result.errors]
        assert pairs[0] == (ErrorType.MISSING_COLUMN, 0)
        rows = [row for t, row in pairs[1:]]
        assert rows == sorted(rows)

    def test_extra_columns_are_allowed(self, clients):
        for row in clients:
            row["Notes"] = "anything"
        assert self.engine.validate(clients, "clients").is_valid

    def test_input_is_not_mutated(self, clients):
        before = [dict(r) for r in clients]
        self.engine.validate(clients, "clients")
        assert clients == before

    def test_unknown_entity_type_raises(self, clients):
        with pytest.raises(UnknownEntityTypeError):
            self.engine.validate(clients, "suppliers")

    def test_entity_type_is_case_insensitive(self, clients):
        assert self.engine.validate(clients, "Clients").is_valid

    def test_module_level_validate(self, tasks):
        assert validate(tasks, "tasks").is_valid


class _ExplodingRule(Rule):
    rule_id = "test.exploding"
    stage = Stage.ROWS

    def check(self, df, schema, headers):
        raise RuntimeError("boom")


class _WarningRule(Rule):
    rule_id = "test.warning"
    stage = Stage.ROWS

    def check(self, df, schema, headers):
        return [
            ValidationError(
                row_index=0,
                field="ClientName",
                error_type=ErrorType.INVALID_FORMAT,
                message="looks odd",
                severity=Severity.WARNING,
            )
        ]


class TestCustomRegistry:
    def _registry(self, *rules):
        reg = object.__new__(RuleRegistry)
        reg._rules = {}
        for r in rules:
            reg.register(r)
        return reg

    def test_failing_rule_does_not_abort(self, clients, caplog):
        clients[1]["PriorityLevel"] = "9"
        engine = ValidationEngine(self._registry(_ExplodingRule, PriorityLevelRule))
        with caplog.at_level("ERROR"):
            result = engine.validate(clients, "clients")
        assert [(e.row_index, e.field) for e in result.errors] == [(1, "PriorityLevel")]
        assert "test.exploding" in caplog.text
        _assert_consistent(result)

    def test_warnings_do_not_invalidate(self, clients):
        engine = ValidationEngine(self._registry(_WarningRule))
        result = engine.validate(clients, "clients")
        assert result.is_valid
        assert result.summary.warning_count == 1
        assert result.summary.error_count == 0
        _assert_consistent(result)


class TestResultSerialization:
    def test_to_dict_shape(self, tasks):
        tasks[0]["Duration"] = "x"
        d = validate(tasks, "tasks").to_dict()
        assert d["isValid"] is False
        assert d["summary"] == {"totalRows": 2, "errorCount": 1, "warningCount": 0}
        assert d["errors"][0] == {
            "rowIndex": 0,
            "field": "Duration",
            "errorType": "invalid_range",
            "message": "Duration must be a positive integer",
            "severity": "error",
        }

    def test_error_round_trip(self):
        error = ValidationError(3, "TaskID", ErrorType.DUPLICATE_ID, "Duplicate TaskID: T1")
        assert ValidationError.from_dict(error.to_dict()) == error

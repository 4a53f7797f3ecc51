"""ErrorIndex: read-only lookups over a ValidationResult.

Provides O(1) lookup by (row, field) for cell highlighting and by field /
error type for the validation panel.
"""

from __future__ import annotations

from collections import Counter, defaultdict

from data_alchemist.core.models import ErrorType, Severity, ValidationError, ValidationResult


class ErrorIndex:
    """Index the errors of one validation run. Rebuild it after re-validating."""

    def __init__(self, result: ValidationResult) -> None:
        self._result = result
        self._by_cell: dict[tuple[int, str], list[ValidationError]] = defaultdict(list)
        self._by_row: dict[int, list[ValidationError]] = defaultdict(list)
        self._by_field: dict[str, list[ValidationError]] = defaultdict(list)
        self._by_type: dict[ErrorType, list[ValidationError]] = defaultdict(list)
        for error in result.errors:
            self._by_cell[(error.row_index, error.field)].append(error)
            self._by_row[error.row_index].append(error)
            self._by_field[error.field].append(error)
            self._by_type[error.error_type].append(error)

    @property
    def result(self) -> ValidationResult:
        return self._result

    def by_cell(self, row: int, field: str) -> list[ValidationError]:
        return list(self._by_cell.get((row, field), []))

    def by_row(self, row: int) -> list[ValidationError]:
        return list(self._by_row.get(row, []))

    def by_field(self, field: str) -> list[ValidationError]:
        return list(self._by_field.get(field, []))

    def by_type(self, error_type: ErrorType | str) -> list[ValidationError]:
        return list(self._by_type.get(ErrorType(error_type), []))

    def has_errors_for_cell(self, row: int, field: str) -> bool:
        return bool(self._by_cell.get((row, field)))

    def worst_severity_for_cell(self, row: int, field: str) -> Severity | None:
        errors = self._by_cell.get((row, field))
        if not errors:
            return None
        return min(e.severity for e in errors)

    def rows_with_errors(self) -> list[int]:
        return sorted(
            row for row, errors in self._by_row.items()
            if any(e.severity == Severity.ERROR for e in errors)
        )

    def count_by_type(self) -> dict[ErrorType, int]:
        counts = Counter(e.error_type for e in self._result.errors)
        return {t: counts.get(t, 0) for t in ErrorType}

    def __len__(self) -> int:
        return len(self._result.errors)

"""Core data model dataclasses.

All other modules import from here. Keep this module free of side-effects and
web imports so it can be used in tests and CLI contexts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence, Union

#: One row of tabular data: field name -> scalar (str, number or None).
Record = Mapping[str, Any]
#: Ordered rows of one entity type. Row position is the error-reporting index.
Dataset = Sequence[Record]


class UnknownEntityTypeError(ValueError):
    """Raised when a caller passes an entity tag that is not clients/workers/tasks."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EntityType(str, Enum):
    CLIENTS = "clients"
    WORKERS = "workers"
    TASKS = "tasks"

    @classmethod
    def parse(cls, value: "EntityType | str") -> "EntityType":
        """Return the member for *value*; raise UnknownEntityTypeError otherwise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownEntityTypeError(
                f"Unknown entity type {value!r}; expected one of "
                + ", ".join(m.value for m in cls)
            ) from None


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"

    def __lt__(self, other: "Severity") -> bool:
        order = {Severity.ERROR: 0, Severity.WARNING: 1}
        return order[self] < order[other]

    def __le__(self, other: "Severity") -> bool:
        return self == other or self < other


class ErrorType(str, Enum):
    EMPTY_DATASET = "empty_dataset"
    MISSING_COLUMN = "missing_column"
    MISSING_VALUE = "missing_value"
    INVALID_RANGE = "invalid_range"
    INVALID_JSON = "invalid_json"
    INVALID_FORMAT = "invalid_format"
    DUPLICATE_ID = "duplicate_id"


class Operator(str, Enum):
    GT = ">"
    LT = "<"
    EQ = "="
    CONTAINS = "contains"
    BETWEEN = "between"


# ---------------------------------------------------------------------------
# Validation results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationError:
    """A diagnostic at a specific row / field of a dataset."""

    row_index: int  # 0-based position in the dataset
    field: str  # column name, or "dataset" for dataset-level errors
    error_type: ErrorType
    message: str
    severity: Severity = Severity.ERROR

    def to_dict(self) -> dict:
        return {
            "rowIndex": self.row_index,
            "field": self.field,
            "errorType": self.error_type.value,
            "message": self.message,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ValidationError":
        return cls(
            row_index=int(d["rowIndex"]),
            field=d["field"],
            error_type=ErrorType(d["errorType"]),
            message=d.get("message", ""),
            severity=Severity(d.get("severity", Severity.ERROR.value)),
        )


@dataclass(frozen=True)
class ValidationSummary:
    total_rows: int = 0
    error_count: int = 0
    warning_count: int = 0

    def to_dict(self) -> dict:
        return {
            "totalRows": self.total_rows,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation run.

    Counts are always derived from ``errors``; use :meth:`from_errors` rather
    than assembling a summary by hand.
    """

    is_valid: bool
    errors: tuple[ValidationError, ...]
    summary: ValidationSummary

    @classmethod
    def from_errors(
        cls, errors: Sequence[ValidationError], total_rows: int
    ) -> "ValidationResult":
        errors = tuple(errors)
        error_count = sum(1 for e in errors if e.severity == Severity.ERROR)
        warning_count = sum(1 for e in errors if e.severity == Severity.WARNING)
        return cls(
            is_valid=error_count == 0,
            errors=errors,
            summary=ValidationSummary(
                total_rows=total_rows,
                error_count=error_count,
                warning_count=warning_count,
            ),
        )

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "summary": self.summary.to_dict(),
        }


# ---------------------------------------------------------------------------
# Query conditions
# ---------------------------------------------------------------------------

ConditionValue = Union[int, float, str, tuple[int, int]]


@dataclass(frozen=True)
class FilterCondition:
    """One structured predicate extracted from a search string."""

    field: str
    operator: Operator
    value: ConditionValue

    def to_dict(self) -> dict:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"field": self.field, "operator": self.operator.value, "value": value}


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntitySchema:
    entity_type: EntityType
    id_field: str
    required: tuple[str, ...]
    optional: tuple[str, ...] = field(default_factory=tuple)

    @property
    def all_fields(self) -> tuple[str, ...]:
        return self.required + self.optional

    def to_dict(self) -> dict:
        return {
            "entityType": self.entity_type.value,
            "idField": self.id_field,
            "required": list(self.required),
            "optional": list(self.optional),
        }

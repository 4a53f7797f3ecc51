"""Core validation and query engines. No web imports here."""

from data_alchemist.core.engine import ValidationEngine, validate
from data_alchemist.core.filters import apply_filters, search
from data_alchemist.core.models import (
    EntityType,
    ErrorType,
    FilterCondition,
    Operator,
    Severity,
    UnknownEntityTypeError,
    ValidationError,
    ValidationResult,
)
from data_alchemist.core.query import parse_query
from data_alchemist.core.rules.duplicates import find_duplicates
from data_alchemist.core.schemas import detect_entity_type, schema_for

__all__ = [
    "EntityType",
    "ErrorType",
    "FilterCondition",
    "Operator",
    "Severity",
    "UnknownEntityTypeError",
    "ValidationEngine",
    "ValidationError",
    "ValidationResult",
    "apply_filters",
    "detect_entity_type",
    "find_duplicates",
    "parse_query",
    "schema_for",
    "search",
    "validate",
]

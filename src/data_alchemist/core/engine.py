"""ValidationEngine: orchestrates running rules against a dataset.

The engine is stateless: every call builds its own DataFrame from the records
it is given and returns a fresh ValidationResult.
"""

from __future__ import annotations

import logging

import pandas as pd

_log = logging.getLogger(__name__)

# Import rules module to trigger all @registry.register decorators
import data_alchemist.core.rules  # noqa: F401
from data_alchemist.core.models import (
    Dataset,
    EntityType,
    ErrorType,
    ValidationError,
    ValidationResult,
)
from data_alchemist.core.rule_base import RuleRegistry, Stage, registry
from data_alchemist.core.schemas import schema_for


def records_to_frame(dataset: Dataset) -> pd.DataFrame:
    """Object-dtype DataFrame over *dataset*; values are kept exactly as given."""
    return pd.DataFrame([dict(r) for r in dataset], dtype=object)


class ValidationEngine:
    """Run validation rules and return a ValidationResult.

    Usage::

        engine = ValidationEngine()
        result = engine.validate(records, "clients")
    """

    def __init__(self, rule_registry: RuleRegistry | None = None) -> None:
        self._registry = rule_registry or registry

    def validate(self, dataset: Dataset, entity_type: EntityType | str) -> ValidationResult:
        """Check every row of *dataset* against the rules for *entity_type*.

        Malformed cells are reported, never raised; the scan always covers the
        whole dataset. Only an unknown entity type raises.
        """
        entity_type = EntityType.parse(entity_type)
        schema = schema_for(entity_type)

        if len(dataset) == 0:
            return ValidationResult.from_errors(
                [
                    ValidationError(
                        row_index=0,
                        field="dataset",
                        error_type=ErrorType.EMPTY_DATASET,
                        message="Dataset is empty",
                    )
                ],
                total_rows=0,
            )

        df = records_to_frame(dataset)
        headers = list(dataset[0].keys())

        by_stage: dict[Stage, list[ValidationError]] = {stage: [] for stage in Stage}
        for rule_cls in self._registry.rules_for(entity_type):
            rule_inst = rule_cls()
            try:
                issues = rule_inst.check(df, schema, headers)
            except Exception as exc:
                # Never crash the whole validation because one rule fails
                _log.exception("Rule %s failed: %s", rule_inst.rule_id, exc)
                issues = []
            by_stage[rule_inst.stage].extend(issues)

        # Stable sort: within a row, rules keep their registry order.
        by_stage[Stage.ROWS].sort(key=lambda e: e.row_index)

        errors = [e for stage in Stage for e in by_stage[stage]]
        result = ValidationResult.from_errors(errors, total_rows=len(dataset))
        _log.debug(
            "Validated %d %s rows: %d errors, %d warnings",
            result.summary.total_rows,
            entity_type.value,
            result.summary.error_count,
            result.summary.warning_count,
        )
        return result


_default_engine = ValidationEngine()


def validate(dataset: Dataset, entity_type: EntityType | str) -> ValidationResult:
    """Validate *dataset* with the default rule registry."""
    return _default_engine.validate(dataset, entity_type)

"""Schema-driven presence rules.

- RequiredColumnsRule: a required field is not among the dataset headers.
- RequiredValuesRule: a required field is blank on a given row.
"""

from __future__ import annotations

import pandas as pd

from data_alchemist.core.models import EntitySchema, ErrorType, ValidationError
from data_alchemist.core.rule_base import Rule, Stage, iter_column, registry
from data_alchemist.core.text_utils import is_blank


@registry.register
class RequiredColumnsRule(Rule):
    """Flag required fields missing from the header row (reported once, at row 0)."""

    rule_id = "generic.required_columns"
    name = "Required column"
    stage = Stage.COLUMNS

    def check(
        self, df: pd.DataFrame, schema: EntitySchema, headers: list[str]
    ) -> list[ValidationError]:
        present = set(headers)
        return [
            ValidationError(
                row_index=0,
                field=col,
                error_type=ErrorType.MISSING_COLUMN,
                message=f"Required column {col} is missing",
            )
            for col in schema.required
            if col not in present
        ]


@registry.register
class RequiredValuesRule(Rule):
    """Flag blank cells in required fields."""

    rule_id = "generic.required_values"
    name = "Required value"
    stage = Stage.ROWS
    order = 0

    def check(
        self, df: pd.DataFrame, schema: EntitySchema, headers: list[str]
    ) -> list[ValidationError]:
        issues: list[ValidationError] = []
        # Row-major so each row's fields are reported in schema order.
        columns = {col: dict(iter_column(df, col)) for col in schema.required}
        for row_idx in range(len(df)):
            for col in schema.required:
                if is_blank(columns[col][row_idx]):
                    issues.append(
                        ValidationError(
                            row_index=row_idx,
                            field=col,
                            error_type=ErrorType.MISSING_VALUE,
                            message=f"Missing required value for {col}",
                        )
                    )
        return issues

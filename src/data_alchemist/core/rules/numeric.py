"""Shared base for "this cell must be an integer in [min, max]" rules."""

from __future__ import annotations

import pandas as pd

from data_alchemist.core.models import EntitySchema, ErrorType, ValidationError
from data_alchemist.core.rule_base import Rule, Stage, iter_column
from data_alchemist.core.text_utils import is_blank, parse_int


class IntegerRangeRule(Rule):
    """Flag cells whose leading integer is unreadable or outside [minimum, maximum].

    With ``optional = True`` blank cells are skipped; otherwise a blank cell is
    out of range too (the missing value itself is reported by the required
    values rule).
    """

    column: str
    minimum: int | None = None
    maximum: int | None = None
    optional: bool = False
    message: str = ""
    stage = Stage.ROWS

    def in_range(self, number: int) -> bool:
        if self.minimum is not None and number < self.minimum:
            return False
        if self.maximum is not None and number > self.maximum:
            return False
        return True

    def check(
        self, df: pd.DataFrame, schema: EntitySchema, headers: list[str]
    ) -> list[ValidationError]:
        issues: list[ValidationError] = []
        for row_idx, val in iter_column(df, self.column):
            if self.optional and is_blank(val):
                continue
            number = parse_int(val)
            if number is None or not self.in_range(number):
                issues.append(
                    ValidationError(
                        row_index=row_idx,
                        field=self.column,
                        error_type=ErrorType.INVALID_RANGE,
                        message=self.message,
                    )
                )
        return issues

"""Worker rules: per-phase load and available slots."""

from __future__ import annotations

from typing import Any

import pandas as pd

from data_alchemist.core.models import EntitySchema, EntityType, ErrorType, ValidationError
from data_alchemist.core.rule_base import Rule, Stage, iter_column, registry
from data_alchemist.core.rules.numeric import IntegerRangeRule
from data_alchemist.core.text_utils import is_blank, is_valid_json, parse_int


@registry.register
class MaxLoadPerPhaseRule(IntegerRangeRule):
    rule_id = "workers.max_load_per_phase"
    name = "Max load per phase"
    entity_types = (EntityType.WORKERS,)
    order = 10
    column = "MaxLoadPerPhase"
    minimum = 1
    optional = True
    message = "MaxLoadPerPhase must be a positive integer"


def slots_are_valid(value: Any) -> bool:
    """``[..]`` must be JSON; anything else must be comma-separated integers >= 1.

    Non-text cells (a bare number from a spreadsheet) are accepted as is.
    """
    if not isinstance(value, str):
        return True
    if value.startswith("["):
        return is_valid_json(value)
    for part in value.split(","):
        slot = parse_int(part.strip())
        if slot is None or slot < 1:
            return False
    return True


@registry.register
class AvailableSlotsRule(Rule):
    rule_id = "workers.available_slots"
    name = "Available slots format"
    entity_types = (EntityType.WORKERS,)
    stage = Stage.ROWS
    order = 20

    def check(
        self, df: pd.DataFrame, schema: EntitySchema, headers: list[str]
    ) -> list[ValidationError]:
        issues: list[ValidationError] = []
        for row_idx, val in iter_column(df, "AvailableSlots"):
            if is_blank(val) or slots_are_valid(val):
                continue
            issues.append(
                ValidationError(
                    row_index=row_idx,
                    field="AvailableSlots",
                    error_type=ErrorType.INVALID_FORMAT,
                    message="AvailableSlots must be valid array or comma-separated numbers",
                )
            )
        return issues

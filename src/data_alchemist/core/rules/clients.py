"""Client rules: priority range and attribute JSON."""

from __future__ import annotations

import pandas as pd

from data_alchemist.core.models import EntitySchema, EntityType, ErrorType, ValidationError
from data_alchemist.core.rule_base import Rule, Stage, iter_column, registry
from data_alchemist.core.rules.numeric import IntegerRangeRule
from data_alchemist.core.text_utils import is_blank, is_valid_json

PRIORITY_MIN = 1
PRIORITY_MAX = 5


@registry.register
class PriorityLevelRule(IntegerRangeRule):
    rule_id = "clients.priority_level"
    name = "Priority level range"
    entity_types = (EntityType.CLIENTS,)
    order = 10
    column = "PriorityLevel"
    minimum = PRIORITY_MIN
    maximum = PRIORITY_MAX
    message = f"PriorityLevel must be between {PRIORITY_MIN} and {PRIORITY_MAX}"


@registry.register
class AttributesJsonRule(Rule):
    """AttributesJSON, when filled in, must be valid JSON."""

    rule_id = "clients.attributes_json"
    name = "Attributes JSON"
    entity_types = (EntityType.CLIENTS,)
    stage = Stage.ROWS
    order = 20

    def check(
        self, df: pd.DataFrame, schema: EntitySchema, headers: list[str]
    ) -> list[ValidationError]:
        issues: list[ValidationError] = []
        for row_idx, val in iter_column(df, "AttributesJSON"):
            if is_blank(val):
                continue
            if not is_valid_json(str(val)):
                issues.append(
                    ValidationError(
                        row_index=row_idx,
                        field="AttributesJSON",
                        error_type=ErrorType.INVALID_JSON,
                        message="AttributesJSON contains invalid JSON",
                    )
                )
        return issues

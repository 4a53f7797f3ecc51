"""Duplicate identifier detection.

The first occurrence of an ID is never flagged; every later row carrying the
same non-blank ID is.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

import pandas as pd

from data_alchemist.core.models import (
    Dataset,
    EntitySchema,
    EntityType,
    ErrorType,
    ValidationError,
)
from data_alchemist.core.rule_base import Rule, Stage, iter_column, registry
from data_alchemist.core.schemas import schema_for
from data_alchemist.core.text_utils import is_blank


def _id_key(val: Any) -> Hashable:
    """Set key for an ID cell; list or dict cells compare by their contents."""
    try:
        hash(val)
    except TypeError:
        return (type(val).__name__, repr(val))
    return val


@registry.register
class DuplicateIdRule(Rule):
    """Detect repeated values in the entity's identifier column."""

    rule_id = "generic.duplicate_id"
    name = "Duplicate ID"
    stage = Stage.DATASET

    def check(
        self, df: pd.DataFrame, schema: EntitySchema, headers: list[str]
    ) -> list[ValidationError]:
        id_field = schema.id_field
        seen: set = set()
        issues: list[ValidationError] = []
        for row_idx, val in iter_column(df, id_field):
            if is_blank(val):
                continue
            key = _id_key(val)
            if key in seen:
                issues.append(
                    ValidationError(
                        row_index=row_idx,
                        field=id_field,
                        error_type=ErrorType.DUPLICATE_ID,
                        message=f"Duplicate {id_field}: {val}",
                    )
                )
            else:
                seen.add(key)
        return issues


def find_duplicates(dataset: Dataset, entity_type: EntityType | str) -> list[ValidationError]:
    """Standalone duplicate-ID scan over plain records."""
    schema = schema_for(entity_type)
    df = pd.DataFrame([dict(r) for r in dataset], dtype=object)
    return DuplicateIdRule().check(df, schema, list(df.columns))

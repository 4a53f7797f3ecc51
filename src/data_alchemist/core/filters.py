"""Apply parsed FilterConditions to a dataset.

Two search semantics exist on purpose:

- structured: every condition must hold (AND), evaluated column-wise;
- fallback: when the text holds no recognizable condition, keep rows where
  any cell contains the text (OR across fields).

Surviving rows are returned in their original order, as the original record
objects.
"""

from __future__ import annotations

import logging
from typing import Sequence

import pandas as pd

from data_alchemist.core.engine import records_to_frame
from data_alchemist.core.models import Dataset, FilterCondition, Operator, Record
from data_alchemist.core.query import parse_query
from data_alchemist.core.text_utils import is_missing, to_number, to_text

_log = logging.getLogger(__name__)


def condition_mask(df: pd.DataFrame, condition: FilterCondition) -> pd.Series:
    """Boolean Series: True where the row satisfies *condition*.

    Field lookup is exact and case-sensitive. Missing cells never match.
    """
    if condition.field not in df.columns:
        return pd.Series(False, index=df.index)

    column = df[condition.field]
    present = ~column.map(is_missing).astype(bool)
    op = condition.operator

    if op in (Operator.GT, Operator.LT, Operator.BETWEEN):
        numbers = column.map(to_number).astype(float)
        if op == Operator.GT:
            hit = numbers > float(condition.value)
        elif op == Operator.LT:
            hit = numbers < float(condition.value)
        else:
            low, high = condition.value
            hit = (numbers >= low) & (numbers <= high)
    else:
        texts = column.map(to_text).str.lower()
        needle = str(condition.value).lower()
        if op == Operator.EQ:
            hit = texts == needle
        else:
            hit = texts.str.contains(needle, regex=False)

    return present & hit.astype(bool)


def apply_filters(dataset: Dataset, conditions: Sequence[FilterCondition]) -> list[Record]:
    """Keep rows matching every condition; an empty list keeps every row."""
    rows = list(dataset)
    if not conditions or not rows:
        return rows
    df = records_to_frame(rows)
    mask = pd.Series(True, index=df.index)
    for condition in conditions:
        mask &= condition_mask(df, condition)
    return [rows[i] for i in df.index[mask.to_numpy()]]


def row_contains(record: Record, text: str) -> bool:
    """Case-insensitive substring test against every non-null value of *record*."""
    needle = text.lower()
    return any(
        needle in to_text(value).lower()
        for value in record.values()
        if not is_missing(value)
    )


def fallback_search(dataset: Dataset, text: str) -> list[Record]:
    return [record for record in dataset if row_contains(record, text)]


def search(dataset: Dataset, query_text: str) -> list[Record]:
    """Parse *query_text* and filter *dataset* with it.

    Blank text returns every row. Text without any structured condition falls
    back to a whole-row substring search.
    """
    text = (query_text or "").strip()
    if not text:
        return list(dataset)
    conditions = parse_query(text)
    if not conditions:
        _log.debug("No structured condition in %r; using substring search", text)
        return fallback_search(dataset, text)
    return apply_filters(dataset, conditions)

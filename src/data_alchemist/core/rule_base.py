"""Rule base class and RuleRegistry singleton."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Iterator

import pandas as pd

from data_alchemist.core.models import EntityType

if TYPE_CHECKING:
    from data_alchemist.core.models import EntitySchema, ValidationError


class Stage(IntEnum):
    """When a rule runs relative to the others. Lower stages report first."""

    COLUMNS = 0  # header-level checks, reported at row 0
    ROWS = 1  # per-row checks; interleaved by row index in the result
    DATASET = 2  # cross-row checks, appended last


class Rule(ABC):
    """Abstract base for all validation rules."""

    #: Stable unique identifier, e.g. "tasks.duration"
    rule_id: str

    #: Human-readable name
    name: str = ""

    #: Entity types this rule applies to; None means every entity type.
    entity_types: tuple[EntityType, ...] | None = None

    stage: Stage = Stage.ROWS

    #: Tie-breaker inside a stage; lower runs first.
    order: int = 100

    def applies_to(self, entity_type: EntityType) -> bool:
        return self.entity_types is None or entity_type in self.entity_types

    @abstractmethod
    def check(
        self, df: pd.DataFrame, schema: "EntitySchema", headers: list[str]
    ) -> list["ValidationError"]:
        """Run the rule and return the diagnostics it found.

        Args:
            df: All records as an object-dtype DataFrame, RangeIndex = row index.
                Keys absent from a record are NaN.
            schema: Schema of the entity type being validated.
            headers: Field names of the first record, in order.

        Returns:
            List of ValidationError objects. Empty list = no issues.
        """


def iter_column(df: pd.DataFrame, col: str) -> Iterator[tuple[int, Any]]:
    """Yield ``(row_index, value)`` for *col*; None on every row if the column is absent."""
    if col not in df.columns:
        for row_idx in range(len(df)):
            yield row_idx, None
        return
    for row_idx, val in df[col].items():
        yield int(row_idx), val


class RuleRegistry:
    """Singleton registry mapping rule_id → Rule class."""

    _instance: "RuleRegistry | None" = None
    _rules: dict[str, type[Rule]]

    def __new__(cls) -> "RuleRegistry":
        if cls._instance is None:
            inst = super().__new__(cls)
            inst._rules = {}
            cls._instance = inst
        return cls._instance

    def register(self, cls: type[Rule]) -> type[Rule]:
        """Register a Rule class. Can be used as a decorator."""
        self._rules[cls.rule_id] = cls
        return cls

    def get(self, rule_id: str) -> type[Rule] | None:
        return self._rules.get(rule_id)

    def all_ids(self) -> list[str]:
        return sorted(self._rules.keys())

    def all_rules(self) -> list[type[Rule]]:
        return sorted(self._rules.values(), key=lambda r: (r.stage, r.order, r.rule_id))

    def rules_for(self, entity_type: EntityType) -> list[type[Rule]]:
        return [r for r in self.all_rules() if r().applies_to(entity_type)]


# Module-level convenience instance
registry = RuleRegistry()

"""Task rules: duration and concurrency limits."""

from __future__ import annotations

from data_alchemist.core.models import EntityType
from data_alchemist.core.rule_base import registry
from data_alchemist.core.rules.numeric import IntegerRangeRule


@registry.register
class DurationRule(IntegerRangeRule):
    rule_id = "tasks.duration"
    name = "Task duration"
    entity_types = (EntityType.TASKS,)
    order = 10
    column = "Duration"
    minimum = 1
    message = "Duration must be a positive integer"


@registry.register
class MaxConcurrentRule(IntegerRangeRule):
    rule_id = "tasks.max_concurrent"
    name = "Max concurrent"
    entity_types = (EntityType.TASKS,)
    order = 20
    column = "MaxConcurrent"
    minimum = 0
    optional = True
    message = "MaxConcurrent must be a non-negative integer"

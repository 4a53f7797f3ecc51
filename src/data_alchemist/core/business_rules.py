"""Allocation business rules defined by the user over the uploaded data.

Four rule types exist, each with its own parameter set:

- ``co-run``: tasks that must run together (``tasks``: list of TaskIDs)
- ``load-limit``: max tasks per worker group per phase
  (``workerGroup``, ``maxTasks`` >= 1)
- ``phase-window``: phases a task may run in (``taskId``, ``allowedPhases``
  such as ``"1,2,3"`` or ``"1-5"``)
- ``skill-requirement``: extra skills for a task (``taskId``,
  ``requiredSkills`` comma list)

Every type also accepts a free-text ``description``. A RuleSet is immutable:
``add`` and ``remove`` return a new set.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Sequence

from data_alchemist.core.models import Dataset
from data_alchemist.core.text_utils import is_blank, parse_int, to_text


class RuleDefinitionError(ValueError):
    """Raised when a business rule is missing parameters or has bad values."""


class RuleType(str, Enum):
    CO_RUN = "co-run"
    LOAD_LIMIT = "load-limit"
    PHASE_WINDOW = "phase-window"
    SKILL_REQUIREMENT = "skill-requirement"


@dataclass(frozen=True)
class RuleField:
    key: str
    label: str
    kind: str  # "text" | "number" | "select" | "multi-select"
    required: bool = True
    placeholder: str = ""
    minimum: int | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"key": self.key, "label": self.label, "type": self.kind}
        if self.placeholder:
            d["placeholder"] = self.placeholder
        if self.minimum is not None:
            d["min"] = self.minimum
        d["required"] = self.required
        return d


@dataclass(frozen=True)
class RuleTemplate:
    rule_type: RuleType
    name: str
    description: str
    fields: tuple[RuleField, ...]

    def to_dict(self) -> dict:
        return {
            "type": self.rule_type.value,
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }


def _description(placeholder: str) -> RuleField:
    return RuleField("description", "Description", "text", required=False, placeholder=placeholder)


RULE_TEMPLATES: dict[RuleType, RuleTemplate] = {
    RuleType.CO_RUN: RuleTemplate(
        RuleType.CO_RUN,
        "Co-run Rule",
        "Tasks that must run together",
        (
            RuleField("tasks", "Select Tasks", "multi-select"),
            _description("These tasks must run together"),
        ),
    ),
    RuleType.LOAD_LIMIT: RuleTemplate(
        RuleType.LOAD_LIMIT,
        "Load Limit Rule",
        "Maximum tasks per worker group per phase",
        (
            RuleField("workerGroup", "Worker Group", "select"),
            RuleField("maxTasks", "Max Tasks Per Phase", "number", minimum=1),
            _description("Limit workload for this group"),
        ),
    ),
    RuleType.PHASE_WINDOW: RuleTemplate(
        RuleType.PHASE_WINDOW,
        "Phase Window Rule",
        "Restrict when a task can run",
        (
            RuleField("taskId", "Task", "select"),
            RuleField("allowedPhases", "Allowed Phases", "text", placeholder="1,2,3 or 1-5"),
            _description("Task phase restrictions"),
        ),
    ),
    RuleType.SKILL_REQUIREMENT: RuleTemplate(
        RuleType.SKILL_REQUIREMENT,
        "Skill Requirement Rule",
        "Additional skill requirements for tasks",
        (
            RuleField("taskId", "Task", "select"),
            RuleField("requiredSkills", "Required Skills", "text", placeholder="skill1,skill2,skill3"),
            _description("Additional skill requirements"),
        ),
    ),
}


_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def _phase_number(text: str, part: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise RuleDefinitionError(f"Invalid phase {part!r}") from None


def parse_phase_spec(spec: str) -> list[int]:
    """Expand ``"1-3,5"`` into ``[1, 2, 3, 5]``.

    Ranges are inclusive; the result is sorted and de-duplicated. Raises
    RuleDefinitionError on anything that is not a positive phase number or range.
    """
    phases: set[int] = set()
    for part in str(spec).split(","):
        part = part.strip()
        if not part:
            continue
        m = _RANGE_RE.match(part)
        if m:
            low, high = _phase_number(m.group(1), part), _phase_number(m.group(2), part)
            if low < 1 or high < low:
                raise RuleDefinitionError(f"Invalid phase range {part!r}")
            phases.update(range(low, high + 1))
        elif part.isdigit():
            phase = _phase_number(part, part)
            if phase < 1:
                raise RuleDefinitionError(f"Invalid phase {part!r}")
            phases.add(phase)
        else:
            raise RuleDefinitionError(f"Invalid phase {part!r}")
    if not phases:
        raise RuleDefinitionError("At least one phase is required")
    return sorted(phases)


def split_list(value: Any) -> list[str]:
    """Comma-separated text or a list -> list of non-empty stripped strings."""
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return [s for s in (to_text(v).strip() for v in items) if s]


@dataclass(frozen=True)
class BusinessRule:
    id: str
    type: RuleType
    name: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "parameters": dict(self.parameters),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "BusinessRule":
        return make_rule(d.get("type", ""), d.get("name", ""), d.get("parameters") or {}, rule_id=d.get("id"))


def _normalize_parameters(rule_type: RuleType, params: Mapping[str, Any]) -> dict[str, Any]:
    template = RULE_TEMPLATES[rule_type]
    out: dict[str, Any] = {}
    for f in template.fields:
        value = params.get(f.key)
        if is_blank(value) or value == []:
            if f.required:
                raise RuleDefinitionError(f"{template.name}: '{f.label}' is required")
            continue
        if f.kind == "number":
            number = parse_int(value)
            if number is None or (f.minimum is not None and number < f.minimum):
                raise RuleDefinitionError(
                    f"{template.name}: '{f.label}' must be an integer >= {f.minimum}"
                )
            value = number
        elif f.kind == "multi-select":
            value = split_list(value)
        else:
            value = str(value).strip()
        out[f.key] = value

    if rule_type == RuleType.CO_RUN and len(out["tasks"]) < 2:
        raise RuleDefinitionError("Co-run Rule: select at least two tasks")
    if rule_type == RuleType.PHASE_WINDOW:
        parse_phase_spec(out["allowedPhases"])
    if rule_type == RuleType.SKILL_REQUIREMENT and not split_list(out["requiredSkills"]):
        raise RuleDefinitionError("Skill Requirement Rule: at least one skill is required")
    return out


def make_rule(
    rule_type: RuleType | str,
    name: str,
    parameters: Mapping[str, Any],
    rule_id: str | None = None,
) -> BusinessRule:
    """Build a validated BusinessRule; raise RuleDefinitionError if it is incomplete."""
    try:
        rule_type = RuleType(rule_type)
    except ValueError:
        raise RuleDefinitionError(f"Unknown rule type {rule_type!r}") from None
    if not name or not str(name).strip():
        raise RuleDefinitionError("A rule needs a name")
    return BusinessRule(
        id=rule_id or f"rule_{uuid.uuid4().hex[:12]}",
        type=rule_type,
        name=str(name).strip(),
        parameters=_normalize_parameters(rule_type, parameters),
    )


class RuleSet(Sequence[BusinessRule]):
    """Immutable ordered collection of business rules."""

    def __init__(self, rules: Sequence[BusinessRule] = ()) -> None:
        self._rules = tuple(rules)

    def __getitem__(self, index):  # type: ignore[override]
        return self._rules[index]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[BusinessRule]:
        return iter(self._rules)

    def add(self, rule: BusinessRule) -> "RuleSet":
        if any(r.id == rule.id for r in self._rules):
            raise RuleDefinitionError(f"Duplicate rule id {rule.id!r}")
        return RuleSet(self._rules + (rule,))

    def remove(self, rule_id: str) -> "RuleSet":
        return RuleSet(tuple(r for r in self._rules if r.id != rule_id))

    def of_type(self, rule_type: RuleType | str) -> list[BusinessRule]:
        rule_type = RuleType(rule_type)
        return [r for r in self._rules if r.type == rule_type]

    def to_list(self) -> list[dict]:
        return [r.to_dict() for r in self._rules]

    @classmethod
    def from_list(cls, items: Sequence[Mapping[str, Any]]) -> "RuleSet":
        rule_set = cls()
        for item in items:
            rule_set = rule_set.add(BusinessRule.from_dict(item))
        return rule_set


def rule_options(datasets: Mapping[str, Dataset | None]) -> dict[str, list[dict]]:
    """Choices offered by a rule editor for the currently loaded data.

    ``tasks``: one option per task (``"T1 - Design"``); ``workerGroups``:
    distinct non-blank worker group names in first-seen order.
    """
    tasks = datasets.get("tasks") or []
    workers = datasets.get("workers") or []

    task_options = [
        {
            "value": to_text(task.get("TaskID")),
            "label": f"{to_text(task.get('TaskID'))} - {to_text(task.get('TaskName'))}",
        }
        for task in tasks
        if not is_blank(task.get("TaskID"))
    ]

    groups: list[str] = []
    for worker in workers:
        # Sheets name the column either WorkerGroup or GroupTag.
        group = worker.get("WorkerGroup", worker.get("GroupTag"))
        if is_blank(group):
            continue
        text = to_text(group)
        if text not in groups:
            groups.append(text)

    return {
        "tasks": task_options,
        "workerGroups": [{"value": g, "label": g} for g in groups],
    }

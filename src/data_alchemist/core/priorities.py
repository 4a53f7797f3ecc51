"""Allocation priority weights, preset profiles and the exported config.

Presets ship as ``resources/profiles.yml``; a user YAML file with the same
layout can add profiles or override built-in ones.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

from data_alchemist.core.business_rules import BusinessRule
from data_alchemist.core.config_loader import load_yaml
from data_alchemist.core.models import Dataset
from data_alchemist.core.resources import get_builtin_profiles_path

_log = logging.getLogger(__name__)

WEIGHT_MIN = 0.0
WEIGHT_MAX = 3.0


@dataclass(frozen=True)
class PrioritySettings:
    """Relative importance of each allocation criterion, each in [0, 3]."""

    priorityLevel: float = 1.0
    taskFulfillment: float = 1.0
    fairness: float = 1.0
    efficiency: float = 1.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not WEIGHT_MIN <= value <= WEIGHT_MAX:
                raise ValueError(
                    f"{f.name} must be between {WEIGHT_MIN:g} and {WEIGHT_MAX:g}, got {value!r}"
                )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PrioritySettings":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown priority weight(s): {', '.join(sorted(unknown))}")
        return cls(**{k: float(v) for k, v in d.items()})

    def with_weight(self, key: str, value: float) -> "PrioritySettings":
        return PrioritySettings.from_dict({**self.to_dict(), key: value})


@dataclass(frozen=True)
class PresetProfile:
    key: str
    name: str
    description: str
    settings: PrioritySettings

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "values": self.settings.to_dict(),
        }


def load_profiles(overlay_path: Path | None = None) -> dict[str, PresetProfile]:
    """Return built-in presets merged with an optional user overlay file."""
    config = load_yaml(get_builtin_profiles_path(), overlay_path)
    profiles: dict[str, PresetProfile] = {}
    for key, raw in (config.get("profiles") or {}).items():
        try:
            settings = PrioritySettings.from_dict(raw.get("values") or {})
        except (TypeError, ValueError) as exc:
            _log.warning("Skipping priority profile %r: %s", key, exc)
            continue
        profiles[key] = PresetProfile(
            key=key,
            name=raw.get("name", key),
            description=raw.get("description", ""),
            settings=settings,
        )
    return profiles


def weight_shares(settings: PrioritySettings) -> dict[str, float]:
    """Percentage of the total weight held by each criterion (rounded to 0.1)."""
    weights = settings.to_dict()
    total = sum(weights.values())
    if total == 0:
        return {k: 0.0 for k in weights}
    return {k: round(v / total * 100, 1) for k, v in weights.items()}


def build_allocation_config(
    priorities: PrioritySettings,
    datasets: Mapping[str, Dataset | None],
    rules: Sequence[BusinessRule] = (),
    now: datetime | None = None,
) -> dict:
    """JSON-ready allocation config handed to the downstream scheduler."""
    now = now or datetime.now(tz=timezone.utc)
    return {
        "priorities": priorities.to_dict(),
        "datasets": {
            "clientsCount": len(datasets.get("clients") or []),
            "workersCount": len(datasets.get("workers") or []),
            "tasksCount": len(datasets.get("tasks") or []),
        },
        "rules": [rule.to_dict() for rule in rules],
        "timeStamp": now.isoformat(timespec="seconds"),
    }


def dump_allocation_config(config: Mapping[str, Any], path: Path) -> Path:
    path.write_text(json.dumps(config, ensure_ascii=False, indent=2), encoding="utf-8")
    _log.info("Allocation config written to %s", path)
    return path

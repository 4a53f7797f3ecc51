"""YAML loading with base + overlay deep merge."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path

import yaml


def deep_merge(base: dict, overlay: dict) -> dict:
    """Merge overlay into base. Overlay wins on scalar conflicts.

    Dicts are merged recursively. Lists are replaced (not concatenated).
    """
    result = deepcopy(base)
    for key, val in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = deep_merge(result[key], val)
        else:
            result[key] = deepcopy(val)
    return result


def load_yaml(base_path: Path, overlay_path: Path | None = None) -> dict:
    """Return the merged config dict; missing files count as empty."""
    config: dict = {}
    if base_path.exists():
        config = yaml.safe_load(base_path.read_text(encoding="utf-8")) or {}

    if overlay_path and overlay_path.exists():
        overlay = yaml.safe_load(overlay_path.read_text(encoding="utf-8")) or {}
        config = deep_merge(config, overlay)

    return config

"""importlib.resources helpers for accessing built-in resource files.

Works both in development (editable install) and in a packaged wheel.
"""

from __future__ import annotations

from pathlib import Path


def _resources_dir() -> Path:
    """Return the Path to the resources/ package directory."""
    import importlib.resources as _ir

    ref = _ir.files("data_alchemist.resources")
    # hatchling ships resources as data files, so this is a real directory.
    return Path(str(ref))


def get_builtin_profiles_path() -> Path:
    """Return the absolute Path to the built-in priority presets YAML."""
    return _resources_dir() / "profiles.yml"

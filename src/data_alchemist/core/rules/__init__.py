"""Auto-import all rule modules so their @registry.register decorators fire."""

from data_alchemist.core.rules import (  # noqa: F401
    clients,
    duplicates,
    required,
    tasks,
    workers,
)

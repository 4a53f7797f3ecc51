"""Command pattern for undoable cell edits.

All inline edits to a dataset go through a Command so that the undo/redo
stack stays consistent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, MutableMapping, Sequence

_ABSENT = object()  # marks a key that did not exist before the edit


class Command(ABC):
    """Abstract base for all undoable commands."""

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def undo(self) -> None: ...

    @property
    @abstractmethod
    def description(self) -> str: ...


class SetCellCommand(Command):
    """Set ``records[row][field] = new_value``; undo restores the previous state."""

    def __init__(
        self,
        records: Sequence[MutableMapping[str, Any]],
        row: int,
        field: str,
        new_value: Any,
    ) -> None:
        if not 0 <= row < len(records):
            raise IndexError(f"Row {row} out of range (dataset has {len(records)} rows)")
        self._records = records
        self._row = row
        self._field = field
        self._new_value = new_value
        self._old_value: Any = records[row].get(field, _ABSENT)

    @property
    def row(self) -> int:
        return self._row

    @property
    def field(self) -> str:
        return self._field

    def execute(self) -> None:
        self._records[self._row][self._field] = self._new_value

    def undo(self) -> None:
        record = self._records[self._row]
        if self._old_value is _ABSENT:
            record.pop(self._field, None)
        else:
            record[self._field] = self._old_value

    @property
    def description(self) -> str:
        old = "" if self._old_value is _ABSENT else self._old_value
        return f"Edit «{self._field}»[{self._row + 1}]: {old!r} → {self._new_value!r}"


class BulkSetCellCommand(Command):
    """Composite command wrapping multiple single-cell edits."""

    def __init__(self, commands: list[SetCellCommand], label: str = "Bulk edit") -> None:
        self._commands = commands
        self._label = label

    def execute(self) -> None:
        for cmd in self._commands:
            cmd.execute()

    def undo(self) -> None:
        for cmd in reversed(self._commands):
            cmd.undo()

    @property
    def description(self) -> str:
        return f"{self._label} ({len(self._commands)} cells)"

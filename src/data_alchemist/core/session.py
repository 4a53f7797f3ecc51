"""EditSession: one dataset being curated, with undo/redo and live validation."""

from __future__ import annotations

import logging
from typing import Any

from data_alchemist.core.commands import BulkSetCellCommand, SetCellCommand
from data_alchemist.core.engine import ValidationEngine
from data_alchemist.core.error_index import ErrorIndex
from data_alchemist.core.filters import search
from data_alchemist.core.history import EditHistory
from data_alchemist.core.models import Dataset, EntityType, Record, ValidationResult

_log = logging.getLogger(__name__)


class EditSession:
    """Own a private copy of *dataset* and re-validate it after every change.

    The caller's records are never modified. Undo and redo restore the
    result cached for that state rather than re-running the rules.
    """

    def __init__(
        self,
        dataset: Dataset,
        entity_type: EntityType | str,
        engine: ValidationEngine | None = None,
    ) -> None:
        self._entity_type = EntityType.parse(entity_type)
        self._records: list[dict[str, Any]] = [dict(r) for r in dataset]
        self._engine = engine or ValidationEngine()
        self._history = EditHistory(self._validate)
        self._index = ErrorIndex(self._history.result)

    def _validate(self) -> ValidationResult:
        return self._engine.validate(self._records, self._entity_type)

    def _sync(self) -> ValidationResult:
        result = self._history.result
        if self._index.result is not result:
            self._index = ErrorIndex(result)
        return result

    @property
    def entity_type(self) -> EntityType:
        return self._entity_type

    @property
    def records(self) -> list[dict[str, Any]]:
        return self._records

    @property
    def result(self) -> ValidationResult:
        return self._history.result

    @property
    def errors(self) -> ErrorIndex:
        return self._index

    @property
    def history(self) -> EditHistory:
        return self._history

    def revalidate(self) -> ValidationResult:
        """Re-check the records after changes made directly to ``records``.

        This clears the undo/redo history.
        """
        self._history.refresh()
        return self._sync()

    def set_cell(self, row: int, field: str, value: Any) -> ValidationResult:
        self._history.push(SetCellCommand(self._records, row, field, value))
        _log.debug("Set %s[%d] = %r", field, row, value)
        return self._sync()

    def set_cells(self, edits: list[tuple[int, str, Any]], label: str = "Bulk edit") -> ValidationResult:
        commands = [SetCellCommand(self._records, row, field, value) for row, field, value in edits]
        self._history.push(BulkSetCellCommand(commands, label=label))
        return self._sync()

    def undo(self) -> ValidationResult:
        self._history.undo()
        return self._sync()

    def redo(self) -> ValidationResult:
        self._history.redo()
        return self._sync()

    def search(self, query_text: str) -> list[Record]:
        return search(self._records, query_text)

"""EditHistory: undo/redo over cell edits, with the validation result of each state.

Every step remembers the ValidationResult before and after its command ran,
so stepping back and forth restores the cached result instead of running the
rules again. Only ``push`` and ``refresh`` call the validator.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable

from data_alchemist.core.commands import Command
from data_alchemist.core.models import ValidationResult

Validator = Callable[[], ValidationResult]


@dataclass(frozen=True)
class EditStep:
    """One applied command and the results on either side of it."""

    command: Command
    before: ValidationResult
    after: ValidationResult

    @property
    def description(self) -> str:
        return self.command.description


class EditHistory:
    """Bounded undo/redo stack that tracks the current ValidationResult.

    *validator* re-checks the records the commands operate on; it is called
    once at construction for the initial state.
    """

    def __init__(self, validator: Validator, max_depth: int = 500) -> None:
        self._validator = validator
        self._undo_stack: deque[EditStep] = deque(maxlen=max_depth)
        self._redo_stack: deque[EditStep] = deque(maxlen=max_depth)
        self._current = validator()

    @property
    def result(self) -> ValidationResult:
        return self._current

    def push(self, cmd: Command) -> EditStep:
        """Execute *cmd*, validate the new state and record the step. Clears redo."""
        before = self._current
        cmd.execute()
        step = EditStep(cmd, before, self._validator())
        self._undo_stack.append(step)
        self._redo_stack.clear()
        self._current = step.after
        return step

    def undo(self) -> EditStep | None:
        if not self._undo_stack:
            return None
        step = self._undo_stack.pop()
        step.command.undo()
        self._redo_stack.append(step)
        self._current = step.before
        return step

    def redo(self) -> EditStep | None:
        if not self._redo_stack:
            return None
        step = self._redo_stack.pop()
        step.command.execute()
        self._undo_stack.append(step)
        self._current = step.after
        return step

    def refresh(self) -> ValidationResult:
        """Re-validate the current state, e.g. after an edit made outside the history.

        Cached results of earlier steps are dropped with the stacks, since
        they no longer describe what undo/redo would restore.
        """
        self.clear()
        self._current = self._validator()
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def undo_description(self) -> str | None:
        return self._undo_stack[-1].description if self._undo_stack else None

    @property
    def redo_description(self) -> str | None:
        return self._redo_stack[-1].description if self._redo_stack else None

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

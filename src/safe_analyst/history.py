"""History manager — linear undo/redo over RuleSet snapshots.

Usage:
    history = HistoryManager()
    history.commit(add_or_update_rule(history.current(), rule))
    history.undo()               # back to the empty set
    history.redo()               # rule is back

A commit after an undo discards the redo branch.  Committing a set equal
to the current one records nothing.
"""

from __future__ import annotations
import logging

from .types import RuleSet

logger = logging.getLogger(__name__)


class HistoryManager:
    """Snapshot log plus cursor.  Not thread-safe: serialize commits."""

    __slots__ = ("_history", "_cursor")

    def __init__(self) -> None:
        self._history: list[RuleSet] = [RuleSet()]
        self._cursor = 0

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def current(self) -> RuleSet:
        return self._history[self._cursor]

    def commit(self, rule_set: RuleSet) -> bool:
        """Record ``rule_set`` as the new current state.

        Returns False (and records nothing) when it equals the current set.
        """
        if rule_set == self.current():
            logger.debug("Commit skipped: rule set unchanged")
            return False
        del self._history[self._cursor + 1:]
        self._history.append(rule_set)
        self._cursor = len(self._history) - 1
        logger.debug("Committed snapshot %d (%d rules)", self._cursor, len(rule_set))
        return True

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._cursor -= 1
        logger.debug("Undo -> snapshot %d", self._cursor)
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._cursor += 1
        logger.debug("Redo -> snapshot %d", self._cursor)
        return True

    def reset(self) -> None:
        """Forget everything; back to a single empty snapshot."""
        self._history = [RuleSet()]
        self._cursor = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._history) - 1

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._history)

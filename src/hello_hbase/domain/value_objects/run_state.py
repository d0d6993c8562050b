"""Lifecycle states of a walkthrough run."""

from __future__ import annotations

from enum import Enum, auto


class RunState(Enum):
    """Walkthrough run states.

    State machine:

        INIT ─> CONNECTED ─> TABLE_CREATED ─> WRITTEN ─> READ ─> SCANNED ─> DONE
          │         │              │             │         │        │
          └─────────┴──────────────┴─────┬───────┴─────────┴────────┘
                                         │ I/O failure
                                         v
                                    CLEANING_UP ─> FAILED

    A failed connect also goes through CLEANING_UP; the table may exist
    from an earlier run that died before cleaning up.
    """

    INIT = auto()
    CONNECTED = auto()
    TABLE_CREATED = auto()
    WRITTEN = auto()
    READ = auto()
    SCANNED = auto()
    DONE = auto()
    """All steps completed. Exit status 0."""

    CLEANING_UP = auto()
    """Best-effort removal of the table after a failure."""

    FAILED = auto()
    """Run failed. Exit status 1."""

    def is_terminal(self) -> bool:
        """Check if this is a terminal state (DONE or FAILED)."""
        return self in (RunState.DONE, RunState.FAILED)

    def can_transition_to(self, target: RunState) -> bool:
        """Check whether moving from this state to target is allowed."""
        return target in _TRANSITIONS[self]

    @property
    def exit_code(self) -> int:
        """Process exit status for a terminal state."""
        if not self.is_terminal():
            raise ValueError(f"{self.name} is not a terminal state")
        return 0 if self is RunState.DONE else 1


_TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.INIT: frozenset({RunState.CONNECTED, RunState.CLEANING_UP}),
    RunState.CONNECTED: frozenset({RunState.TABLE_CREATED, RunState.CLEANING_UP}),
    RunState.TABLE_CREATED: frozenset({RunState.WRITTEN, RunState.CLEANING_UP}),
    RunState.WRITTEN: frozenset({RunState.READ, RunState.CLEANING_UP}),
    RunState.READ: frozenset({RunState.SCANNED, RunState.CLEANING_UP}),
    RunState.SCANNED: frozenset({RunState.DONE, RunState.CLEANING_UP}),
    RunState.CLEANING_UP: frozenset({RunState.FAILED}),
    RunState.DONE: frozenset(),
    RunState.FAILED: frozenset(),
}

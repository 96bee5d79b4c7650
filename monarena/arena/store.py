"""
Arena Store - Single-writer home of the canonical arena state.

LIFECYCLE OF A MUTATING CALL (Non-Negotiable):
1. Acquire the store lock
2. Reducer applies the action to a working copy of the committed state;
   only the records the action edits are copied
3. Success -> the working copy becomes the committed state and the action is
   appended to the history log
   Failure -> the working copy is dropped; committed state is untouched
4. Release the lock

Every mutation is therefore atomic and totally ordered. Battles are
independent records, but all of them share the one lock, so operations
on the same battle always observe a single order.

Reads return deep copies; callers never hold references into live state.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar
import threading
import time
import uuid

from ..engine_core.action import Action, ActionType, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.state import ArenaState
from ..logging_config import get_logger, format_context

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class HistoryEntry:
    """One successfully applied action in the append-only log."""
    sequence: int
    action_id: str
    timestamp: float
    action_type: ActionType
    caller: str
    battle_id: int | None = None
    details: dict[str, Any] = field(default_factory=dict)
    changes: list[str] = field(default_factory=list)


class ArenaStore:
    """
    Lock-guarded keyed state store.

    Responsibilities:
    - Serialize all mutating actions
    - Commit or discard each action's result as a whole
    - Keep the history of applied actions
    """

    def __init__(self, reducer: Reducer | None = None, state: ArenaState | None = None):
        self._reducer = reducer or Reducer()
        self._state = state or ArenaState()
        self._history: list[HistoryEntry] = []
        self._lock = threading.RLock()

    def apply(self, action: Action) -> ActionResult:
        """
        Apply one action atomically.

        Returns the reducer's ActionResult. On success the committed state
        has already been replaced when this returns.
        """
        with self._lock:
            if action.action_id is None:
                action.action_id = str(uuid.uuid4())
            if action.timestamp is None:
                action.timestamp = time.time()

            result = self._reducer.apply(self._state, action)

            if not result.success:
                logger.warning(format_context(
                    "Action rejected",
                    {
                        **action.describe(),
                        "code": result.error_code,
                        "identifier": result.exception.identifier,
                    },
                ))
                return result

            self._state = result.new_state
            battle_id = action.payload.battle_id
            if action.action_type == ActionType.CHALLENGE:
                battle_id = result.value

            self._history.append(HistoryEntry(
                sequence=len(self._history),
                action_id=action.action_id,
                timestamp=action.timestamp,
                action_type=action.action_type,
                caller=action.payload.caller,
                battle_id=battle_id,
                details=action.describe(),
                changes=list(result.state_changes),
            ))
            logger.info(format_context("Action applied", action.describe()))
            return result

    def view(self, reader: Callable[[ArenaState], T]) -> T:
        """Run a read function against the committed state; returns a copy."""
        with self._lock:
            return deepcopy(reader(self._state))

    def history(self, battle_id: int | None = None) -> list[HistoryEntry]:
        """Applied actions in order, optionally only those for one battle."""
        with self._lock:
            entries = [
                e for e in self._history
                if battle_id is None or e.battle_id == battle_id
            ]
            return deepcopy(entries)

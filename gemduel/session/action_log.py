"""
Action Log - Append-only history with a cursor.

The current state is always the replay of actions[:cursor] from an empty
state. Undo and redo move the cursor; recording a new action drops the
redo tail. Undo/redo are disabled in online matches, where both peers must
replay exactly the same sequence.

Persistence is a JSON list of {"type", "payload"} entries.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any
import json
import logging

from ..engine_core.action import Action
from ..engine_core.codec import action_from_dict, action_to_dict
from ..engine_core.reducer import apply_action, replay
from ..engine_core.state import GameMode, GameState

logger = logging.getLogger(__name__)


class ActionLog:
    """
    History of dispatched actions.

    The state at the cursor is cached; undo and redo rebuild it by replay.
    """

    def __init__(self, actions: list[Action] | None = None):
        self._actions: list[Action] = list(actions or [])
        self._cursor = len(self._actions)
        self._state: GameState | None = replay(self._actions)

    @property
    def actions(self) -> list[Action]:
        return list(self._actions[: self._cursor])

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_state(self) -> GameState | None:
        return self._state

    def __len__(self) -> int:
        return self._cursor

    def _is_online(self) -> bool:
        return self._state is not None and self._state.mode == GameMode.ONLINE_MULTIPLAYER

    def record(self, action: Action, result: GameState | None = None) -> GameState | None:
        """
        Append an action at the cursor and return the new state.

        `result` may carry a state the caller already computed for this
        action (for example after a checksum comparison).
        """
        del self._actions[self._cursor:]
        self._actions.append(action)
        self._cursor += 1
        self._state = result if result is not None else apply_action(self._state, action)
        return self._state

    def clear_and_init(self, action: Action) -> GameState | None:
        """Start a new match: the log holds only this bootstrap action."""
        self._actions = [action]
        self._cursor = 1
        self._state = apply_action(None, action)
        return self._state

    def can_undo(self) -> bool:
        return self._cursor > 1 and not self._is_online()

    def can_redo(self) -> bool:
        return self._cursor < len(self._actions) and not self._is_online()

    def undo(self) -> GameState | None:
        if self._is_online():
            logger.warning("Undo is disabled in online matches")
            return self._state
        if self._cursor <= 1:
            return self._state
        self._cursor -= 1
        self._state = replay(self._actions[: self._cursor])
        return self._state

    def redo(self) -> GameState | None:
        if self._is_online():
            logger.warning("Redo is disabled in online matches")
            return self._state
        if self._cursor >= len(self._actions):
            return self._state
        self._state = apply_action(self._state, self._actions[self._cursor])
        self._cursor += 1
        return self._state

    def to_list(self) -> list[dict[str, Any]]:
        return [action_to_dict(a) for a in self.actions]

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_list(), indent=2))
        logger.info("Saved %d actions to %s", self._cursor, path)

    @classmethod
    def from_list(cls, entries: list[dict[str, Any]]) -> ActionLog:
        return cls([action_from_dict(entry) for entry in entries])

    @classmethod
    def load(cls, path: str | Path) -> ActionLog:
        entries = json.loads(Path(path).read_text())
        if not isinstance(entries, list):
            raise ValueError(f"{path}: expected a JSON list of actions")
        return cls.from_list(entries)

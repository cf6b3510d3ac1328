"""
Snapshot - Field-level copy-on-write drafts of a GameState.

Handlers mutate a StateDraft as if it were the state. The first time a
field is read through the draft it is deep-copied into the draft; fields
never touched are shared with the base snapshot. Gems, cards and royals
copy to themselves, so they are shared by every snapshot.

commit() produces the next snapshot in one step. The base state is never
mutated.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import fields, replace
from types import MethodType
from typing import Any

from .state import GameState

_FIELD_NAMES = frozenset(f.name for f in fields(GameState))


class StateDraft:
    """
    Mutable view over an immutable GameState.

    Properties and helper methods of GameState (opponent, gem_total, ...)
    are available and read the draft's values, not the base's.
    """

    __slots__ = ("_base", "_touched")

    def __init__(self, base: GameState):
        object.__setattr__(self, "_base", base)
        object.__setattr__(self, "_touched", {})

    def __getattr__(self, name: str) -> Any:
        touched = self._touched
        if name in touched:
            return touched[name]
        if name in _FIELD_NAMES:
            value = deepcopy(getattr(self._base, name))
            touched[name] = value
            return value

        attr = getattr(GameState, name, None)
        if isinstance(attr, property):
            return attr.fget(self)
        if callable(attr):
            return MethodType(attr, self)
        raise AttributeError(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in _FIELD_NAMES:
            raise AttributeError(f"GameState has no field {name!r}")
        self._touched[name] = value

    @property
    def base(self) -> GameState:
        return self._base

    @property
    def touched_fields(self) -> frozenset[str]:
        return frozenset(self._touched)

    def commit(self) -> GameState:
        """Build the next snapshot: touched fields from the draft, the rest shared."""
        return replace(self._base, **self._touched)


def produce(base: GameState, recipe) -> GameState:
    """Run `recipe(draft)` against a fresh draft of `base` and commit it."""
    draft = StateDraft(base)
    recipe(draft)
    return draft.commit()

"""
Modifier Resolver - Reads buff effects for a player.

All buff lookups in the engine go through here so that handlers never
touch the registry directly. Values are resolved from the player's
BuffAssignment (buff id + runtime state) in the current state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from ..games.gem_duel.buffs import Buff, get_buff
from .constants import (
    DEFAULT_CROWNS_GOAL,
    DEFAULT_GEM_CAP,
    DEFAULT_POINTS_GOAL,
    DEFAULT_SINGLE_COLOR_GOAL,
)


def buff_of(state, player: str) -> Buff:
    """Static buff template assigned to a player."""
    assignment = state.player_buffs.get(player)
    return get_buff(assignment.buff_id if assignment else None)


def buff_state(state, player: str) -> dict[str, Any]:
    """Runtime state dict of the player's buff (mutable on drafts)."""
    return state.player_buffs[player].state


def passive(state, player: str, key: str, default: Any = None) -> Any:
    return buff_of(state, player).effects.passive.get(key, default)


def has_active(state, player: str, name: str) -> bool:
    return buff_of(state, player).effects.active == name


def gem_cap(state, player: str) -> int:
    return passive(state, player, "gem_cap", DEFAULT_GEM_CAP)


def is_immune(state, player: str) -> bool:
    """Pacifist: protected from steals and extortion."""
    return bool(passive(state, player, "immune_negative", False))


@dataclass(frozen=True)
class WinThresholds:
    """Victory thresholds for one player after buff overrides."""
    points: int
    crowns: int
    single_color: int | None


def win_thresholds(state, player: str) -> WinThresholds:
    wc = buff_of(state, player).effects.win_condition
    single = None if wc.get("disable_single_color") else wc.get("single_color", DEFAULT_SINGLE_COLOR_GOAL)
    return WinThresholds(
        points=wc.get("points", DEFAULT_POINTS_GOAL),
        crowns=wc.get("crowns", DEFAULT_CROWNS_GOAL),
        single_color=single,
    )

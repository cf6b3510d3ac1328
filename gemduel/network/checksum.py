"""
State checksum for desync detection.

Only sync-relevant fields are hashed. Gem uids are left out on purpose:
peers compare board colours, so uid drift between mirrors does not count
as a desync.
"""

from __future__ import annotations
import json
from typing import Any

from ..engine_core.constants import PLAYERS
from ..engine_core.state import GameState

DJB2_SEED = 5381


def critical_fields(state: GameState) -> dict[str, Any]:
    return {
        "board": [[gem.color if gem else None for gem in row] for row in state.board],
        "turn": state.turn,
        "phase": state.phase.value,
        "mode": state.mode.value,
        "inventories": state.inventories,
        "privileges": state.privileges,
        "player_tableau": {pid: sorted(c.id for c in state.player_tableau[pid]) for pid in PLAYERS},
        "player_reserved": {pid: sorted(c.id for c in state.player_reserved[pid]) for pid in PLAYERS},
        "market": {
            str(level): [c.id if c else "null" for c in slots]
            for level, slots in state.market.items()
        },
        "royal_milestones": {
            pid: {str(k): v for k, v in milestones.items()}
            for pid, milestones in state.royal_milestones.items()
        },
        "extra_points": state.extra_points,
        "extra_crowns": state.extra_crowns,
        "player_buffs": {pid: state.player_buffs[pid].buff_id for pid in PLAYERS},
        "player_turn_counts": state.player_turn_counts,
    }


def djb2(text: str) -> int:
    """DJB2, xor variant, 32-bit unsigned."""
    h = DJB2_SEED
    for ch in text:
        h = ((h * 33) ^ ord(ch)) & 0xFFFFFFFF
    return h


def generate_state_hash(state: GameState | None) -> str:
    """Hex checksum of the critical fields; "null" for no state."""
    if state is None:
        return "null"
    canonical = json.dumps(critical_fields(state), sort_keys=True, separators=(",", ":"))
    return format(djb2(canonical), "x")

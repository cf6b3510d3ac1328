"""
Royal Court handlers.
"""

from __future__ import annotations
from typing import Any

from ..abilities import resolve_abilities
from ..constants import opponent_of
from ..state import GamePhase
from ..supply import add_feedback
from ..turn_manager import finalize_turn


def handle_select_royal_card(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.SELECT_ROYAL:
        draft.toast_message = "No royal card to pick."
        return
    card_id = payload.get("card_id")
    royal = next((r for r in draft.royal_deck if r.id == card_id), None)
    if royal is None:
        draft.toast_message = "Royal card not found."
        return

    player = draft.turn
    draft.royal_deck = [r for r in draft.royal_deck if r.id != card_id]
    draft.player_royals[player].append(royal)
    if royal.crowns > 0:
        add_feedback(draft, player, "crown", royal.crowns)

    next_player = draft.next_player_after_royal or opponent_of(player)
    draft.next_player_after_royal = None
    draft.phase = GamePhase.IDLE

    ctx = resolve_abilities(draft, player, royal.abilities, next_player)
    if not ctx.interrupted:
        finalize_turn(draft, ctx.next_player)


def handle_force_royal_selection(draft, payload: dict[str, Any]) -> None:
    if not draft.royal_deck:
        draft.toast_message = "The Royal Court is empty."
        return
    draft.phase = GamePhase.SELECT_ROYAL
    draft.next_player_after_royal = opponent_of(draft.turn)
    draft.pending_reserve = None
    draft.pending_buy = None
    draft.bonus_gem_target = None

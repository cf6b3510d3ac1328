"""
Miscellaneous handlers - Modals, buff actives and developer helpers.
"""

from __future__ import annotations
from typing import Any

from ..codec import card_to_dict
from ..modifiers import has_active
from ..supply import add_feedback, grant_privilege
from ..turn_manager import finalize_turn

PEEK_COUNT = 3


def handle_peek_deck(draft, payload: dict[str, Any]) -> None:
    """Spymaster: show the top cards of a deck without changing it."""
    player = draft.turn
    if not has_active(draft, player, "peek_deck"):
        draft.toast_message = "You cannot peek at decks."
        return
    try:
        level = int(payload.get("level"))
    except (TypeError, ValueError):
        draft.toast_message = "Unknown deck."
        return
    deck = draft.decks.get(level)
    if deck is None:
        draft.toast_message = "Unknown deck."
        return
    top = list(reversed(deck[-PEEK_COUNT:]))
    draft.active_modal = {
        "type": "PEEK",
        "data": {"cards": [card_to_dict(c) for c in top], "level": level, "initiator": player},
    }


def handle_close_modal(draft, payload: dict[str, Any]) -> None:
    draft.active_modal = None


def _target(draft, payload: dict[str, Any]) -> str:
    player = payload.get("player")
    return player if player in draft.inventories else draft.turn


def handle_debug_add_crowns(draft, payload: dict[str, Any]) -> None:
    player = _target(draft, payload)
    draft.extra_crowns[player] += 1
    add_feedback(draft, player, "crown", 1)
    finalize_turn(draft, draft.turn)


def handle_debug_add_points(draft, payload: dict[str, Any]) -> None:
    player = _target(draft, payload)
    draft.extra_points[player] += 1
    finalize_turn(draft, draft.turn)


def handle_debug_add_privilege(draft, payload: dict[str, Any]) -> None:
    grant_privilege(draft, _target(draft, payload))

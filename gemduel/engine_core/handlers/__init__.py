"""
Domain action handlers.

Each gameplay handler has the signature handler(draft, payload) -> None
and mutates a StateDraft. Bootstrap handlers (INIT, INIT_DRAFT) build a
new GameState from the payload instead.
"""

from .board import (
    handle_discard_gem,
    handle_replenish,
    handle_steal_gem,
    handle_take_bonus_gem,
    handle_take_gems,
)
from .market import (
    handle_buy_card,
    handle_cancel_reserve,
    handle_discard_reserved,
    handle_initiate_buy_joker,
    handle_initiate_reserve,
    handle_initiate_reserve_deck,
    handle_reserve_card,
    handle_reserve_deck,
)
from .royal import handle_force_royal_selection, handle_select_royal_card
from .privilege import handle_activate_privilege, handle_cancel_privilege, handle_use_privilege
from .draft import handle_debug_reroll_buffs, handle_init, handle_init_draft, handle_select_buff
from .misc import (
    handle_close_modal,
    handle_debug_add_crowns,
    handle_debug_add_points,
    handle_debug_add_privilege,
    handle_peek_deck,
)

__all__ = [
    "handle_discard_gem",
    "handle_replenish",
    "handle_steal_gem",
    "handle_take_bonus_gem",
    "handle_take_gems",
    "handle_buy_card",
    "handle_cancel_reserve",
    "handle_discard_reserved",
    "handle_initiate_buy_joker",
    "handle_initiate_reserve",
    "handle_initiate_reserve_deck",
    "handle_reserve_card",
    "handle_reserve_deck",
    "handle_force_royal_selection",
    "handle_select_royal_card",
    "handle_activate_privilege",
    "handle_cancel_privilege",
    "handle_use_privilege",
    "handle_debug_reroll_buffs",
    "handle_init",
    "handle_init_draft",
    "handle_select_buff",
    "handle_close_modal",
    "handle_debug_add_crowns",
    "handle_debug_add_points",
    "handle_debug_add_privilege",
    "handle_peek_deck",
]

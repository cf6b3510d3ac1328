"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Bootstrap actions (INIT, INIT_DRAFT) ignore the incoming state
- Sync actions (FORCE_SYNC, FLATTEN) replace the state wholesale
- Gameplay actions run a domain handler against a copy-on-write draft,
  committed as exactly one new snapshot
- Precondition failures surface as toast_message, never as exceptions
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
import logging

from .action import Action, ActionType, SYNC_ACTIONS
from .codec import state_from_dict
from .snapshot import StateDraft
from .state import GameMode, GameState
from . import handlers

logger = logging.getLogger(__name__)

# Actions still accepted after a winner is declared.
POST_GAME_ACTIONS = frozenset({ActionType.CLOSE_MODAL})


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState | None, action: Action) -> GameState | None:
        """
        Apply an action to the game state.

        Returns the next snapshot. The input state is never mutated.
        """
        action_type = action.action_type
        payload: dict[str, Any] = action.payload or {}

        if action_type == ActionType.INIT:
            return handlers.handle_init(payload)
        if action_type == ActionType.INIT_DRAFT:
            return handlers.handle_init_draft(payload)
        if action_type in SYNC_ACTIONS:
            return self._replace(payload)

        if state is None:
            logger.debug("Ignoring %s: no game in progress", action_type.value)
            return None

        if action_type in (ActionType.UNDO, ActionType.REDO):
            if state.mode == GameMode.ONLINE_MULTIPLAYER:
                logger.warning("%s is disabled in online matches", action_type.value)
            return state

        if state.winner is not None and action_type not in POST_GAME_ACTIONS:
            return state._copy_with(toast_message="The game is over.", last_feedback=None)

        handler = self._get_handler(action_type)
        if handler is None:
            logger.warning("No handler for action type: %s", action_type.value)
            return state

        draft = StateDraft(state)
        draft.last_feedback = None
        draft.toast_message = None
        try:
            handler(draft, payload)
        except (KeyError, TypeError, ValueError, IndexError):
            logger.exception("Rejected %s: handler failed on payload %r", action_type.value, payload)
            return state._copy_with(toast_message="Invalid action.", last_feedback=None)
        return draft.commit()

    def _replace(self, payload: dict[str, Any]) -> GameState:
        data = payload.get("state", payload)
        if isinstance(data, GameState):
            return data
        return state_from_dict(data)

    def _get_handler(self, action_type: ActionType) -> Callable | None:
        """Get the handler function for an action type."""
        handler_map = {
            ActionType.TAKE_GEMS: handlers.handle_take_gems,
            ActionType.REPLENISH: handlers.handle_replenish,
            ActionType.TAKE_BONUS_GEM: handlers.handle_take_bonus_gem,
            ActionType.STEAL_GEM: handlers.handle_steal_gem,
            ActionType.DISCARD_GEM: handlers.handle_discard_gem,
            ActionType.INITIATE_BUY_JOKER: handlers.handle_initiate_buy_joker,
            ActionType.BUY_CARD: handlers.handle_buy_card,
            ActionType.INITIATE_RESERVE: handlers.handle_initiate_reserve,
            ActionType.INITIATE_RESERVE_DECK: handlers.handle_initiate_reserve_deck,
            ActionType.RESERVE_CARD: handlers.handle_reserve_card,
            ActionType.RESERVE_DECK: handlers.handle_reserve_deck,
            ActionType.CANCEL_RESERVE: handlers.handle_cancel_reserve,
            ActionType.DISCARD_RESERVED: handlers.handle_discard_reserved,
            ActionType.SELECT_ROYAL_CARD: handlers.handle_select_royal_card,
            ActionType.FORCE_ROYAL_SELECTION: handlers.handle_force_royal_selection,
            ActionType.ACTIVATE_PRIVILEGE: handlers.handle_activate_privilege,
            ActionType.USE_PRIVILEGE: handlers.handle_use_privilege,
            ActionType.CANCEL_PRIVILEGE: handlers.handle_cancel_privilege,
            ActionType.SELECT_BUFF: handlers.handle_select_buff,
            ActionType.PEEK_DECK: handlers.handle_peek_deck,
            ActionType.CLOSE_MODAL: handlers.handle_close_modal,
            ActionType.DEBUG_ADD_CROWNS: handlers.handle_debug_add_crowns,
            ActionType.DEBUG_ADD_POINTS: handlers.handle_debug_add_points,
            ActionType.DEBUG_ADD_PRIVILEGE: handlers.handle_debug_add_privilege,
            ActionType.DEBUG_REROLL_BUFFS: handlers.handle_debug_reroll_buffs,
        }
        return handler_map.get(action_type)


_REDUCER = Reducer()


def apply_action(state: GameState | None, action: Action) -> GameState | None:
    """
    Convenience function to apply an action.

    Uses a shared stateless Reducer.
    """
    return _REDUCER.apply(state, action)


def replay(actions, state: GameState | None = None) -> GameState | None:
    """Fold a sequence of actions over `state` (empty by default)."""
    for action in actions:
        state = apply_action(state, action)
    return state

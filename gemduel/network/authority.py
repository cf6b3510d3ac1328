"""
Host authority - Turn ownership checks for actions from a peer.

The host is the single source of truth. A peer action is accepted only when
it is a bootstrap action, or when it is that peer's turn. Sync actions
replace the whole state, so only the host player may issue them.
"""

from __future__ import annotations
import logging

from ..engine_core.action import Action, BOOTSTRAP_ACTIONS, SYNC_ACTIONS
from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

HOST_PLAYER = "p1"


def validate_online_action(state: GameState | None, action: Action, acting_player: str = "p2") -> bool:
    """Return True if `acting_player` may dispatch `action` against `state`."""
    if action.action_type in BOOTSTRAP_ACTIONS:
        return True
    if action.action_type in SYNC_ACTIONS:
        if acting_player != HOST_PLAYER:
            logger.warning("Host rejected request: %s may only come from the host", action.action_type.value)
            return False
        return True
    if state is None:
        logger.warning("Host rejected request: %s received before the match started", action.action_type.value)
        return False
    if state.turn != acting_player:
        logger.warning(
            "Host rejected request: Action %s received during %s's turn",
            action.action_type.value,
            state.turn,
        )
        return False
    return True

"""
Action System - Action types and the Action record.

Actions represent:
1. Bootstrap actions (INIT, INIT_DRAFT)
2. Sync actions that replace state wholesale (FORCE_SYNC, FLATTEN)
3. Gameplay actions handled by the domain handlers
4. Developer helpers (DEBUG_*)

All state changes flow through actions. Every random outcome is resolved
by the caller and carried in the payload, so applying the same action list
always produces the same state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Bootstrap
    INIT = "INIT"
    INIT_DRAFT = "INIT_DRAFT"

    # Sync
    FORCE_SYNC = "FORCE_SYNC"
    FLATTEN = "FLATTEN"

    # Board
    TAKE_GEMS = "TAKE_GEMS"
    REPLENISH = "REPLENISH"
    TAKE_BONUS_GEM = "TAKE_BONUS_GEM"
    STEAL_GEM = "STEAL_GEM"
    DISCARD_GEM = "DISCARD_GEM"

    # Market
    INITIATE_BUY_JOKER = "INITIATE_BUY_JOKER"
    BUY_CARD = "BUY_CARD"
    INITIATE_RESERVE = "INITIATE_RESERVE"
    INITIATE_RESERVE_DECK = "INITIATE_RESERVE_DECK"
    RESERVE_CARD = "RESERVE_CARD"
    RESERVE_DECK = "RESERVE_DECK"
    CANCEL_RESERVE = "CANCEL_RESERVE"
    DISCARD_RESERVED = "DISCARD_RESERVED"

    # Royal court
    SELECT_ROYAL_CARD = "SELECT_ROYAL_CARD"
    FORCE_ROYAL_SELECTION = "FORCE_ROYAL_SELECTION"

    # Privileges
    ACTIVATE_PRIVILEGE = "ACTIVATE_PRIVILEGE"
    USE_PRIVILEGE = "USE_PRIVILEGE"
    CANCEL_PRIVILEGE = "CANCEL_PRIVILEGE"

    # Draft and buff actives
    SELECT_BUFF = "SELECT_BUFF"
    PEEK_DECK = "PEEK_DECK"
    CLOSE_MODAL = "CLOSE_MODAL"

    # Developer helpers
    DEBUG_ADD_CROWNS = "DEBUG_ADD_CROWNS"
    DEBUG_ADD_POINTS = "DEBUG_ADD_POINTS"
    DEBUG_ADD_PRIVILEGE = "DEBUG_ADD_PRIVILEGE"
    DEBUG_REROLL_BUFFS = "DEBUG_REROLL_BUFFS"

    # History (owned by the action log, no-ops in the reducer)
    UNDO = "UNDO"
    REDO = "REDO"


BOOTSTRAP_ACTIONS = frozenset({ActionType.INIT, ActionType.INIT_DRAFT})
SYNC_ACTIONS = frozenset({ActionType.FORCE_SYNC, ActionType.FLATTEN})


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Logged for replay
    - Sent over the wire in online play (never the resulting state)
    - Applied atomically by the reducer

    The payload is a plain mapping; each handler reads the keys it needs.
    """
    action_type: ActionType
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float | None = None
    action_id: str | None = None

    @property
    def is_bootstrap(self) -> bool:
        return self.action_type in BOOTSTRAP_ACTIONS

    @classmethod
    def take_gems(cls, coords: list[tuple[int, int]]) -> Action:
        """Factory for taking gems from the board."""
        return cls(
            action_type=ActionType.TAKE_GEMS,
            payload={"coords": [{"r": r, "c": c} for r, c in coords]},
        )

    @classmethod
    def replenish(cls, randoms: dict[str, Any] | None = None) -> Action:
        """Factory for replenishing the board."""
        return cls(action_type=ActionType.REPLENISH, payload={"randoms": randoms or {}})

    @classmethod
    def buy_card(
        cls,
        card_id: str,
        source: str = "market",
        market_info: dict[str, Any] | None = None,
        bonus_color: str | None = None,
        randoms: dict[str, Any] | None = None,
    ) -> Action:
        """Factory for buying a market or reserved card."""
        payload: dict[str, Any] = {
            "card_id": card_id,
            "source": source,
            "randoms": randoms or {},
        }
        if market_info is not None:
            payload["market_info"] = market_info
        if bonus_color is not None:
            payload["bonus_color"] = bonus_color
        return cls(action_type=ActionType.BUY_CARD, payload=payload)

    @classmethod
    def reserve_card(
        cls,
        card_id: str,
        level: int,
        idx: int,
        gold_coords: tuple[int, int] | None = None,
        is_extra: bool = False,
        extra_idx: int | None = None,
        randoms: dict[str, Any] | None = None,
    ) -> Action:
        """Factory for reserving a card from the market."""
        payload: dict[str, Any] = {
            "card_id": card_id,
            "level": level,
            "idx": idx,
            "randoms": randoms or {},
        }
        if gold_coords is not None:
            payload["gold_coords"] = {"r": gold_coords[0], "c": gold_coords[1]}
        if is_extra:
            payload["is_extra"] = True
            payload["extra_idx"] = extra_idx
        return cls(action_type=ActionType.RESERVE_CARD, payload=payload)

    @classmethod
    def reserve_deck(
        cls,
        level: int,
        gold_coords: tuple[int, int] | None = None,
        randoms: dict[str, Any] | None = None,
    ) -> Action:
        """Factory for reserving the top card of a deck."""
        payload: dict[str, Any] = {"level": level, "randoms": randoms or {}}
        if gold_coords is not None:
            payload["gold_coords"] = {"r": gold_coords[0], "c": gold_coords[1]}
        return cls(action_type=ActionType.RESERVE_DECK, payload=payload)

    @classmethod
    def use_privilege(cls, r: int, c: int) -> Action:
        return cls(action_type=ActionType.USE_PRIVILEGE, payload={"r": r, "c": c})

    @classmethod
    def take_bonus_gem(cls, r: int, c: int) -> Action:
        return cls(action_type=ActionType.TAKE_BONUS_GEM, payload={"r": r, "c": c})

    @classmethod
    def steal_gem(cls, color: str) -> Action:
        return cls(action_type=ActionType.STEAL_GEM, payload={"color": color})

    @classmethod
    def discard_gem(cls, color: str) -> Action:
        return cls(action_type=ActionType.DISCARD_GEM, payload={"color": color})

    @classmethod
    def select_royal(cls, card_id: str) -> Action:
        return cls(action_type=ActionType.SELECT_ROYAL_CARD, payload={"card_id": card_id})

    @classmethod
    def select_buff(
        cls,
        buff_id: str,
        random_color: str | None = None,
        p2_draft_pool_indices: list[int] | None = None,
    ) -> Action:
        """Factory for a draft pick."""
        payload: dict[str, Any] = {"buff_id": buff_id}
        if random_color is not None:
            payload["random_color"] = random_color
        if p2_draft_pool_indices is not None:
            payload["p2_draft_pool_indices"] = list(p2_draft_pool_indices)
        return cls(action_type=ActionType.SELECT_BUFF, payload=payload)

    @classmethod
    def simple(cls, action_type: ActionType) -> Action:
        """Factory for payload-free actions (CANCEL_*, CLOSE_MODAL, ...)."""
        return cls(action_type=action_type, payload={})

"""
Game State - The complete, immutable-by-convention snapshot of a match.

Design principles:
- One snapshot per action: the reducer never edits a committed state
- Serializable: codec.py converts to/from JSON-safe dicts for sync and replay
- Runtime buff state lives here, never in the static buff registry
- Gems and cards are frozen leaves that snapshots can share freely
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
from copy import deepcopy
from enum import Enum

from .constants import (
    GEM_COLORS,
    GRID_SIZE,
    MARKET_SLOTS,
    PLAYERS,
    ROYAL_MILESTONES,
    opponent_of,
)


class GamePhase(Enum):
    """Turn-level phases of the state machine."""
    IDLE = "IDLE"
    RESERVE_WAITING_GEM = "RESERVE_WAITING_GEM"
    SELECT_CARD_COLOR = "SELECT_CARD_COLOR"
    BONUS_ACTION = "BONUS_ACTION"
    STEAL_ACTION = "STEAL_ACTION"
    PRIVILEGE_ACTION = "PRIVILEGE_ACTION"
    DISCARD_EXCESS_GEMS = "DISCARD_EXCESS_GEMS"
    SELECT_ROYAL = "SELECT_ROYAL"
    DRAFT_PHASE = "DRAFT_PHASE"
    GAME_OVER = "GAME_OVER"


class GameMode(Enum):
    """Match type."""
    LOCAL_PVP = "LOCAL_PVP"
    PVE = "PVE"
    ONLINE_MULTIPLAYER = "ONLINE_MULTIPLAYER"


class Ability(Enum):
    """Closed set of card abilities."""
    AGAIN = "again"
    STEAL = "steal"
    BONUS_GEM = "bonus_gem"
    SCROLL = "scroll"


@dataclass(frozen=True)
class Gem:
    """A gem instance. The uid is unique within a match."""
    color: str
    uid: str

    def __deepcopy__(self, memo):
        return self


@dataclass(frozen=True)
class Card:
    """
    A development card instance.

    The id is the instance id assigned when the card entered a deck;
    template_id names the static card it was created from.
    """
    id: str
    level: int
    cost: dict[str, int] = field(default_factory=dict)
    points: int = 0
    crowns: int = 0
    bonus_color: str | None = None
    bonus_count: int = 1
    abilities: tuple[Ability, ...] = ()
    is_buff: bool = False
    template_id: str | None = None

    @property
    def is_joker(self) -> bool:
        return self.bonus_color == "gold"

    def __deepcopy__(self, memo):
        return self


@dataclass(frozen=True)
class RoyalCard:
    """A card from the Royal Court."""
    id: str
    points: int = 0
    crowns: int = 0
    abilities: tuple[Ability, ...] = ()
    label: str = ""

    def __deepcopy__(self, memo):
        return self


@dataclass
class BuffAssignment:
    """
    A buff assigned to one player for one match.

    `state` is created empty at assignment and is owned by this
    player-buff pairing only (counters, one-shot flags).
    """
    buff_id: str = "none"
    state: dict[str, Any] = field(default_factory=dict)


def empty_inventory() -> dict[str, int]:
    """Zeroed inventory covering every gem colour."""
    return {color: 0 for color in GEM_COLORS}


def empty_board() -> list[list[Gem | None]]:
    return [[None for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def _per_player(factory) -> dict[str, Any]:
    return {pid: factory() for pid in PLAYERS}


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    # Board and supply
    board: list[list[Gem | None]] = field(default_factory=empty_board)
    bag: list[Gem] = field(default_factory=list)

    # Turn and phase
    turn: str = "p1"
    phase: GamePhase = GamePhase.IDLE
    mode: GameMode = GameMode.LOCAL_PVP
    winner: str | None = None

    # Cards
    decks: dict[int, list[Card]] = field(
        default_factory=lambda: {level: [] for level in MARKET_SLOTS}
    )
    market: dict[int, list[Card | None]] = field(
        default_factory=lambda: {level: [] for level in MARKET_SLOTS}
    )
    player_tableau: dict[str, list[Card]] = field(default_factory=lambda: _per_player(list))
    player_reserved: dict[str, list[Card]] = field(default_factory=lambda: _per_player(list))
    royal_deck: list[RoyalCard] = field(default_factory=list)
    player_royals: dict[str, list[RoyalCard]] = field(default_factory=lambda: _per_player(list))
    royal_milestones: dict[str, dict[int, bool]] = field(
        default_factory=lambda: _per_player(lambda: {m: False for m in ROYAL_MILESTONES})
    )
    player_turn_counts: dict[str, int] = field(default_factory=lambda: _per_player(int))

    # Gems and tokens
    inventories: dict[str, dict[str, int]] = field(
        default_factory=lambda: _per_player(empty_inventory)
    )
    privileges: dict[str, int] = field(default_factory=lambda: {"p1": 0, "p2": 1})
    extra_privileges: dict[str, int] = field(default_factory=lambda: _per_player(int))
    extra_allocation: dict[str, dict[str, int]] = field(
        default_factory=lambda: _per_player(empty_inventory)
    )

    # Scoring adjustments
    extra_points: dict[str, int] = field(default_factory=lambda: _per_player(int))
    extra_crowns: dict[str, int] = field(default_factory=lambda: _per_player(int))

    # Buffs and draft
    player_buffs: dict[str, BuffAssignment] = field(
        default_factory=lambda: _per_player(BuffAssignment)
    )
    draft_pool: list[str] = field(default_factory=list)
    p2_draft_pool: list[str] = field(default_factory=list)
    draft_order: list[str] = field(default_factory=list)
    buff_level: int = 0
    is_pve: bool = False
    pending_setup: dict[str, Any] | None = None

    # Two-step intents and interrupts
    pending_reserve: dict[str, Any] | None = None
    pending_buy: dict[str, Any] | None = None
    bonus_gem_target: str | None = None
    next_player_after_royal: str | None = None
    privilege_gem_count: int = 0

    # Transient, per-action feedback
    active_modal: dict[str, Any] | None = None
    last_feedback: list[dict[str, Any]] | None = None
    toast_message: str | None = None

    # Counter for uids of gems created during play (returned to the bag)
    gem_serial: int = 0

    @property
    def opponent(self) -> str:
        return opponent_of(self.turn)

    @property
    def effective_phase(self) -> GamePhase:
        """Phase as seen by callers: GAME_OVER once a winner exists."""
        if self.winner is not None:
            return GamePhase.GAME_OVER
        return self.phase

    def gem_total(self, player: str) -> int:
        return sum(self.inventories[player].values())

    def cell(self, r: int, c: int) -> Gem | None:
        return self.board[r][c]

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

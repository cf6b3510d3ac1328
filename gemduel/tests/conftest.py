"""
Pytest fixtures for Gem Duel tests.
"""

import pytest
from itertools import count

from ..engine_core.action import Action
from ..engine_core.constants import PLAYERS
from ..engine_core.reducer import apply_action
from ..engine_core.state import BuffAssignment, Card, GameState, Gem, empty_board
from ..games.gem_duel.cards import ROYAL_CARDS
from ..games.gem_duel.setup import create_init_action


@pytest.fixture
def gem_factory():
    """Create gems with unique uids: gem_factory("blue")."""
    serial = count()

    def make(color: str) -> Gem:
        return Gem(color=color, uid=f"{color}-t{next(serial)}")

    return make


@pytest.fixture
def make_state(gem_factory):
    """
    Build a GameState for handler tests.

    Keyword arguments:
    - board: {(r, c): color}
    - bag: list of colours
    - inventories: {pid: {color: n}}
    - buffs: {pid: buff_id}
    - market: {level: [Card | None, ...]}
    - any other GameState field
    """

    def make(board=None, bag=None, inventories=None, buffs=None, market=None, **fields) -> GameState:
        state = GameState(royal_deck=list(ROYAL_CARDS))
        grid = empty_board()
        for (r, c), color in (board or {}).items():
            grid[r][c] = gem_factory(color)
        state.board = grid
        state.bag = [gem_factory(color) for color in (bag or [])]
        for pid, inv in (inventories or {}).items():
            state.inventories[pid].update(inv)
        for pid, buff_id in (buffs or {}).items():
            state.player_buffs[pid] = BuffAssignment(buff_id=buff_id)
        for level, slots in (market or {}).items():
            state.market[level] = list(slots)
        for name, value in fields.items():
            setattr(state, name, value)
        return state

    return make


@pytest.fixture
def card_factory():
    """Create a Card: card_factory("c1", level=2, cost={...}, points=1)."""

    def make(card_id: str, level: int = 1, cost=None, **kwargs) -> Card:
        kwargs.setdefault("bonus_color", "blue")
        return Card(id=card_id, level=level, cost=dict(cost or {}), **kwargs)

    return make


@pytest.fixture
def started_state() -> GameState:
    """A seeded match right after INIT, no buffs."""
    return apply_action(None, create_init_action(seed=7))


def total_gems(state: GameState) -> int:
    """Gems on the board, in the bag and in both inventories."""
    on_board = sum(1 for row in state.board for gem in row if gem is not None)
    held = sum(sum(state.inventories[pid].values()) for pid in PLAYERS)
    return on_board + len(state.bag) + held


def extra_allocated(state: GameState) -> int:
    return sum(sum(state.extra_allocation[pid].values()) for pid in PLAYERS)


@pytest.fixture
def gem_totals():
    """(total_gems, extra_allocated) counters for conservation checks."""
    return total_gems, extra_allocated


@pytest.fixture
def dispatch():
    """Apply a sequence of actions and return the final state."""

    def run(state, *actions: Action):
        for action in actions:
            state = apply_action(state, action)
        return state

    return run

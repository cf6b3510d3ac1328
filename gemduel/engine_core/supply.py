"""
Supply helpers - Gems, privileges and feedback on a draft.

Every function here mutates the draft it is given. They are the only
places that move gems between board, bag and inventories, so the
extra-allocation bookkeeping stays in one spot:

- Gems granted by buffs (not taken from the board or bag) are recorded in
  extra_allocation[player]. When such a gem is spent or discarded it
  vanishes instead of returning to the bag.
"""

from __future__ import annotations
from typing import Iterable

from .constants import BASIC_COLORS, PRIVILEGE_POOL, opponent_of
from .state import Gem


def add_feedback(draft, player: str, kind: str, diff: int) -> None:
    """Accumulate a {player, type, diff} item for presentation layers."""
    items = draft.last_feedback
    if items is None:
        items = []
        draft.last_feedback = items
    for item in items:
        if item["player"] == player and item["type"] == kind:
            item["diff"] += diff
            return
    items.append({"player": player, "type": kind, "diff": diff})


def grant_privilege(draft, player: str) -> bool:
    """
    Give `player` one standard privilege.

    The shared pool holds 3 scrolls. When it is exhausted the scroll is
    taken from the other player; if they hold none nothing happens.
    """
    other = opponent_of(player)
    privileges = draft.privileges
    if privileges[player] + privileges[other] < PRIVILEGE_POOL:
        privileges[player] += 1
    elif privileges[other] > 0:
        privileges[other] -= 1
        privileges[player] += 1
        add_feedback(draft, other, "privilege", -1)
    else:
        return False
    add_feedback(draft, player, "privilege", 1)
    return True


def new_gem(draft, color: str) -> Gem:
    """Create a gem with a match-unique, replay-stable uid."""
    serial = draft.gem_serial + 1
    draft.gem_serial = serial
    return Gem(color=color, uid=f"{color}-r{serial}")


def grant_extra_gem(draft, player: str, color: str, amount: int = 1) -> None:
    """Give buff-created gems; they are tracked as extra allocation."""
    if amount <= 0:
        return
    draft.inventories[player][color] += amount
    draft.extra_allocation[player][color] += amount
    add_feedback(draft, player, color, amount)


def release_gems(draft, player: str, color: str, amount: int) -> None:
    """
    Remove gems a player has already had deducted from their inventory.

    Extra-allocation gems are consumed first and vanish; the rest go back
    to the bag.
    """
    if amount <= 0:
        return
    allocation = draft.extra_allocation[player]
    consumed = min(allocation.get(color, 0), amount)
    allocation[color] = allocation.get(color, 0) - consumed
    bag = draft.bag
    for _ in range(amount - consumed):
        bag.append(new_gem(draft, color))


def pick_color(candidate: str | None, allowed: Iterable[str] = BASIC_COLORS) -> str:
    """
    Resolve a caller-supplied colour.

    Payloads carry every random outcome. When one is missing or invalid
    the first allowed colour is used so that replays stay deterministic.
    """
    allowed = list(allowed)
    if candidate in allowed:
        return candidate
    return allowed[0]


def take_from_board(draft, player: str, r: int, c: int) -> Gem | None:
    gem = draft.board[r][c]
    if gem is None:
        return None
    draft.board[r][c] = None
    draft.inventories[player][gem.color] += 1
    add_feedback(draft, player, gem.color, 1)
    return gem


def board_has(state, predicate) -> bool:
    return any(gem is not None and predicate(gem) for row in state.board for gem in row)

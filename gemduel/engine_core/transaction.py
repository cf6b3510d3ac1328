"""
Transaction Calculator - What a card costs a player right now.

Order of application:
1. Tableau bonuses reduce the cost of their colour (never pearl or gold)
2. Flat buff discounts reduce the remaining costs, pearl included, in the
   card's cost order: discount_any (levels 2-3), l3_discount (level 3,
   until 3 level-3 cards were bought), reserved_discount (reserved only)
3. Each colour is paid from held gems; the shortfall is covered by gold
4. All-Seeing Eye halves the level-3 gold shortfall, rounding up
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

from ..games.gem_duel.buffs import get_buff
from .constants import GOLD
from .selectors import bonus_counts
from .state import BuffAssignment, Card


@dataclass
class Transaction:
    """Outcome of a purchase check."""
    affordable: bool
    gold_cost: int = 0
    gems_paid: dict[str, int] = field(default_factory=dict)


def _flat_discounts(card: Card, assignment: BuffAssignment | None, is_reserved: bool) -> list[int]:
    if assignment is None:
        return []
    effects = get_buff(assignment.buff_id).effects.passive
    amounts = []
    if effects.get("discount_any") and card.level in (2, 3):
        amounts.append(effects["discount_any"])
    if effects.get("l3_discount") and card.level == 3:
        if assignment.state.get("l3_purchased_count", 0) < 3:
            amounts.append(effects["l3_discount"])
    if effects.get("reserved_discount") and is_reserved:
        amounts.append(effects["reserved_discount"])
    return amounts


def calculate_transaction(
    card: Card,
    inventory: dict[str, int],
    tableau: Iterable[Card],
    buff: BuffAssignment | None = None,
    is_reserved: bool = False,
) -> Transaction:
    """
    Compute the payment for `card`.

    Returns a Transaction with the gold needed and the non-gold gems that
    would be spent. Nothing is mutated.
    """
    bonuses = bonus_counts(tableau)

    remaining: dict[str, int] = {}
    for color, amount in card.cost.items():
        if amount <= 0:
            continue
        remaining[color] = max(0, amount - bonuses.get(color, 0))

    for discount in _flat_discounts(card, buff, is_reserved):
        for color in remaining:
            if discount <= 0:
                break
            if remaining[color] <= 0:
                continue
            cut = min(discount, remaining[color])
            remaining[color] -= cut
            discount -= cut

    gems_paid: dict[str, int] = {}
    shortfall = 0
    for color, needed in remaining.items():
        held = inventory.get(color, 0)
        paid = min(needed, held)
        if paid > 0:
            gems_paid[color] = paid
        shortfall += needed - paid

    if shortfall and card.level == 3 and buff is not None:
        if get_buff(buff.buff_id).effects.passive.get("gold_buff"):
            shortfall = (shortfall + 1) // 2

    return Transaction(
        affordable=inventory.get(GOLD, 0) >= shortfall,
        gold_cost=shortfall,
        gems_paid=gems_paid,
    )

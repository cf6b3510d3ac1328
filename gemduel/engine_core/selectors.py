"""
Selectors - Derived values read from a state (or a draft).
"""

from __future__ import annotations

from .constants import BONUS_COLORS
from .modifiers import passive


def player_score(state, player: str) -> int:
    """Card points + royal points + extra points + Greed King bonus."""
    tableau = state.player_tableau[player]
    royals = state.player_royals[player]
    score = sum(c.points for c in tableau) + sum(r.points for r in royals)
    score += state.extra_points.get(player, 0)
    score += (len(tableau) + len(royals)) * passive(state, player, "point_bonus", 0)
    return score


def crown_count(state, player: str) -> int:
    cards = list(state.player_tableau[player]) + list(state.player_royals[player])
    return sum(c.crowns for c in cards) + state.extra_crowns.get(player, 0)


def color_points(state, player: str) -> dict[str, int]:
    """Points per bonus colour, ignoring buff virtual cards."""
    totals = {color: 0 for color in BONUS_COLORS}
    for card in state.player_tableau[player]:
        if card.is_buff or card.bonus_color not in totals:
            continue
        totals[card.bonus_color] += card.points
    return totals


def bonus_counts(tableau) -> dict[str, int]:
    """Per-colour discount granted by a tableau (virtual cards included)."""
    totals = {color: 0 for color in BONUS_COLORS}
    for card in tableau:
        if card.bonus_color in totals:
            totals[card.bonus_color] += card.bonus_count
    return totals

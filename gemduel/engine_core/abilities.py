"""
Ability resolution - AGAIN > STEAL > BONUS_GEM > SCROLL.

Abilities are resolved through an ordered table of (ability, predicate,
effect) rows. A row runs only when the card carries the ability and its
predicate holds; otherwise the ability is skipped with a toast. An effect
that opens an interrupt phase stops resolution, and the pending next
player is parked in next_player_after_royal until the interrupt closes.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable

from .constants import BASIC_COLORS, GOLD, opponent_of
from .modifiers import is_immune
from .state import Ability, GamePhase
from .supply import board_has, grant_privilege


@dataclass
class AbilityContext:
    draft: object
    player: str
    next_player: str
    bonus_color: str | None = None
    interrupted: bool = False


def _always(ctx: AbilityContext) -> bool:
    return True


def _again(ctx: AbilityContext) -> None:
    ctx.next_player = ctx.player


def _can_steal(ctx: AbilityContext) -> bool:
    opponent = opponent_of(ctx.player)
    if is_immune(ctx.draft, opponent):
        ctx.draft.toast_message = "Steal blocked by Pacifist!"
        return False
    inventory = ctx.draft.inventories[opponent]
    if not any(count > 0 for color, count in inventory.items() if color != GOLD):
        ctx.draft.toast_message = "No stealable gem from opponent - Skill skipped"
        return False
    return True


def _steal(ctx: AbilityContext) -> None:
    ctx.draft.phase = GamePhase.STEAL_ACTION
    ctx.draft.next_player_after_royal = ctx.next_player
    ctx.interrupted = True


def _can_take_bonus(ctx: AbilityContext) -> bool:
    color = ctx.bonus_color
    if color in BASIC_COLORS and board_has(ctx.draft, lambda g: g.color == color):
        return True
    ctx.draft.toast_message = "No matching gem available - Skill skipped"
    return False


def _take_bonus(ctx: AbilityContext) -> None:
    ctx.draft.phase = GamePhase.BONUS_ACTION
    ctx.draft.bonus_gem_target = ctx.bonus_color
    ctx.draft.next_player_after_royal = ctx.next_player
    ctx.interrupted = True


def _scroll(ctx: AbilityContext) -> None:
    grant_privilege(ctx.draft, ctx.player)


ABILITY_TABLE: tuple[tuple[Ability, Callable, Callable], ...] = (
    (Ability.AGAIN, _always, _again),
    (Ability.STEAL, _can_steal, _steal),
    (Ability.BONUS_GEM, _can_take_bonus, _take_bonus),
    (Ability.SCROLL, _always, _scroll),
)


def resolve_abilities(
    draft,
    player: str,
    abilities: Iterable[Ability],
    next_player: str,
    bonus_color: str | None = None,
) -> AbilityContext:
    """
    Apply a card's abilities in priority order.

    Returns the context; when ctx.interrupted is False the caller should
    finalize the turn towards ctx.next_player.
    """
    owned = set(abilities)
    ctx = AbilityContext(draft=draft, player=player, next_player=next_player, bonus_color=bonus_color)
    for ability, predicate, effect in ABILITY_TABLE:
        if ability not in owned or not predicate(ctx):
            continue
        effect(ctx)
        if ctx.interrupted:
            break
    return ctx

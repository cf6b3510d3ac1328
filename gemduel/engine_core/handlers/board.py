"""
Board handlers - Gem taking, replenishing, bonus/steal picks and discards.

Every handler receives a StateDraft and the action payload. Precondition
failures set toast_message and leave the rest of the draft untouched.
"""

from __future__ import annotations
from collections import Counter
from typing import Any

from ..constants import BASIC_COLORS, GOLD, PEARL, SPIRAL_ORDER, opponent_of
from ..modifiers import buff_state, gem_cap, has_active, is_immune, passive
from ..state import GamePhase
from ..supply import (
    add_feedback,
    board_has,
    grant_extra_gem,
    grant_privilege,
    pick_color,
    release_gems,
    take_from_board,
)
from ..turn_manager import finalize_turn
from ..validators import on_board, parse_coords, validate_gem_selection


def handle_take_gems(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.IDLE:
        draft.toast_message = "Finish the current step first."
        return

    player = draft.turn
    try:
        coords = parse_coords(payload.get("coords"))
    except (KeyError, TypeError, ValueError):
        draft.toast_message = "Invalid gem selection."
        return

    if not 1 <= len(coords) <= 3 or len(set(coords)) != len(coords):
        draft.toast_message = "Select 1 to 3 different gems."
        return
    if len(coords) == 3 and passive(draft, player, "no_take3"):
        draft.toast_message = "Specialist: you cannot take 3 gems."
        return

    check = validate_gem_selection(coords)
    if not check.valid:
        draft.toast_message = check.error
        return
    if check.has_gap:
        draft.toast_message = "Gems must be contiguous."
        return

    for r, c in coords:
        if not on_board(r, c):
            draft.toast_message = "Invalid gem selection."
            return
        gem = draft.board[r][c]
        if gem is None:
            draft.toast_message = "Cannot take an empty cell."
            return
        if gem.color == GOLD:
            draft.toast_message = "Gold can only be taken by reserving."
            return

    colors = Counter()
    for r, c in coords:
        gem = take_from_board(draft, player, r, c)
        colors[gem.color] += 1

    opponent = opponent_of(player)
    if colors[PEARL] >= 2 or any(n >= 3 for n in colors.values()):
        grant_privilege(draft, opponent)

    finalize_turn(draft, opponent, dict(draft.inventories[player]))


def _extortion(draft, player: str, randoms: dict[str, Any]) -> None:
    opponent = opponent_of(player)
    state = buff_state(draft, player)
    state["refill_count"] = state.get("refill_count", 0) + 1
    if state["refill_count"] % 2 != 0:
        return

    if is_immune(draft, opponent):
        draft.toast_message = "Extortion blocked by Pacifist!"
        return

    held = [c for c in BASIC_COLORS if draft.inventories[opponent][c] > 0]
    if not held:
        draft.toast_message = "Extortion triggered but opponent has no basic gems."
        return

    color = pick_color(randoms.get("extortion_color"), held)
    draft.inventories[opponent][color] -= 1
    draft.inventories[player][color] += 1
    add_feedback(draft, player, color, 1)
    add_feedback(draft, opponent, color, -1)
    add_feedback(draft, player, "extortion", 1)
    draft.toast_message = f"Extortion! Stole 1 {color}!"


def handle_replenish(draft, payload: dict[str, Any]) -> None:
    """Refill the board from the bag. Does not end the turn."""
    if draft.phase != GamePhase.IDLE:
        draft.toast_message = "Finish the current step first."
        return

    player = draft.turn
    randoms = payload.get("randoms") or {}

    if board_has(draft, lambda gem: True):
        grant_privilege(draft, opponent_of(player))
        if has_active(draft, player, "replenish_steal"):
            _extortion(draft, player, randoms)

    if passive(draft, player, "refill_bonus"):
        color = pick_color(randoms.get("expansion_color"))
        grant_extra_gem(draft, player, color)
        draft.toast_message = "Aggressive Expansion: +1 Gem!"

    board, bag = draft.board, draft.bag
    for r, c in SPIRAL_ORDER:
        if not bag:
            break
        if board[r][c] is None:
            board[r][c] = bag.pop()


def _resume_player(draft) -> str:
    return draft.next_player_after_royal or opponent_of(draft.turn)


def handle_take_bonus_gem(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.BONUS_ACTION:
        draft.toast_message = "No bonus gem to take."
        return
    r, c = int(payload.get("r", -1)), int(payload.get("c", -1))
    if not on_board(r, c):
        draft.toast_message = "Invalid cell."
        return
    gem = draft.board[r][c]
    if gem is None or gem.color != draft.bonus_gem_target:
        draft.toast_message = f"Pick a {draft.bonus_gem_target} gem."
        return

    player = draft.turn
    take_from_board(draft, player, r, c)
    draft.bonus_gem_target = None
    finalize_turn(draft, _resume_player(draft), dict(draft.inventories[player]))


def handle_steal_gem(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.STEAL_ACTION:
        draft.toast_message = "Nothing to steal now."
        return
    color = payload.get("color")
    player = draft.turn
    opponent = opponent_of(player)
    if color == GOLD or color not in draft.inventories[opponent]:
        draft.toast_message = "Gold cannot be stolen."
        return
    if draft.inventories[opponent][color] <= 0:
        draft.toast_message = f"Opponent has no {color}."
        return

    draft.inventories[opponent][color] -= 1
    draft.inventories[player][color] += 1
    add_feedback(draft, player, color, 1)
    add_feedback(draft, opponent, color, -1)
    finalize_turn(draft, _resume_player(draft), dict(draft.inventories[player]))


def handle_discard_gem(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.DISCARD_EXCESS_GEMS:
        draft.toast_message = "No need to discard."
        return
    color = payload.get("color")
    player = draft.turn
    inventory = draft.inventories[player]
    if inventory.get(color, 0) <= 0:
        draft.toast_message = f"You have no {color} to discard."
        return

    inventory[color] -= 1
    release_gems(draft, player, color, 1)
    add_feedback(draft, player, color, -1)

    if sum(inventory.values()) <= gem_cap(draft, player):
        finalize_turn(draft, _resume_player(draft), dict(inventory))

"""
Privilege handlers - Spending scrolls to take single gems.

Using a privilege is a sub-turn: it returns to IDLE for the same player,
who still owes a main action. Extra privileges (from buffs) are spent
before standard ones. Double Agent takes two gems for a single scroll.
"""

from __future__ import annotations
from typing import Any

from ..constants import GOLD
from ..modifiers import passive
from ..state import GamePhase
from ..supply import add_feedback, board_has, take_from_board
from ..validators import on_board


def _takeable(gem) -> bool:
    return gem.color != GOLD


def _consume_token(draft, player: str) -> None:
    if draft.extra_privileges[player] > 0:
        draft.extra_privileges[player] -= 1
        draft.toast_message = "Used Special Privilege!"
    elif draft.privileges[player] > 0:
        draft.privileges[player] -= 1
        add_feedback(draft, player, "privilege", -1)


def handle_activate_privilege(draft, payload: dict[str, Any]) -> None:
    player = draft.turn
    if draft.phase != GamePhase.IDLE:
        draft.toast_message = "Finish the current step first."
        return
    if draft.extra_privileges[player] <= 0 and draft.privileges[player] <= 0:
        draft.toast_message = "No privileges available."
        return
    if not board_has(draft, _takeable):
        draft.toast_message = "No gems to take."
        return
    draft.phase = GamePhase.PRIVILEGE_ACTION
    draft.privilege_gem_count = 0


def handle_use_privilege(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.PRIVILEGE_ACTION:
        draft.toast_message = "Activate a privilege first."
        return
    r, c = int(payload.get("r", -1)), int(payload.get("c", -1))
    gem = draft.board[r][c] if on_board(r, c) else None
    if gem is None or not _takeable(gem):
        draft.toast_message = "Pick a non-gold gem."
        return

    player = draft.turn
    take_from_board(draft, player, r, c)

    if passive(draft, player, "privilege_buff") == 2:
        draft.privilege_gem_count += 1
        if draft.privilege_gem_count == 1:
            _consume_token(draft, player)
            if board_has(draft, _takeable):
                draft.toast_message = "Double Agent: Select 2nd Gem!"
                return
    else:
        _consume_token(draft, player)

    draft.privilege_gem_count = 0
    draft.phase = GamePhase.IDLE


def handle_cancel_privilege(draft, payload: dict[str, Any]) -> None:
    if draft.phase == GamePhase.PRIVILEGE_ACTION:
        draft.phase = GamePhase.IDLE
    draft.privilege_gem_count = 0

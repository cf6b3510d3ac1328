"""
Turn Manager - End-of-turn state machine.

finalize_turn() is called by every turn-ending handler. In strict order:
1. Win check (current player first, then opponent)
2. Turn-completion buff effects (Royal Envoy, Desperate Gamble, Hoarder)
3. Crown milestones (3 and 6, once each)
4. Gem capacity (enter DISCARD_EXCESS_GEMS without switching turn)
5. Normal advance to the next player

Steps 2-4 may stop early by opening an interrupt phase. The intended next
player is then kept in next_player_after_royal, and the handler that closes
the interrupt calls finalize_turn() again.
"""

from __future__ import annotations

from .constants import BASIC_COLORS, ROYAL_MILESTONES, opponent_of
from .modifiers import buff_state, gem_cap, passive, win_thresholds
from .selectors import color_points, crown_count, player_score
from .state import GamePhase
from .supply import grant_extra_gem

ROYAL_ENVOY_TURN = 5


def is_winning(state, player: str) -> bool:
    goal = win_thresholds(state, player)
    if player_score(state, player) >= goal.points:
        return True
    if crown_count(state, player) >= goal.crowns:
        return True
    if goal.single_color is not None:
        if max(color_points(state, player).values()) >= goal.single_color:
            return True
    return False


def check_winner(draft) -> str | None:
    """Set the winner (current player first) and close the turn if anyone won."""
    for pid in (draft.turn, opponent_of(draft.turn)):
        if is_winning(draft, pid):
            draft.winner = pid
            draft.phase = GamePhase.IDLE
            draft.next_player_after_royal = None
            draft.pending_buy = None
            draft.pending_reserve = None
            draft.bonus_gem_target = None
            return pid
    return None


def _starting_turn_number(draft, player: str) -> int:
    """Turn number `player` is about to start (1-based)."""
    completed = draft.player_turn_counts[player]
    if player == draft.turn:
        completed += 1
    return completed + 1


def _royal_envoy(draft, next_player: str) -> bool:
    player = draft.turn
    if not passive(draft, player, "royal_envoy"):
        return False
    state = buff_state(draft, player)
    if state.get("envoy_used"):
        return False
    if draft.player_turn_counts[player] + 1 != ROYAL_ENVOY_TURN or not draft.royal_deck:
        return False
    state["envoy_used"] = True
    draft.phase = GamePhase.SELECT_ROYAL
    draft.next_player_after_royal = next_player
    draft.toast_message = "Royal Envoy: Pick a Royal Card!"
    return True


def _desperate_gamble(draft, next_player: str) -> None:
    period = passive(draft, next_player, "periodic_privilege")
    if not period:
        return
    turn_number = _starting_turn_number(draft, next_player)
    if turn_number % period == 0 and draft.extra_privileges[next_player] < 1:
        draft.extra_privileges[next_player] = 1
        draft.toast_message = (
            f"Desperate Gamble: Gained Special Privilege for Turn {turn_number}!"
        )


def _hoarder_color(inventory: dict[str, int]) -> str:
    return min(BASIC_COLORS, key=lambda color: inventory.get(color, 0))


def _hoarder(draft, next_player: str) -> None:
    if not passive(draft, next_player, "hoarder_bonus"):
        return
    if len(draft.player_reserved[next_player]) < 3:
        return
    turn_number = _starting_turn_number(draft, next_player)
    state = buff_state(draft, next_player)
    if state.get("hoarder_paid_turn") == turn_number:
        return
    state["hoarder_paid_turn"] = turn_number
    color = _hoarder_color(draft.inventories[next_player])
    grant_extra_gem(draft, next_player, color)
    draft.toast_message = f"Hoarder: +1 {color}!"


def _crown_milestone(draft, next_player: str) -> bool:
    player = draft.turn
    if not draft.royal_deck:
        return False
    crowns = crown_count(draft, player)
    claimed = draft.royal_milestones[player]
    hit = None
    for milestone in reversed(ROYAL_MILESTONES):
        if crowns >= milestone and not claimed.get(milestone, False):
            hit = milestone
            break
    if hit is None:
        return False
    claimed[hit] = True
    draft.phase = GamePhase.SELECT_ROYAL
    draft.next_player_after_royal = next_player
    return True


def finalize_turn(draft, next_player: str, inventory_snapshot: dict[str, int] | None = None) -> None:
    """
    Close the current player's turn.

    `inventory_snapshot` overrides the inventory used for the capacity
    check (handlers pass the inventory right after their gem movement).
    """
    if check_winner(draft):
        return

    if _royal_envoy(draft, next_player):
        return
    _desperate_gamble(draft, next_player)
    _hoarder(draft, next_player)

    if _crown_milestone(draft, next_player):
        return

    player = draft.turn
    inventory = inventory_snapshot if inventory_snapshot is not None else draft.inventories[player]
    if sum(inventory.values()) > gem_cap(draft, player):
        draft.phase = GamePhase.DISCARD_EXCESS_GEMS
        if draft.next_player_after_royal is None:
            draft.next_player_after_royal = next_player
        return

    draft.player_turn_counts[player] += 1
    draft.turn = next_player
    draft.phase = GamePhase.IDLE
    draft.next_player_after_royal = None

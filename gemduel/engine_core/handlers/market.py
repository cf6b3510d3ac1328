"""
Market handlers - Buying and reserving cards.

Cards are located in the state by id, never trusted from the payload:
- source "market": market_info {level, idx} or, for the All-Seeing Eye
  extra level-3 view, {level: 3, is_extra: True, extra_idx: 1|2}
- source "reserved": the acting player's reserve

Two-step intents: INITIATE_BUY_JOKER stages pending_buy until a colour is
chosen; INITIATE_RESERVE(_DECK) stages pending_reserve until a gold gem is
picked (or commits at once when no gold is on the board).
"""

from __future__ import annotations
from dataclasses import replace
from typing import Any

from ..abilities import resolve_abilities
from ..constants import BASIC_COLORS, GOLD, RESERVE_LIMIT, opponent_of
from ..modifiers import buff_state, has_active, is_immune, passive, win_thresholds
from ..selectors import color_points, crown_count, player_score
from ..state import Card, GamePhase
from ..supply import (
    add_feedback,
    board_has,
    grant_extra_gem,
    pick_color,
    release_gems,
    take_from_board,
)
from ..transaction import calculate_transaction
from ..turn_manager import check_winner, finalize_turn
from ..validators import on_board


# =============================================================================
# Card location
# =============================================================================

def _extra_index(deck: list, extra_idx: Any) -> int | None:
    try:
        target = len(deck) - (int(extra_idx) + 1)
    except (TypeError, ValueError):
        return None
    return target if 0 <= target < len(deck) else None


def _find_in_market(draft, card_id: str, info: dict[str, Any]) -> tuple[Card, dict] | None:
    level = info.get("level")
    if level is not None:
        level = int(level)
        if info.get("is_extra"):
            deck = draft.decks.get(level, [])
            target = _extra_index(deck, info.get("extra_idx"))
            if level == 3 and target is not None and deck[target].id == card_id:
                return deck[target], {"level": 3, "is_extra": True, "extra_idx": int(info["extra_idx"])}
            return None
        idx = info.get("idx")
        slots = draft.market.get(level, [])
        if idx is not None and 0 <= int(idx) < len(slots):
            card = slots[int(idx)]
            if card is not None and card.id == card_id:
                return card, {"level": level, "idx": int(idx)}

    for lvl, slots in draft.market.items():
        for i, card in enumerate(slots):
            if card is not None and card.id == card_id:
                return card, {"level": lvl, "idx": i}
    return None


def _locate(draft, player: str, payload: dict[str, Any]) -> tuple[Card, str, dict] | None:
    card_id = payload.get("card_id")
    source = payload.get("source", "market")
    if source == "reserved":
        for card in draft.player_reserved[player]:
            if card.id == card_id:
                return card, "reserved", {}
        return None
    found = _find_in_market(draft, card_id, payload.get("market_info") or payload)
    if found is None:
        return None
    card, info = found
    if info.get("is_extra") and not passive(draft, player, "extra_l3"):
        return None
    return card, "market", info


def _refill_slot(draft, info: dict[str, Any]) -> None:
    level = info["level"]
    deck = draft.decks[level]
    if info.get("is_extra"):
        target = _extra_index(deck, info["extra_idx"])
        if target is not None:
            del deck[target]
        return
    draft.market[level][info["idx"]] = deck.pop() if deck else None


# =============================================================================
# Buying
# =============================================================================

def _settle_payment(draft, player: str, gems_paid: dict[str, int], gold_cost: int) -> None:
    inventory = draft.inventories[player]
    for color, paid in gems_paid.items():
        inventory[color] -= paid
        release_gems(draft, player, color, paid)
        add_feedback(draft, player, color, -paid)
    if gold_cost:
        inventory[GOLD] -= gold_cost
        release_gems(draft, player, GOLD, gold_cost)
        add_feedback(draft, player, GOLD, -gold_cost)


def _recycle(draft, player: str, card: Card, gems_paid: dict[str, int]) -> None:
    """Refund the first basic cost colour that was actually paid."""
    color = next(
        (c for c, n in card.cost.items() if n > 0 and c in BASIC_COLORS and gems_paid.get(c, 0) > 0),
        None,
    )
    if color is None:
        return
    grant_extra_gem(draft, player, color)
    bag = draft.bag
    for i in range(len(bag) - 1, -1, -1):
        if bag[i].color == color:
            del bag[i]
            break
    draft.toast_message = f"Recycled 1 {color}!"


def _buy(draft, player: str, card: Card, source: str, info: dict, randoms: dict[str, Any]) -> None:
    assignment = draft.player_buffs[player]
    tx = calculate_transaction(
        card,
        draft.inventories[player],
        draft.player_tableau[player],
        assignment,
        is_reserved=source == "reserved",
    )
    if not tx.affordable:
        draft.toast_message = "Cannot afford this card!"
        return

    draft.pending_buy = None
    _settle_payment(draft, player, tx.gems_paid, tx.gold_cost)

    if passive(draft, player, "double_bonus_first5") and len(draft.player_tableau[player]) < 2:
        card = replace(card, bonus_count=card.bonus_count * 2)
        draft.toast_message = "Minimalist: Card grants Double Bonus!"

    draft.player_tableau[player].append(card)

    if card.crowns > 0:
        add_feedback(draft, player, "crown", card.crowns)
        if passive(draft, player, "crown_bonus_gem"):
            grant_extra_gem(draft, player, pick_color(randoms.get("bounty_hunter_color")))
            draft.toast_message = "Bounty Hunter: +1 Gem!"

    if passive(draft, player, "recycler") and card.level in (2, 3):
        _recycle(draft, player, card, tx.gems_paid)

    bonus = passive(draft, player, "buy_reserved_bonus")
    if bonus and source == "reserved":
        colors = list(randoms.get("speculator_colors") or [])
        for n in range(bonus):
            candidate = colors[n] if n < len(colors) else None
            grant_extra_gem(draft, player, pick_color(candidate))
        draft.toast_message = f"Speculator: +{bonus} Gems!"

    if card.level == 3 and passive(draft, player, "l3_discount"):
        state = buff_state(draft, player)
        state["l3_purchased_count"] = state.get("l3_purchased_count", 0) + 1

    if source == "market":
        _refill_slot(draft, info)
    else:
        draft.player_reserved[player] = [c for c in draft.player_reserved[player] if c.id != card.id]

    draft.phase = GamePhase.IDLE
    if check_winner(draft):
        return

    ctx = resolve_abilities(draft, player, card.abilities, opponent_of(player), bonus_color=card.bonus_color)
    if not ctx.interrupted:
        finalize_turn(draft, ctx.next_player)


def handle_buy_card(draft, payload: dict[str, Any]) -> None:
    if draft.phase not in (GamePhase.IDLE, GamePhase.SELECT_CARD_COLOR):
        draft.toast_message = "Finish the current step first."
        return
    player = draft.turn
    located = _locate(draft, player, payload)
    if located is None:
        draft.toast_message = "Card not found."
        return
    card, source, info = located

    if card.is_joker:
        color = payload.get("bonus_color")
        if color not in BASIC_COLORS:
            draft.toast_message = "Choose a colour for this card."
            return
        card = replace(card, bonus_color=color)

    _buy(draft, player, card, source, info, payload.get("randoms") or {})


def _winning_colors(draft, player: str, card: Card) -> list[str]:
    """Colours for a joker that would win the game on purchase."""
    goal = win_thresholds(draft, player)
    points = player_score(draft, player) + card.points + passive(draft, player, "point_bonus", 0)
    if points >= goal.points or crown_count(draft, player) + card.crowns >= goal.crowns:
        return list(BASIC_COLORS)
    if goal.single_color is None:
        return []
    current = color_points(draft, player)
    return [c for c in BASIC_COLORS if current[c] + card.points >= goal.single_color]


def handle_initiate_buy_joker(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.IDLE:
        draft.toast_message = "Finish the current step first."
        return
    player = draft.turn
    located = _locate(draft, player, payload)
    if located is None:
        draft.toast_message = "Card not found."
        return
    card, source, info = located
    if not card.is_joker:
        draft.toast_message = "Only joker cards need a colour."
        return

    tx = calculate_transaction(
        card,
        draft.inventories[player],
        draft.player_tableau[player],
        draft.player_buffs[player],
        is_reserved=source == "reserved",
    )
    if not tx.affordable:
        draft.toast_message = "Cannot afford this card!"
        return

    winners = _winning_colors(draft, player, card)
    if winners:
        current = color_points(draft, player)
        best = max(winners, key=lambda c: (current[c], -BASIC_COLORS.index(c)))
        _buy(draft, player, replace(card, bonus_color=best), source, info, payload.get("randoms") or {})
        return

    draft.pending_buy = {"card_id": card.id, "source": source, "market_info": info}
    draft.phase = GamePhase.SELECT_CARD_COLOR


# =============================================================================
# Reserving
# =============================================================================

def _reserve_rewards(draft, player: str, gold_coords: Any, randoms: dict[str, Any]) -> None:
    if gold_coords:
        r, c = int(gold_coords["r"]), int(gold_coords["c"])
        gem = draft.board[r][c] if on_board(r, c) else None
        if gem is not None and gem.color == GOLD:
            take_from_board(draft, player, r, c)

    if passive(draft, player, "first_reserve_bonus"):
        state = buff_state(draft, player)
        if not state.get("has_reserved"):
            state["has_reserved"] = True
            grant_extra_gem(draft, player, GOLD, passive(draft, player, "first_reserve_bonus"))
            draft.toast_message = "Patient Investor: +1 Extra Gold!"

    if passive(draft, player, "reserve_bonus_gem"):
        color = pick_color(randoms.get("nimble_color"))
        grant_extra_gem(draft, player, color)
        draft.toast_message = f"Nimble Fingers: +1 {color}!"


def _close_reserve(draft, player: str) -> None:
    draft.pending_reserve = None
    draft.phase = GamePhase.IDLE
    finalize_turn(draft, opponent_of(player))


def _reserve_phase_ok(draft) -> bool:
    if draft.phase in (GamePhase.IDLE, GamePhase.RESERVE_WAITING_GEM):
        return True
    draft.toast_message = "Finish the current step first."
    return False


def handle_reserve_card(draft, payload: dict[str, Any]) -> None:
    if not _reserve_phase_ok(draft):
        return
    params = {**(draft.pending_reserve or {}), **payload}
    player = draft.turn
    if len(draft.player_reserved[player]) >= RESERVE_LIMIT:
        draft.toast_message = "Reserve limit reached!"
        return

    card_id = params.get("card_id")
    if params.get("is_steal"):
        opponent = opponent_of(player)
        if not passive(draft, player, "steal_reserved"):
            draft.toast_message = "You cannot take reserved cards."
            return
        if is_immune(draft, opponent):
            draft.toast_message = "Blocked by Pacifist!"
            return
        stolen = next((c for c in draft.player_reserved[opponent] if c.id == card_id), None)
        if stolen is None:
            draft.toast_message = "Card not found."
            return
        draft.player_reserved[opponent] = [c for c in draft.player_reserved[opponent] if c.id != card_id]
        draft.player_reserved[player].append(stolen)
        draft.toast_message = "Collector: Took a reserved card!"
    else:
        found = _find_in_market(draft, card_id, params.get("market_info") or params)
        if found is None:
            draft.toast_message = "Card not found."
            return
        card, info = found
        if info.get("is_extra") and not passive(draft, player, "extra_l3"):
            draft.toast_message = "Card not found."
            return
        draft.player_reserved[player].append(card)
        _refill_slot(draft, info)

    _reserve_rewards(draft, player, params.get("gold_coords"), params.get("randoms") or {})
    _close_reserve(draft, player)


def handle_reserve_deck(draft, payload: dict[str, Any]) -> None:
    if not _reserve_phase_ok(draft):
        return
    params = {**(draft.pending_reserve or {}), **payload}
    player = draft.turn
    if len(draft.player_reserved[player]) >= RESERVE_LIMIT:
        draft.toast_message = "Reserve limit reached!"
        return

    deck = draft.decks.get(int(params.get("level", 0)))
    if not deck:
        draft.toast_message = "Deck is empty."
        return
    draft.player_reserved[player].append(deck.pop())

    _reserve_rewards(draft, player, params.get("gold_coords"), params.get("randoms") or {})
    _close_reserve(draft, player)


def _initiate(draft, payload: dict[str, Any], is_deck: bool, commit) -> None:
    if draft.phase != GamePhase.IDLE:
        draft.toast_message = "Finish the current step first."
        return
    if len(draft.player_reserved[draft.turn]) >= RESERVE_LIMIT:
        draft.toast_message = "Reserve limit reached!"
        return
    if board_has(draft, lambda gem: gem.color == GOLD):
        pending = dict(payload)
        if is_deck:
            pending["is_deck"] = True
        draft.pending_reserve = pending
        draft.phase = GamePhase.RESERVE_WAITING_GEM
        return
    commit(draft, payload)


def handle_initiate_reserve(draft, payload: dict[str, Any]) -> None:
    _initiate(draft, payload, False, handle_reserve_card)


def handle_initiate_reserve_deck(draft, payload: dict[str, Any]) -> None:
    _initiate(draft, payload, True, handle_reserve_deck)


def handle_cancel_reserve(draft, payload: dict[str, Any]) -> None:
    draft.pending_reserve = None
    if draft.phase == GamePhase.RESERVE_WAITING_GEM:
        draft.phase = GamePhase.IDLE


def handle_discard_reserved(draft, payload: dict[str, Any]) -> None:
    """Puppet Master: reserved card to the bottom of its deck for one gem."""
    player = draft.turn
    if not has_active(draft, player, "discard_reserved"):
        draft.toast_message = "You cannot discard reserved cards."
        return
    if draft.phase != GamePhase.IDLE:
        draft.toast_message = "Finish the current step first."
        return
    card_id = payload.get("card_id")
    card = next((c for c in draft.player_reserved[player] if c.id == card_id), None)
    if card is None:
        draft.toast_message = "Card not found."
        return

    draft.player_reserved[player] = [c for c in draft.player_reserved[player] if c.id != card_id]
    draft.decks[card.level].insert(0, card)
    randoms = payload.get("randoms") or {}
    color = pick_color(randoms.get("gem_color"))
    grant_extra_gem(draft, player, color)
    draft.toast_message = f"Puppet Master: Discarded card, +1 {color}!"

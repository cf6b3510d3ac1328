"""
Gem Duel Setup - Builds INIT / INIT_DRAFT payloads.

This module handles every random decision of a match so that the engine
never has to:
- Shuffling gems and decks with a seeded random.Random
- Dealing the board (spiral order) and the market
- Rolling on_init randoms for both players
- Generating category-diverse draft pools
- Rolling per-action randoms (buff bonus gem colours)

All payloads are JSON-safe and can be sent over the wire as-is.
"""

from __future__ import annotations
import random
from typing import Any

from ...engine_core.action import Action, ActionType
from ...engine_core.codec import card_to_dict
from ...engine_core.constants import (
    BASIC_COLORS,
    CARD_LEVELS,
    GRID_SIZE,
    INITIAL_GEM_COUNTS,
    MARKET_SLOTS,
    PLAYERS,
    SPIRAL_ORDER,
)
from ...engine_core.state import GameMode
from .buffs import buffs_for_level
from .cards import build_deck

P1_POOL_SIZE = 3
P2_EXTRA_CHOICES = 3


def _gem_dict(color: str, n: int) -> dict[str, str]:
    return {"color": color, "uid": f"{color}-{n}"}


def deal_board(rng: random.Random) -> tuple[list[list[dict | None]], list[dict]]:
    """Shuffle the full gem supply and fill the board in spiral order."""
    bag = [_gem_dict(color, n) for color, count in INITIAL_GEM_COUNTS.items() for n in range(count)]
    rng.shuffle(bag)
    board: list[list[dict | None]] = [[None] * GRID_SIZE for _ in range(GRID_SIZE)]
    for r, c in SPIRAL_ORDER:
        if not bag:
            break
        board[r][c] = bag.pop()
    return board, bag


def deal_cards(rng: random.Random) -> tuple[dict[str, list], dict[str, list]]:
    """Shuffle each deck and deal its market row from the top (end of list)."""
    decks: dict[str, list] = {}
    market: dict[str, list] = {}
    for level in CARD_LEVELS:
        deck = build_deck(level)
        rng.shuffle(deck)
        row = [deck.pop() if deck else None for _ in range(MARKET_SLOTS[level])]
        decks[str(level)] = [card_to_dict(c) for c in deck]
        market[str(level)] = [card_to_dict(c) for c in row]
    return decks, market


def roll_init_randoms(rng: random.Random) -> dict[str, dict[str, Any]]:
    """Random inputs for on_init effects, for both players."""
    return {
        pid: {
            "random_gems": [rng.choice(BASIC_COLORS) for _ in range(2)],
            "reserve_card_level": rng.choice(CARD_LEVELS),
            "preference_color": rng.choice(BASIC_COLORS),
        }
        for pid in PLAYERS
    }


def roll_randoms(rng: random.Random) -> dict[str, Any]:
    """Random inputs for a single gameplay action."""
    return {
        "extortion_color": rng.choice(BASIC_COLORS),
        "expansion_color": rng.choice(BASIC_COLORS),
        "bounty_hunter_color": rng.choice(BASIC_COLORS),
        "nimble_color": rng.choice(BASIC_COLORS),
        "speculator_colors": [rng.choice(BASIC_COLORS) for _ in range(2)],
        "gem_color": rng.choice(BASIC_COLORS),
    }


def build_setup(rng: random.Random, mode: GameMode = GameMode.LOCAL_PVP) -> dict[str, Any]:
    board, bag = deal_board(rng)
    decks, market = deal_cards(rng)
    return {
        "board": board,
        "bag": bag,
        "decks": decks,
        "market": market,
        "mode": mode.value,
        "init_randoms": roll_init_randoms(rng),
    }


def draft_pool_for_p1(rng: random.Random, level: int) -> list[str]:
    """Three buffs of the level, each from a different category."""
    candidates = buffs_for_level(level)
    rng.shuffle(candidates)
    pool, categories = [], set()
    for buff in candidates:
        if buff.category in categories:
            continue
        pool.append(buff.id)
        categories.add(buff.category)
        if len(pool) == P1_POOL_SIZE:
            break
    return pool


def p2_pool_indices(rng: random.Random, level: int, picked: str) -> list[int]:
    """
    Registry indices for p2's pool: p1's pick plus three buffs from
    distinct categories other than the pick's.
    """
    level_buffs = buffs_for_level(level)
    picked_index = next(i for i, b in enumerate(level_buffs) if b.id == picked)
    excluded = {level_buffs[picked_index].category}

    order = list(range(len(level_buffs)))
    rng.shuffle(order)
    indices = [picked_index]
    for i in order:
        buff = level_buffs[i]
        if i == picked_index or buff.category in excluded:
            continue
        indices.append(i)
        excluded.add(buff.category)
        if len(indices) == 1 + P2_EXTRA_CHOICES:
            break
    return indices


def create_init_action(
    seed: int | None = None,
    p1_buff: str = "none",
    p2_buff: str = "none",
    mode: GameMode = GameMode.LOCAL_PVP,
) -> Action:
    """INIT with fixed buffs (no draft)."""
    rng = random.Random(seed)
    payload = build_setup(rng, mode)
    payload["player_buffs"] = {"p1": p1_buff, "p2": p2_buff}
    return Action(action_type=ActionType.INIT, payload=payload)


def create_init_draft_action(
    seed: int | None = None,
    buff_level: int = 1,
    mode: GameMode = GameMode.LOCAL_PVP,
    is_pve: bool = False,
) -> Action:
    """INIT_DRAFT with p1's pool and the setup parked for after the draft."""
    rng = random.Random(seed)
    payload = build_setup(rng, mode)
    payload["draft_pool"] = draft_pool_for_p1(rng, buff_level)
    payload["buff_level"] = buff_level
    payload["is_pve"] = is_pve
    return Action(action_type=ActionType.INIT_DRAFT, payload=payload)


# Actions whose handlers read payload["randoms"].
RANDOMIZED_ACTIONS = frozenset({
    ActionType.REPLENISH,
    ActionType.BUY_CARD,
    ActionType.INITIATE_BUY_JOKER,
    ActionType.RESERVE_CARD,
    ActionType.RESERVE_DECK,
    ActionType.DISCARD_RESERVED,
})


def with_randoms(state, action: Action, rng: random.Random) -> Action:
    """
    Return a copy of `action` with every random outcome resolved.

    Values already present in the payload are kept.
    """
    payload = dict(action.payload)
    if action.action_type in RANDOMIZED_ACTIONS:
        payload["randoms"] = {**roll_randoms(rng), **(payload.get("randoms") or {})}
    elif action.action_type == ActionType.SELECT_BUFF and state is not None:
        payload.setdefault("random_color", rng.choice(BASIC_COLORS))
        if state.turn == "p1" and "p2_draft_pool_indices" not in payload:
            payload["p2_draft_pool_indices"] = p2_pool_indices(rng, state.buff_level, payload["buff_id"])
    return Action(
        action_type=action.action_type,
        payload=payload,
        timestamp=action.timestamp,
        action_id=action.action_id,
    )

"""
Bootstrap and draft handlers.

Match creation:
- INIT builds a state from the skeleton merged with the caller's setup and
  applies the on_init effects of both players' buffs
- INIT_DRAFT builds a skeleton in DRAFT_PHASE and parks the setup in
  pending_setup until both players have picked a buff
- SELECT_BUFF assigns a buff, hands the draft to p2 with the pool given as
  registry indices, and installs the setup after the last pick

on_init effects are applied identically on both paths.
"""

from __future__ import annotations
from typing import Any

from ...games.gem_duel.buffs import BuffCategory, buffs_for_level, get_buff
from ..codec import state_from_dict
from ..constants import CARD_LEVELS, GOLD, PEARL, PLAYERS
from ..modifiers import gem_cap
from ..snapshot import StateDraft
from ..state import BuffAssignment, Card, GamePhase, GameMode, GameState
from ..supply import grant_extra_gem, pick_color

P2_POOL_SIZE = 4


def new_skeleton() -> GameState:
    """Fresh state with the Royal Court in place."""
    from ...games.gem_duel.cards import ROYAL_CARDS

    return GameState(royal_deck=list(ROYAL_CARDS))


# =============================================================================
# on_init effects
# =============================================================================

def _add_color_preference(draft, player: str, color: str) -> None:
    card_id = f"buff-color-pref-{player}"
    if any(c.id == card_id for c in draft.player_tableau[player]):
        return
    draft.player_tableau[player].append(
        Card(id=card_id, level=0, bonus_color=color, bonus_count=1, is_buff=True)
    )


def apply_player_init(draft, player: str, randoms: dict[str, Any]) -> None:
    assignment = draft.player_buffs[player]
    buff = get_buff(assignment.buff_id)
    if buff.id == "none":
        return
    fx = buff.effects.on_init

    if fx.get("privilege"):
        draft.extra_privileges[player] += fx["privilege"]

    if fx.get("random_gem"):
        colors = list(randoms.get("random_gems") or [])
        for n in range(fx["random_gem"]):
            grant_extra_gem(draft, player, pick_color(colors[n] if n < len(colors) else None))

    if fx.get("crowns"):
        draft.extra_crowns[player] += fx["crowns"]

    if fx.get("pearl"):
        grant_extra_gem(draft, player, PEARL, fx["pearl"])

    if fx.get("gold"):
        grant_extra_gem(draft, player, GOLD, fx["gold"])

    if fx.get("reserve_card"):
        level = randoms.get("reserve_card_level")
        level = level if level in CARD_LEVELS else CARD_LEVELS[0]
        deck = draft.decks[level]
        if deck:
            draft.player_reserved[player].append(deck.pop())

    if buff.effects.active == "replenish_steal":
        draft.player_buffs[player].state.setdefault("refill_count", 0)

    if buff.effects.passive.get("discount_random"):
        state = draft.player_buffs[player].state
        color = pick_color(state.get("discount_color") or randoms.get("preference_color"))
        state["discount_color"] = color
        _add_color_preference(draft, player, color)


def apply_init_effects(draft, init_randoms: dict[str, Any] | None) -> None:
    init_randoms = init_randoms or {}
    for pid in PLAYERS:
        apply_player_init(draft, pid, init_randoms.get(pid) or {})


# =============================================================================
# Bootstrap
# =============================================================================

def handle_init(payload: dict[str, Any]) -> GameState:
    setup = dict(payload)
    init_randoms = setup.pop("init_randoms", None)
    base = state_from_dict(setup, base=new_skeleton())
    draft = StateDraft(base)
    apply_init_effects(draft, init_randoms)
    return draft.commit()


def handle_init_draft(payload: dict[str, Any]) -> GameState:
    setup = dict(payload)
    draft_pool = list(setup.pop("draft_pool", []) or [])
    buff_level = int(setup.pop("buff_level", 0) or 0)
    is_pve = bool(setup.pop("is_pve", False))
    mode = setup.pop("mode", None)

    state = new_skeleton()
    state.draft_pool = draft_pool
    state.buff_level = buff_level
    state.is_pve = is_pve
    if mode is not None:
        state.mode = GameMode(mode)
    state.pending_setup = setup
    state.draft_order = list(PLAYERS)
    state.phase = GamePhase.DRAFT_PHASE
    state.turn = "p1"
    return state


# =============================================================================
# Draft
# =============================================================================

def fallback_p2_pool(level: int, picked: str) -> list[str]:
    """Deterministic p2 pool: p1's pick plus one buff from each other category."""
    picked_buff = get_buff(picked)
    pool = [picked]
    seen: set[BuffCategory] = {picked_buff.category}
    for buff in buffs_for_level(level):
        if len(pool) >= P2_POOL_SIZE:
            break
        if buff.id == picked or buff.category in seen:
            continue
        pool.append(buff.id)
        seen.add(buff.category)
    return pool


def _p2_pool(draft, picked: str, indices: Any) -> list[str]:
    level_buffs = buffs_for_level(draft.buff_level)
    if isinstance(indices, list) and len(indices) == P2_POOL_SIZE:
        if all(isinstance(i, int) and 0 <= i < len(level_buffs) for i in indices):
            return [level_buffs[i].id for i in indices]
    return fallback_p2_pool(draft.buff_level, picked)


def _install_setup(draft) -> dict[str, Any]:
    setup = dict(draft.pending_setup or {})
    init_randoms = setup.pop("init_randoms", None)
    if setup:
        decoded = state_from_dict(setup)
        for key in setup:
            if key in GameState.__dataclass_fields__:
                setattr(draft, key, getattr(decoded, key))
    draft.pending_setup = None
    return init_randoms or {}


def handle_select_buff(draft, payload: dict[str, Any]) -> None:
    if draft.phase != GamePhase.DRAFT_PHASE:
        draft.toast_message = "The draft is over."
        return

    player = draft.turn
    buff_id = payload.get("buff_id")
    pool = draft.draft_pool if player == "p1" else draft.p2_draft_pool
    if buff_id not in pool:
        draft.toast_message = "That buff is not in your pool."
        return

    assignment = BuffAssignment(buff_id=buff_id, state={})
    random_color = payload.get("random_color")
    if random_color and get_buff(buff_id).effects.passive.get("discount_random"):
        assignment.state["discount_color"] = random_color
    draft.player_buffs[player] = assignment

    order = draft.draft_order
    position = order.index(player) if player in order else len(order)
    if position + 1 < len(order):
        next_player = order[position + 1]
        draft.turn = next_player
        if next_player == "p2":
            draft.p2_draft_pool = _p2_pool(draft, buff_id, payload.get("p2_draft_pool_indices"))
        return

    init_randoms = _install_setup(draft)
    draft.draft_order = []
    draft.phase = GamePhase.IDLE
    draft.turn = "p1"
    apply_init_effects(draft, init_randoms)

    for pid in PLAYERS:
        if sum(draft.inventories[pid].values()) > gem_cap(draft, pid):
            draft.turn = pid
            draft.phase = GamePhase.DISCARD_EXCESS_GEMS
            draft.next_player_after_royal = "p1"
            break


def handle_debug_reroll_buffs(draft, payload: dict[str, Any]) -> None:
    if payload.get("level") is not None:
        draft.buff_level = int(payload["level"])
    draft.draft_pool = list(payload.get("draft_pool") or [])

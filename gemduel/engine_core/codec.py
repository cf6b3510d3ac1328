"""
Codec - Conversion between engine objects and JSON-safe dicts.

Used for:
- INIT setup merging (caller payload over the skeleton)
- FORCE_SYNC / SYNC_STATE payloads
- Action log persistence

Decoding is partial: state_from_dict() only overwrites the fields present
in the input, so a payload can describe just the parts it sets up.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import fields
from typing import Any

from .state import (
    Ability,
    BuffAssignment,
    Card,
    GameMode,
    GamePhase,
    GameState,
    Gem,
    RoyalCard,
    empty_inventory,
)
from .action import Action, ActionType


# =============================================================================
# Leaves
# =============================================================================

def gem_to_dict(gem: Gem | None) -> dict[str, str] | None:
    if gem is None:
        return None
    return {"color": gem.color, "uid": gem.uid}


def gem_from_dict(data: Any) -> Gem | None:
    if data is None:
        return None
    if isinstance(data, Gem):
        return data
    return Gem(color=data["color"], uid=str(data["uid"]))


def card_to_dict(card: Card | None) -> dict[str, Any] | None:
    if card is None:
        return None
    return {
        "id": card.id,
        "level": card.level,
        "cost": dict(card.cost),
        "points": card.points,
        "crowns": card.crowns,
        "bonus_color": card.bonus_color,
        "bonus_count": card.bonus_count,
        "abilities": [a.value for a in card.abilities],
        "is_buff": card.is_buff,
        "template_id": card.template_id,
    }


def _abilities(raw: Any) -> tuple[Ability, ...]:
    if not raw:
        return ()
    if isinstance(raw, (str, Ability)):
        raw = [raw]
    return tuple(a if isinstance(a, Ability) else Ability(a) for a in raw)


def card_from_dict(data: Any) -> Card | None:
    if data is None:
        return None
    if isinstance(data, Card):
        return data
    return Card(
        id=str(data["id"]),
        level=int(data.get("level", 0)),
        cost={k: int(v) for k, v in (data.get("cost") or {}).items()},
        points=int(data.get("points", 0)),
        crowns=int(data.get("crowns", 0)),
        bonus_color=data.get("bonus_color"),
        bonus_count=int(data.get("bonus_count", 1)),
        abilities=_abilities(data.get("abilities")),
        is_buff=bool(data.get("is_buff", False)),
        template_id=data.get("template_id"),
    )


def royal_to_dict(royal: RoyalCard) -> dict[str, Any]:
    return {
        "id": royal.id,
        "points": royal.points,
        "crowns": royal.crowns,
        "abilities": [a.value for a in royal.abilities],
        "label": royal.label,
    }


def royal_from_dict(data: Any) -> RoyalCard:
    if isinstance(data, RoyalCard):
        return data
    return RoyalCard(
        id=str(data["id"]),
        points=int(data.get("points", 0)),
        crowns=int(data.get("crowns", 0)),
        abilities=_abilities(data.get("abilities")),
        label=data.get("label", ""),
    )


def buff_assignment_from_dict(data: Any) -> BuffAssignment:
    """Accepts a bare buff id or a {buff_id, state} mapping."""
    if isinstance(data, BuffAssignment):
        return BuffAssignment(buff_id=data.buff_id, state=dict(data.state))
    if data is None:
        return BuffAssignment()
    if isinstance(data, str):
        return BuffAssignment(buff_id=data)
    return BuffAssignment(buff_id=data.get("buff_id", "none"), state=dict(data.get("state") or {}))


# =============================================================================
# Per-field encoders/decoders
# =============================================================================

def _per_player(fn):
    return lambda value: {pid: fn(v) for pid, v in value.items()}


def _per_level(fn):
    return lambda value: {int(level): fn(v) for level, v in value.items()}


def _listing(fn):
    return lambda value: [fn(v) for v in value]


def _encode_levels(fn):
    return lambda value: {str(level): fn(v) for level, v in value.items()}


_DECODERS = {
    "board": lambda rows: [[gem_from_dict(cell) for cell in row] for row in rows],
    "bag": _listing(gem_from_dict),
    "phase": lambda v: v if isinstance(v, GamePhase) else GamePhase(v),
    "mode": lambda v: v if isinstance(v, GameMode) else GameMode(v),
    "decks": _per_level(_listing(card_from_dict)),
    "market": _per_level(_listing(card_from_dict)),
    "player_tableau": _per_player(_listing(card_from_dict)),
    "player_reserved": _per_player(_listing(card_from_dict)),
    "royal_deck": _listing(royal_from_dict),
    "player_royals": _per_player(_listing(royal_from_dict)),
    "royal_milestones": _per_player(lambda m: {int(k): bool(v) for k, v in m.items()}),
    "inventories": _per_player(lambda inv: {**empty_inventory(), **inv}),
    "extra_allocation": _per_player(lambda inv: {**empty_inventory(), **inv}),
    "player_buffs": _per_player(buff_assignment_from_dict),
    "privileges": dict,
    "extra_privileges": dict,
    "extra_points": dict,
    "extra_crowns": dict,
    "player_turn_counts": dict,
    "draft_pool": list,
    "p2_draft_pool": list,
    "draft_order": list,
}

_ENCODERS = {
    "board": lambda rows: [[gem_to_dict(cell) for cell in row] for row in rows],
    "bag": _listing(gem_to_dict),
    "phase": lambda v: v.value,
    "mode": lambda v: v.value,
    "decks": _encode_levels(_listing(card_to_dict)),
    "market": _encode_levels(_listing(card_to_dict)),
    "player_tableau": _per_player(_listing(card_to_dict)),
    "player_reserved": _per_player(_listing(card_to_dict)),
    "royal_deck": _listing(royal_to_dict),
    "player_royals": _per_player(_listing(royal_to_dict)),
    "royal_milestones": _per_player(lambda m: {str(k): v for k, v in m.items()}),
    "player_buffs": _per_player(lambda b: {"buff_id": b.buff_id, "state": dict(b.state)}),
}


def state_to_dict(state: GameState) -> dict[str, Any]:
    """Encode a full state as JSON-safe data."""
    out: dict[str, Any] = {}
    for f in fields(GameState):
        value = getattr(state, f.name)
        encoder = _ENCODERS.get(f.name)
        out[f.name] = encoder(value) if encoder else deepcopy(value)
    return out


def state_from_dict(data: dict[str, Any], base: GameState | None = None) -> GameState:
    """
    Decode a state, merging over `base` (a fresh GameState if omitted).

    Unknown keys are ignored.
    """
    state = base.clone() if base is not None else GameState()
    known = {f.name for f in fields(GameState)}
    for key, value in data.items():
        if key not in known:
            continue
        decoder = _DECODERS.get(key)
        if value is None or decoder is None:
            setattr(state, key, deepcopy(value))
        else:
            setattr(state, key, decoder(value))
    return state


# =============================================================================
# Actions
# =============================================================================

def action_to_dict(action: Action) -> dict[str, Any]:
    return {"type": action.action_type.value, "payload": action.payload}


def action_from_dict(data: dict[str, Any]) -> Action:
    """Decode {"type", "payload"}; raises ValueError on an unknown type."""
    return Action(
        action_type=ActionType(data["type"]),
        payload=dict(data.get("payload") or {}),
    )

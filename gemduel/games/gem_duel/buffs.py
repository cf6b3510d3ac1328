"""
Buff registry - Static definitions of every drafting modifier.

Buffs are immutable templates. The per-match runtime data of a buff
(counters, one-shot flags) lives in GameState.player_buffs[pid].state,
never here.

Effect classes:
- on_init: applied once when the match starts (privilege, random_gem,
  crowns, pearl, gold, reserve_card)
- passive: read by the calculator, handlers and turn manager
- active: names an extra action the holder may take
- win_condition: overrides of the victory thresholds

The order of BUFFS is significant: p2's draft pool travels over the wire
as indices into buffs_for_level(level).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from types import MappingProxyType


class BuffCategory(Enum):
    ECONOMY = "economy"
    DISCOUNT = "discount"
    CONTROL = "control"
    INTEL = "intel"
    VICTORY = "victory"


@dataclass(frozen=True)
class BuffEffects:
    on_init: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    passive: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    active: str | None = None
    win_condition: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class Buff:
    id: str
    level: int
    category: BuffCategory
    label: str
    desc: str
    effects: BuffEffects = field(default_factory=BuffEffects)

    def __deepcopy__(self, memo):
        return self


def _buff(
    buff_id: str,
    level: int,
    category: BuffCategory,
    label: str,
    desc: str,
    on_init: dict[str, Any] | None = None,
    passive: dict[str, Any] | None = None,
    active: str | None = None,
    win_condition: dict[str, Any] | None = None,
) -> Buff:
    return Buff(
        id=buff_id,
        level=level,
        category=category,
        label=label,
        desc=desc,
        effects=BuffEffects(
            on_init=MappingProxyType(dict(on_init or {})),
            passive=MappingProxyType(dict(passive or {})),
            active=active,
            win_condition=MappingProxyType(dict(win_condition or {})),
        ),
    )


E, D, C, I, V = (
    BuffCategory.ECONOMY,
    BuffCategory.DISCOUNT,
    BuffCategory.CONTROL,
    BuffCategory.INTEL,
    BuffCategory.VICTORY,
)

_DEFINITIONS = [
    _buff("none", 0, E, "No Buff", "Standard rules."),

    # ---- Level 1: minor edges ----
    _buff("privilege_favor", 1, C, "Privilege Favor",
          "Start with 1 extra privilege.", on_init={"privilege": 1}),
    _buff("head_start", 1, E, "Head Start",
          "Start with 1 random basic gem.", on_init={"random_gem": 1}),
    _buff("royal_blood", 1, V, "Royal Blood",
          "Start with 1 crown.", on_init={"crowns": 1}),
    _buff("deep_pockets", 1, E, "Deep Pockets",
          "Gem capacity raised to 12.", passive={"gem_cap": 12}),
    _buff("backup_supply", 1, E, "Backup Supply",
          "Start with 2 random basic gems.", on_init={"random_gem": 2}),
    _buff("patient_investor", 1, E, "Patient Investor",
          "Your first reservation grants 1 extra gold.",
          passive={"first_reserve_bonus": 1}),
    _buff("insight", 1, I, "Insight",
          "The top card of the level 1 deck is revealed to you.",
          passive={"reveal_deck1": True}),
    _buff("down_payment", 1, D, "Down Payment",
          "Reserved cards cost 1 less.", passive={"reserved_discount": 1}),
    _buff("nimble_fingers", 1, E, "Nimble Fingers",
          "Reserving a card grants 1 random basic gem.",
          passive={"reserve_bonus_gem": True}),

    # ---- Level 2: strategic ----
    _buff("pearl_trader", 2, E, "Pearl Trader",
          "Start with 1 pearl. Gem capacity 11.",
          on_init={"pearl": 1}, passive={"gem_cap": 11}),
    _buff("gold_reserve", 2, E, "Gold Reserve",
          "Start with 1 gold and a reserved card.",
          on_init={"gold": 1, "reserve_card": 1}),
    _buff("color_preference", 2, D, "Color Preference",
          "Permanent discount of 1 in a random colour.",
          passive={"discount_random": 1}),
    _buff("extortion", 2, C, "Extortion",
          "Every second replenish steals a basic gem from the opponent.",
          active="replenish_steal"),
    _buff("flexible_discount", 2, D, "Flexible Discount",
          "Level 2 and 3 cards cost 1 less.", passive={"discount_any": 1}),
    _buff("bounty_hunter", 2, E, "Bounty Hunter",
          "Buying a card with crowns grants 1 random basic gem.",
          passive={"crown_bonus_gem": True}),
    _buff("recycler", 2, E, "Recycler",
          "Buying a level 2 or 3 card refunds one spent gem.",
          passive={"recycler": True}),
    _buff("aggressive_expansion", 2, C, "Aggressive Expansion",
          "Every replenish grants 1 random basic gem.",
          passive={"refill_bonus": True}),
    _buff("speculator", 2, E, "Speculator",
          "Buying a reserved card grants 2 random basic gems.",
          passive={"buy_reserved_bonus": 2}),
    _buff("hoarder", 2, E, "Hoarder",
          "Holding 3 reserved cards grants a gem at the start of your turn.",
          passive={"hoarder_bonus": True}),
    _buff("spymaster", 2, I, "Spymaster",
          "You may look at the top 3 cards of any deck.",
          active="peek_deck"),

    # ---- Level 3: game-changers ----
    _buff("greed_king", 3, V, "Greed King",
          "Each card and royal you own is worth 1 extra point.",
          passive={"point_bonus": 1}),
    _buff("double_agent", 3, C, "Double Agent",
          "Each privilege takes 2 gems.", passive={"privilege_buff": 2}),
    _buff("all_seeing_eye", 3, I, "All-Seeing Eye",
          "Gold shortfall on level 3 cards is halved. An extra level 3 card is visible.",
          passive={"gold_buff": True, "extra_l3": True}),
    _buff("wonder_architect", 3, D, "Wonder Architect",
          "Your first 3 level 3 cards cost 3 less.", passive={"l3_discount": 3}),
    _buff("minimalist", 3, V, "Minimalist",
          "Your first 2 cards give double bonuses.",
          passive={"double_bonus_first5": True}),
    _buff("pacifist", 3, C, "Pacifist",
          "Immune to steals. Start with 1 extra privilege.",
          on_init={"privilege": 1}, passive={"immune_negative": True}),
    _buff("puppet_master", 3, C, "Puppet Master",
          "Discard a reserved card to the bottom of its deck for a gem.",
          active="discard_reserved"),
    _buff("collector", 3, V, "Collector",
          "You may reserve from the opponent's reserve. Need 22 points to win.",
          passive={"steal_reserved": True}, win_condition={"points": 22}),
    _buff("royal_envoy", 3, V, "Royal Envoy",
          "After your 5th turn, pick a royal card.",
          passive={"royal_envoy": True}),
    _buff("desperate_gamble", 3, C, "Desperate Gamble",
          "Gain a privilege at the start of every second turn.",
          passive={"periodic_privilege": 2}),
    _buff("specialist", 3, V, "Specialist",
          "Cannot take 3 gems. Single colour victory needs only 7 points.",
          passive={"no_take3": True}, win_condition={"single_color": 7}),
]

del E, D, C, I, V

BUFFS: MappingProxyType = MappingProxyType({b.id: b for b in _DEFINITIONS})
NONE_BUFF = BUFFS["none"]


def get_buff(buff_id: str | None) -> Buff:
    """Look up a buff by id; unknown ids resolve to the no-op buff."""
    if buff_id is None:
        return NONE_BUFF
    return BUFFS.get(buff_id, NONE_BUFF)


def buffs_for_level(level: int) -> list[Buff]:
    """Buffs of one level in registry order."""
    return [b for b in _DEFINITIONS if b.level == level]

"""
Gem Duel - Static game data.

This module contains:
- The buff registry (drafting modifiers)
- Card templates and the Royal Court

Match setup (shuffling, draft pools) lives in setup.py and is imported
directly by callers, since it depends on the engine.
"""

from .buffs import BUFFS, Buff, BuffCategory, BuffEffects, get_buff, buffs_for_level
from .cards import CARD_TEMPLATES, ROYAL_CARDS, build_deck

__all__ = [
    "BUFFS",
    "Buff",
    "BuffCategory",
    "BuffEffects",
    "get_buff",
    "buffs_for_level",
    "CARD_TEMPLATES",
    "ROYAL_CARDS",
    "build_deck",
]

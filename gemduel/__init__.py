"""
Gem Duel - Deterministic rules engine for a two-player gem-and-card duel

The engine is action-sourced: every state is the replay of an action log.
It provides:
- State management through a pure reducer
- The end-of-turn state machine (win, royal milestones, gem cap)
- Buff drafting and rule modifiers
- Legal action generation and bot policies
- Host-authoritative online sync with checksums
"""

__version__ = "0.1.0"

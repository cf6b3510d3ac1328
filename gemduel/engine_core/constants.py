"""
Rule constants shared by every part of the engine.

These are the fixed numbers of the base game. Buffs may override some of
them per player (gem cap, win thresholds); the overrides are resolved in
modifiers.py, never by editing these values.
"""

PLAYERS = ("p1", "p2")

# Basic gem colours, in inventory order. These are also the card bonus colours.
BASIC_COLORS = ("blue", "white", "green", "black", "red")
BONUS_COLORS = BASIC_COLORS
PEARL = "pearl"
GOLD = "gold"
GEM_COLORS = BASIC_COLORS + (PEARL, GOLD)

GRID_SIZE = 5

# Replenish fills empty cells starting at the centre and spiralling outwards.
SPIRAL_ORDER = (
    (2, 2), (2, 3), (3, 3), (3, 2), (3, 1),
    (2, 1), (1, 1), (1, 2), (1, 3), (1, 4),
    (2, 4), (3, 4), (4, 4), (4, 3), (4, 2),
    (4, 1), (4, 0), (3, 0), (2, 0), (1, 0),
    (0, 0), (0, 1), (0, 2), (0, 3), (0, 4),
)

# Gems in a full supply (board + bag).
INITIAL_GEM_COUNTS = {
    "blue": 4,
    "white": 4,
    "green": 4,
    "black": 4,
    "red": 4,
    PEARL: 2,
    GOLD: 3,
}

CARD_LEVELS = (1, 2, 3)
MARKET_SLOTS = {1: 5, 2: 4, 3: 3}

RESERVE_LIMIT = 3
PRIVILEGE_POOL = 3
DEFAULT_GEM_CAP = 10

DEFAULT_POINTS_GOAL = 20
DEFAULT_CROWNS_GOAL = 10
DEFAULT_SINGLE_COLOR_GOAL = 10

ROYAL_MILESTONES = (3, 6)


def opponent_of(player: str) -> str:
    """Return the other player key."""
    return "p2" if player == "p1" else "p1"

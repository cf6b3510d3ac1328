"""
Engine Core - Deterministic game state management.

The engine is the runtime that:
1. Builds a GameState from INIT / INIT_DRAFT payloads
2. Applies actions via the reducer and the domain handlers
3. Runs the end-of-turn state machine
4. Generates legal actions
5. Encodes states and actions for sync and replay
"""

from .state import GameState, GamePhase, GameMode, Gem, Card, RoyalCard, BuffAssignment, Ability
from .action import Action, ActionType
from .reducer import Reducer, apply_action, replay
from .action_generator import ActionGenerator, legal_actions
from .transaction import Transaction, calculate_transaction
from .codec import state_to_dict, state_from_dict, action_to_dict, action_from_dict

__all__ = [
    "GameState",
    "GamePhase",
    "GameMode",
    "Gem",
    "Card",
    "RoyalCard",
    "BuffAssignment",
    "Ability",
    "Action",
    "ActionType",
    "Reducer",
    "apply_action",
    "replay",
    "ActionGenerator",
    "legal_actions",
    "Transaction",
    "calculate_transaction",
    "state_to_dict",
    "state_from_dict",
    "action_to_dict",
    "action_from_dict",
]

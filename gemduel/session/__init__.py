"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of a match:
- Created when a match starts (INIT or INIT_DRAFT)
- Holds the action log; the current state is its replay
- Runs bot turns through the GameLoop
- Destroyed when the game ends

The only persistence is the action log, saved as JSON.
"""

from .action_log import ActionLog
from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "ActionLog",
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]

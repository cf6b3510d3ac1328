"""
Game Loop - Drives a local session between human and bot turns.

The loop:
1. Human submits an action
2. Engine records it in the session log
3. Engine runs bot actions until a human is to act again (interrupt
   phases such as SELECT_ROYAL or DISCARD_EXCESS_GEMS count as bot turns
   when the bot owns them)
4. Repeat until a winner is set
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action_generator import legal_actions

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from .manager import Session

logger = logging.getLogger(__name__)

# Safety limit on consecutive bot actions per call
MAX_BOT_ACTIONS = 200


class LoopState(Enum):
    """State of the game loop."""
    WAITING_HUMAN_ACTION = "waiting_human_action"
    RUNNING_BOT = "running_bot"
    STALLED = "stalled"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a turn.
    """
    success: bool
    loop_state: LoopState

    # Bot actions taken, as "p2: TAKE_GEMS"
    bot_actions: list[str] = field(default_factory=list)

    # Errors/warnings
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    # Game over info
    winner: str | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)
        result = loop.submit(action)
        show(result.bot_actions, session.game_state)
    """

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.WAITING_HUMAN_ACTION

    def submit(self, action: Action) -> TurnResult:
        """Record a human action, then let the bots answer."""
        from .manager import SessionState

        game = self.session.game_state
        if game is None:
            return TurnResult(success=False, loop_state=self.state, errors=["No game state"])
        if self.session.is_bot_turn():
            return TurnResult(success=False, loop_state=self.state, errors=["Not your turn"])

        new_state = self.session.log.record(action)
        self.session.state = SessionState.ACTIVE
        warnings = [new_state.toast_message] if new_state and new_state.toast_message else []

        result = self.run_bots()
        result.warnings = warnings + result.warnings
        return result

    def run_bots(self, max_actions: int = MAX_BOT_ACTIONS) -> TurnResult:
        """
        Run bot actions until it's a human's turn or the game ends.
        """
        from .manager import SessionState

        self.state = LoopState.RUNNING_BOT
        self.session.state = SessionState.BOT_TURN
        taken: list[str] = []

        for _ in range(max_actions):
            game = self.session.game_state
            if game is None or game.winner is not None or not self.session.is_bot_turn():
                break

            bot = self.session.bots[game.turn]
            legal = legal_actions(game)
            if not legal:
                logger.warning("Bot %s has no legal action in phase %s", game.turn, game.phase.value)
                self.state = LoopState.STALLED
                self.session.state = SessionState.ACTIVE
                return TurnResult(success=False, loop_state=self.state, bot_actions=taken,
                                  errors=["Bot has no legal action"])

            decision = bot.select_action(game, legal)
            self.session.log.record(decision.action)
            taken.append(f"{game.turn}: {decision.action.action_type.value}")

        game = self.session.game_state
        if game is not None and game.winner is not None:
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER
            return TurnResult(success=True, loop_state=self.state, bot_actions=taken, winner=game.winner)

        self.state = LoopState.WAITING_HUMAN_ACTION
        self.session.state = SessionState.ACTIVE
        return TurnResult(success=True, loop_state=self.state, bot_actions=taken)

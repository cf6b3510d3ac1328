"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller starts a session → setup is rolled from a seed and the bootstrap
   action (INIT, or INIT_DRAFT when a buff level is chosen) opens the log
2. During the game:
   - Human actions are recorded in the session's ActionLog
   - Bot players answer through the GameLoop
3. Game ends → session removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- The only persistent form of a match is its action log (JSON), which
  replays to the exact same state
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
import logging
import time
import uuid

from ..bots import BotPolicy, GreedyPolicy
from ..engine_core.state import GameMode, GameState
from ..games.gem_duel.setup import create_init_action, create_init_draft_action
from .action_log import ActionLog

if TYPE_CHECKING:
    from ..network.peer import SessionConfig

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    CREATED = "created"  # Bootstrap applied, nobody has moved yet
    ACTIVE = "active"  # Game in progress
    BOT_TURN = "bot_turn"  # Processing bot turns
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # User quit


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The action log (the state is its replay)
    - Bots for automated players
    - The network config for online matches
    - Session metadata
    """
    session_id: str
    created_at: float
    log: ActionLog = field(default_factory=ActionLog)

    state: SessionState = SessionState.CREATED
    bots: dict[str, BotPolicy] = field(default_factory=dict)
    human_player_id: str | None = "p1"
    network: SessionConfig | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def game_state(self) -> GameState | None:
        return self.log.current_state

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state in {
            SessionState.CREATED,
            SessionState.ACTIVE,
            SessionState.BOT_TURN,
        }

    def is_bot_turn(self) -> bool:
        game = self.game_state
        return game is not None and game.winner is None and game.turn in self.bots

    def is_human_turn(self) -> bool:
        """Check if it's the human player's turn."""
        game = self.game_state
        return game is not None and game.turn == self.human_player_id


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from a seed and match options
    - Track active sessions
    - Clean up completed sessions
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        seed: int | None = None,
        mode: GameMode = GameMode.LOCAL_PVP,
        buff_level: int | None = None,
        p1_buff: str = "none",
        p2_buff: str = "none",
        bot_players: list[str] | None = None,
        network: SessionConfig | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            seed: Seed for the setup shuffle and bot randomness
            mode: Match type
            buff_level: Start with a buff draft at this level (1-3)
            p1_buff / p2_buff: Fixed buffs when there is no draft
            bot_players: Player ids played by bots (PVE uses ["p2"])
            network: Role and heartbeat settings for online matches

        Returns:
            New Session with the bootstrap action applied
        """
        if bot_players is None:
            bot_players = ["p2"] if mode == GameMode.PVE else []

        if buff_level:
            bootstrap = create_init_draft_action(
                seed, buff_level=buff_level, mode=mode, is_pve=bool(bot_players)
            )
        else:
            bootstrap = create_init_action(seed, p1_buff=p1_buff, p2_buff=p2_buff, mode=mode)

        log = ActionLog()
        log.clear_and_init(bootstrap)

        bots: dict[str, BotPolicy] = {}
        for i, pid in enumerate(bot_players):
            bot_seed = None if seed is None else seed + i + 1
            bots[pid] = GreedyPolicy(seed=bot_seed)

        human = next((pid for pid in ("p1", "p2") if pid not in bots), None)
        session = Session(
            session_id=str(uuid.uuid4()),
            created_at=time.time(),
            log=log,
            bots=bots,
            human_player_id=human,
            network=network,
            metadata={"seed": seed, "mode": mode.value, "buff_level": buff_level},
        )

        self._sessions[session.session_id] = session
        logger.info("Created session %s (%s)", session.session_id, mode.value)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed"):
        """
        End a session and clean up.

        The session is removed from memory.
        """
        session = self._sessions.pop(session_id, None)
        if session:
            if reason == "completed":
                session.state = SessionState.GAME_OVER
            else:
                session.state = SessionState.ABANDONED
            session.bots.clear()

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600):
        """
        Clean up sessions older than max_age.

        Called periodically to free memory.
        """
        current_time = time.time()
        to_remove = []

        for session_id, session in self._sessions.items():
            age = current_time - session.created_at
            if age > max_age_seconds and not session.is_active():
                to_remove.append(session_id)

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")

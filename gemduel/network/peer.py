"""
Online Session - Host-authoritative replication of one match.

Roles:
- HOST (p1): applies its own actions immediately, then broadcasts
  GAME_ACTION with the checksum of the resulting state. Guest requests are
  checked for turn ownership, applied, and echoed the same way.
- GUEST (p2): never applies its own actions. It sends GUEST_REQUEST and
  updates its mirror only when the host echoes the approved action.

On checksum mismatch the guest drops the action, sends REQUEST_FULL_SYNC,
and ignores game actions until a SYNC_STATE arrives. Heartbeats only feed
ConnectionHealth.

The role is fixed in SessionConfig when the connection is established.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
import logging

from pydantic import ValidationError

from ..config import NetworkSettings
from ..engine_core.action import Action, ActionType
from ..engine_core.codec import action_from_dict, action_to_dict, state_from_dict, state_to_dict
from ..engine_core.reducer import apply_action
from ..engine_core.state import GameState
from ..session.action_log import ActionLog
from .authority import validate_online_action
from .checksum import generate_state_hash
from .health import ConnectionHealth
from .protocol import (
    ActionPayload,
    GameActionMessage,
    GuestRequest,
    HeartbeatPing,
    HeartbeatPong,
    PeerRole,
    RequestFullSync,
    SyncReason,
    SyncState,
    dump_message,
    parse_message,
)
from .transport import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """Connection-level settings decided once per match."""
    role: PeerRole
    settings: NetworkSettings = field(default_factory=NetworkSettings)

    @property
    def is_host(self) -> bool:
        return self.role == PeerRole.HOST

    @property
    def local_player(self) -> str:
        return "p1" if self.is_host else "p2"

    @property
    def remote_player(self) -> str:
        return "p2" if self.is_host else "p1"


class OnlineSession:
    """
    One peer of an online match.

    Usage:
        host = OnlineSession(SessionConfig(PeerRole.HOST), transport_a)
        guest = OnlineSession(SessionConfig(PeerRole.GUEST), transport_b)
        host.dispatch(create_init_action(seed, mode=GameMode.ONLINE_MULTIPLAYER))
        guest.poll()
    """

    def __init__(
        self,
        config: SessionConfig,
        transport: Transport,
        log: ActionLog | None = None,
        health: ConnectionHealth | None = None,
        on_state_change: Callable[[GameState | None], None] | None = None,
    ):
        self.config = config
        self.transport = transport
        self.log = log or ActionLog()
        self.health = health or ConnectionHealth(settings=config.settings)
        self.on_state_change = on_state_change
        self.awaiting_sync = False
        self.desync_count = 0

    @property
    def state(self) -> GameState | None:
        return self.log.current_state

    # =========================================================================
    # Local intents
    # =========================================================================

    def dispatch(self, action: Action) -> bool:
        """
        Submit a local action.

        Returns True if it was applied (host) or sent for approval (guest).
        """
        if not validate_online_action(self.state, action, self.config.local_player):
            return False
        if self.config.is_host:
            self._apply_and_broadcast(action)
            return True
        self._send(GuestRequest(action=ActionPayload(**action_to_dict(action))))
        return True

    def send_full_sync(self, reason: SyncReason = SyncReason.INITIAL) -> None:
        """Host: push the authoritative snapshot to the guest."""
        if not self.config.is_host or self.state is None:
            return
        self._send(SyncState(state=state_to_dict(self.state), reason=reason))

    def heartbeat(self) -> None:
        if self.health.ping_due():
            self._send(HeartbeatPing(timestamp=self.health.make_ping()))

    # =========================================================================
    # Inbound
    # =========================================================================

    def poll(self) -> int:
        """Handle everything the transport has delivered. Returns the count."""
        messages = self.transport.receive()
        for raw in messages:
            self.handle_raw(raw)
        return len(messages)

    def handle_raw(self, raw: Any) -> None:
        try:
            message = parse_message(raw)
        except ValidationError as exc:
            logger.warning("Dropped malformed message: %s", exc.errors()[:1])
            return

        handler = {
            "SYNC_STATE": self._on_sync_state,
            "GAME_ACTION": self._on_game_action,
            "GUEST_REQUEST": self._on_guest_request,
            "REQUEST_FULL_SYNC": self._on_request_full_sync,
            "HEARTBEAT_PING": self._on_ping,
            "HEARTBEAT_PONG": self._on_pong,
        }[message.type]
        handler(message)

    def _decode_action(self, payload: ActionPayload) -> Action | None:
        try:
            return action_from_dict(payload.model_dump())
        except (KeyError, ValueError) as exc:
            logger.warning("Dropped unknown action %r: %s", payload.type, exc)
            return None

    def _on_sync_state(self, message: SyncState) -> None:
        if self.config.is_host:
            logger.warning("Host ignored SYNC_STATE from guest")
            return
        try:
            synced = state_from_dict(message.state)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropped malformed SYNC_STATE: %s", exc)
            return
        self.awaiting_sync = False
        self._record(Action(ActionType.FORCE_SYNC, {"state": message.state}), synced)
        logger.info("Applied full sync (%s)", message.reason.value if message.reason else "unspecified")

    def _on_game_action(self, message: GameActionMessage) -> None:
        if self.config.is_host:
            logger.warning("Host ignored GAME_ACTION from guest")
            return
        if self.awaiting_sync:
            logger.debug("Ignoring %s while waiting for a full sync", message.action.type)
            return
        action = self._decode_action(message.action)
        if action is None:
            return

        base = None if action.is_bootstrap else self.state
        try:
            predicted = apply_action(base, action)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropped malformed %s: %s", action.action_type.value, exc)
            return
        if message.checksum is not None:
            local = generate_state_hash(predicted)
            if local != message.checksum:
                logger.error("DESYNC: local %s vs remote %s on %s", local, message.checksum, action.action_type.value)
                self.desync_count += 1
                self.awaiting_sync = True
                self._send(RequestFullSync())
                return

        if action.is_bootstrap:
            self.log.clear_and_init(action)
            self._notify()
        else:
            self._record(action, predicted)

    def _on_guest_request(self, message: GuestRequest) -> None:
        if not self.config.is_host:
            logger.warning("Guest ignored GUEST_REQUEST")
            return
        action = self._decode_action(message.action)
        if action is None:
            return
        if validate_online_action(self.state, action, self.config.remote_player):
            self._apply_and_broadcast(action)

    def _on_request_full_sync(self, message: RequestFullSync) -> None:
        if not self.config.is_host:
            logger.warning("Guest ignored REQUEST_FULL_SYNC")
            return
        self.send_full_sync(SyncReason.RECOVERY)

    def _on_ping(self, message: HeartbeatPing) -> None:
        self._send(HeartbeatPong(timestamp=message.timestamp))

    def _on_pong(self, message: HeartbeatPong) -> None:
        self.health.record_pong(message.timestamp)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _apply_and_broadcast(self, action: Action) -> None:
        if action.is_bootstrap:
            new_state = self.log.clear_and_init(action)
            self._notify()
        else:
            new_state = self._record(action)
        self._send(GameActionMessage(
            action=ActionPayload(**action_to_dict(action)),
            checksum=generate_state_hash(new_state),
        ))

    def _record(self, action: Action, result: GameState | None = None) -> GameState | None:
        new_state = self.log.record(action, result)
        self._notify()
        return new_state

    def _notify(self) -> None:
        if self.on_state_change is not None:
            self.on_state_change(self.state)

    def _send(self, message) -> None:
        self.transport.send(dump_message(message))

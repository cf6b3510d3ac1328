"""
Network Module - Host-authoritative peer-to-peer sync.

Provides:
- Wire messages (pydantic models) and parse_message
- generate_state_hash for desync detection
- validate_online_action for turn ownership at the host
- ConnectionHealth for heartbeat status
- OnlineSession, the protocol driver for one peer
"""

from .protocol import (
    ActionPayload,
    GameActionMessage,
    GuestRequest,
    HeartbeatPing,
    HeartbeatPong,
    MessageType,
    NetworkMessage,
    PeerRole,
    RequestFullSync,
    SyncReason,
    SyncState,
    parse_message,
    dump_message,
)
from .checksum import djb2, generate_state_hash
from .authority import validate_online_action
from .health import ConnectionHealth, ConnectionStatus
from .transport import LoopbackTransport, Transport, loopback_pair
from .peer import OnlineSession, SessionConfig

__all__ = [
    "ActionPayload",
    "GameActionMessage",
    "GuestRequest",
    "HeartbeatPing",
    "HeartbeatPong",
    "MessageType",
    "NetworkMessage",
    "PeerRole",
    "RequestFullSync",
    "SyncReason",
    "SyncState",
    "parse_message",
    "dump_message",
    "djb2",
    "generate_state_hash",
    "validate_online_action",
    "ConnectionHealth",
    "ConnectionStatus",
    "LoopbackTransport",
    "Transport",
    "loopback_pair",
    "OnlineSession",
    "SessionConfig",
]

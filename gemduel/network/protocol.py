"""
Network Protocol - Wire messages exchanged between host and guest.

Message types:
- SYNC_STATE: full snapshot, sent on join and for desync recovery
- GAME_ACTION: an approved action, optionally with the sender's checksum
- GUEST_REQUEST: an action the guest wants the host to approve
- REQUEST_FULL_SYNC: ask the host for a SYNC_STATE
- HEARTBEAT_PING / HEARTBEAT_PONG: connection health only

Actions travel as {"type", "payload"} and states as codec dicts, never as
engine objects.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter


# =============================================================================
# Enums
# =============================================================================

class MessageType(str, Enum):
    """Discriminator values."""
    SYNC_STATE = "SYNC_STATE"
    GAME_ACTION = "GAME_ACTION"
    GUEST_REQUEST = "GUEST_REQUEST"
    REQUEST_FULL_SYNC = "REQUEST_FULL_SYNC"
    HEARTBEAT_PING = "HEARTBEAT_PING"
    HEARTBEAT_PONG = "HEARTBEAT_PONG"


class SyncReason(str, Enum):
    """Why a full snapshot was sent."""
    INITIAL = "INITIAL"
    RECOVERY = "RECOVERY"


class PeerRole(str, Enum):
    """Role decided once when the connection is established."""
    HOST = "host"
    GUEST = "guest"


# =============================================================================
# Payloads
# =============================================================================

class ActionPayload(BaseModel):
    """Wire form of an engine Action."""
    type: str = Field(description="ActionType name, e.g. TAKE_GEMS")
    payload: Optional[dict[str, Any]] = None


# =============================================================================
# Messages
# =============================================================================

class SyncState(BaseModel):
    type: Literal["SYNC_STATE"] = "SYNC_STATE"
    state: dict[str, Any]
    reason: Optional[SyncReason] = None


class GameActionMessage(BaseModel):
    type: Literal["GAME_ACTION"] = "GAME_ACTION"
    action: ActionPayload
    checksum: Optional[str] = None


class GuestRequest(BaseModel):
    type: Literal["GUEST_REQUEST"] = "GUEST_REQUEST"
    action: ActionPayload


class RequestFullSync(BaseModel):
    type: Literal["REQUEST_FULL_SYNC"] = "REQUEST_FULL_SYNC"


class HeartbeatPing(BaseModel):
    type: Literal["HEARTBEAT_PING"] = "HEARTBEAT_PING"
    timestamp: float


class HeartbeatPong(BaseModel):
    type: Literal["HEARTBEAT_PONG"] = "HEARTBEAT_PONG"
    timestamp: float


NetworkMessage = Annotated[
    Union[SyncState, GameActionMessage, GuestRequest, RequestFullSync, HeartbeatPing, HeartbeatPong],
    Field(discriminator="type"),
]

_MESSAGE_ADAPTER: TypeAdapter = TypeAdapter(NetworkMessage)


def parse_message(data: Any):
    """
    Validate raw wire data into a message model.

    Accepts a dict or a JSON string. Raises pydantic.ValidationError on
    malformed input.
    """
    if isinstance(data, (str, bytes)):
        return _MESSAGE_ADAPTER.validate_json(data)
    return _MESSAGE_ADAPTER.validate_python(data)


def dump_message(message: BaseModel) -> dict[str, Any]:
    """Encode a message model as JSON-safe data."""
    return message.model_dump(mode="json")

"""
Connection health from heartbeat ping/pong.

Heartbeats never touch game traffic; they only feed the status indicator
and the latency estimate.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import time

from ..config import NetworkSettings


class ConnectionStatus(Enum):
    CONNECTED = "connected"
    UNSTABLE = "unstable"
    DISCONNECTED = "disconnected"


def _now_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class ConnectionHealth:
    """
    Tracks the last pong and the round-trip latency.

    `clock` returns milliseconds; tests pass a fake one.
    """
    settings: NetworkSettings = field(default_factory=NetworkSettings)
    clock: Callable[[], float] = _now_ms
    last_pong_at: float | None = None
    last_ping_at: float | None = None
    latency_ms: float | None = None
    connected: bool = True

    def ping_due(self) -> bool:
        if self.last_ping_at is None:
            return True
        return self.clock() - self.last_ping_at >= self.settings.ping_interval_ms

    def make_ping(self) -> float:
        """Record that a ping goes out now; returns its timestamp."""
        self.last_ping_at = self.clock()
        if self.last_pong_at is None:
            self.last_pong_at = self.last_ping_at
        return self.last_ping_at

    def record_pong(self, timestamp: float) -> None:
        now = self.clock()
        self.last_pong_at = now
        self.latency_ms = max(0.0, now - timestamp)
        self.connected = True

    def mark_disconnected(self) -> None:
        self.connected = False

    @property
    def status(self) -> ConnectionStatus:
        if not self.connected:
            return ConnectionStatus.DISCONNECTED
        if self.last_pong_at is not None and self.clock() - self.last_pong_at > self.settings.timeout_threshold_ms:
            return ConnectionStatus.UNSTABLE
        return ConnectionStatus.CONNECTED

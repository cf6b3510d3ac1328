"""
Transport - The data channel between two peers.

The engine only needs to send JSON-safe dicts and to drain what arrived.
Real sockets belong to the application shell; LoopbackTransport connects
two in-process peers for tests and hot-seat play.
"""

from __future__ import annotations
from collections import deque
from typing import Any, Protocol
import json


class Transport(Protocol):
    def send(self, data: dict[str, Any]) -> None: ...

    def receive(self) -> list[str]: ...


class LoopbackTransport:
    """
    One end of an in-memory channel.

    Messages are serialized to JSON on send so receivers see exactly what
    a socket would deliver.
    """

    def __init__(self):
        self._inbox: deque[str] = deque()
        self._peer: LoopbackTransport | None = None
        self.closed = False

    def connect(self, peer: LoopbackTransport) -> None:
        self._peer = peer
        peer._peer = self

    def send(self, data: dict[str, Any]) -> None:
        if self._peer is None or self.closed or self._peer.closed:
            return
        self._peer._inbox.append(json.dumps(data))

    def inject(self, raw: str) -> None:
        """Queue raw wire data as if the peer had sent it."""
        self._inbox.append(raw)

    def receive(self) -> list[str]:
        messages = list(self._inbox)
        self._inbox.clear()
        return messages

    @property
    def pending(self) -> int:
        return len(self._inbox)

    def close(self) -> None:
        self.closed = True


def loopback_pair() -> tuple[LoopbackTransport, LoopbackTransport]:
    a, b = LoopbackTransport(), LoopbackTransport()
    a.connect(b)
    return a, b

"""Transport primitives used by the session lifecycle.

The lifecycle only needs to send events to explicit sids, force a disconnect
and check whether a sid is live. ``SocketIOTransport`` provides these on top
of ``socketio.AsyncServer``; tests substitute a recording fake.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence, Union

import socketio

logger = logging.getLogger(__name__)

Target = Union[str, Sequence[str]]


class Transport(Protocol):
    async def emit(self, event: str, data: Any, to: Target) -> None:
        ...

    async def disconnect(self, sid: str) -> None:
        ...

    def is_connected(self, sid: str) -> bool:
        ...


class SocketIOTransport:
    """Transport backed by a python-socketio server.

    Multi-argument events are sent by passing a tuple as ``data``.
    """

    def __init__(self, server: socketio.AsyncServer, namespace: str = "/") -> None:
        self.server = server
        self.namespace = namespace

    async def emit(self, event: str, data: Any, to: Target) -> None:
        if isinstance(to, str):
            recipients: Target = to
        else:
            recipients = list(to)
            # socketio treats an empty target as "everyone"
            if not recipients:
                return
        await self.server.emit(event, data, to=recipients, namespace=self.namespace)

    async def disconnect(self, sid: str) -> None:
        await self.server.disconnect(sid, namespace=self.namespace)

    def is_connected(self, sid: str) -> bool:
        return bool(self.server.manager.is_connected(sid, self.namespace))

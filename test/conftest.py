"""Pytest configuration and shared fixtures."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Set

import pytest

from penguin_voice.connection.session_lifecycle import SessionLifecycle
from penguin_voice.connection.version_gate import VersionGate

VALID_USER_AGENT = "PenguinChat/1.0.0 (win)"


@dataclass
class SentEvent:
    to: str
    event: str
    data: Any


@dataclass
class RecordingTransport:
    """Fake transport that records what each connection would receive.

    Mirrors Socket.IO behaviour closely enough for the lifecycle: events to
    sids that are not connected vanish, and a forced disconnect triggers the
    registered disconnect callback.
    """

    connected: Set[str] = field(default_factory=set)
    sent: List[SentEvent] = field(default_factory=list)
    disconnected: List[str] = field(default_factory=list)
    on_disconnect: Optional[Callable[[str], Awaitable[Any]]] = None

    async def emit(self, event: str, data: Any, to) -> None:
        # Real emits suspend; give other tasks a chance to run.
        await asyncio.sleep(0)
        targets = [to] if isinstance(to, str) else list(to)
        for sid in targets:
            if sid in self.connected:
                self.sent.append(SentEvent(to=sid, event=event, data=data))

    async def disconnect(self, sid: str) -> None:
        if sid not in self.connected:
            return
        self.connected.discard(sid)
        self.disconnected.append(sid)
        if self.on_disconnect is not None:
            await self.on_disconnect(sid)

    def is_connected(self, sid: str) -> bool:
        return sid in self.connected

    def events_for(self, sid: str, event: Optional[str] = None) -> List[SentEvent]:
        return [
            e for e in self.sent
            if e.to == sid and (event is None or e.event == event)
        ]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def lifecycle(transport):
    """Lifecycle wired to the recording transport, cleanup on disconnect."""
    lc = SessionLifecycle(transport, version_gate=VersionGate(["1.0.0"]))
    transport.on_disconnect = lc.disconnect
    return lc


@pytest.fixture
def connect(lifecycle, transport):
    """Factory that brings a sid through the handshake."""
    async def _connect(sid: str, user_agent: str = VALID_USER_AGENT) -> str:
        await lifecycle.connect(sid, user_agent)
        transport.connected.add(sid)
        return sid
    return _connect

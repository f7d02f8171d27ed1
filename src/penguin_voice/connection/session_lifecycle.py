"""Session lifecycle: connect, join, identify, leave, signal, disconnect.

Each Socket.IO event for a connection is dispatched to one method here. State
changes go through the shared ``SessionStore`` while its lock is held, and
broadcasts are computed from the membership snapshot taken under that same
lock, so peers are only told about state that was actually committed.

Protocol violations are fatal to the offending connection only. They are
raised as ``ProtocolViolation`` inside the critical section (which leaves
state untouched) and handled after the lock is released by disconnecting the
client; the transport then calls back into ``disconnect`` for cleanup.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

from penguin_voice.connection.errors import (
    HandshakeRejected,
    MalformedCommand,
    ProtocolViolation,
    SpoofingAttempt,
)
from penguin_voice.connection.models import (
    ConnectionSession,
    IdentifyCommand,
    JoinCommand,
    SignalCommand,
)
from penguin_voice.connection.session_store import SessionStore
from penguin_voice.connection.signal_router import SignalRouter
from penguin_voice.connection.transport import Transport
from penguin_voice.connection.version_gate import ClientVersion, VersionGate

logger = logging.getLogger(__name__)

CommandT = TypeVar("CommandT")


class SessionLifecycle:
    """Per-connection state machine over the shared session store."""

    def __init__(
        self,
        transport: Transport,
        version_gate: Optional[VersionGate] = None,
        store: Optional[SessionStore] = None,
        router: Optional[SignalRouter] = None,
    ) -> None:
        self.transport = transport
        self.version_gate = version_gate or VersionGate()
        self.store = store or SessionStore()
        self.router = router or SignalRouter(transport)

    @property
    def connection_count(self) -> int:
        return self.store.count()

    # -------------------------------------------------------------------------
    # Connection establishment / teardown
    # -------------------------------------------------------------------------

    async def connect(self, sid: str, user_agent: Optional[str]) -> ClientVersion:
        """Gate the handshake and register the connection.

        Raises:
            HandshakeRejected: The client version is not accepted; nothing is
                registered
        """
        try:
            version = self.version_gate.check(user_agent)
        except HandshakeRejected:
            logger.warning(
                "[SocketIO] Handshake rejected | sid=%s user_agent=%r", sid, user_agent
            )
            raise

        async with self.store.lock:
            self.store.open(sid)
            total = self.store.count()

        logger.info(
            "[SocketIO] Connected | sid=%s version=%s platform=%s total=%d",
            sid, version.version, version.platform, total,
        )
        return version

    async def disconnect(self, sid: str) -> bool:
        """Drop the connection from its room and from the registry.

        Safe to call more than once; only the first call has an effect.
        """
        async with self.store.lock:
            session = self.store.discard(sid)
            total = self.store.count()

        if session is None:
            logger.debug("[SocketIO] Disconnect for unknown sid=%s", sid)
            return False

        logger.info(
            "[SocketIO] Disconnected | sid=%s room=%s total=%d",
            sid, session.room_id, total,
        )
        return True

    # -------------------------------------------------------------------------
    # Client events
    # -------------------------------------------------------------------------

    async def join(self, sid: str, *args: Any) -> None:
        try:
            command = self._parse(sid, "join", JoinCommand.from_args, args)
            async with self.store.lock:
                await self._join(sid, command)
        except ProtocolViolation as violation:
            await self._terminate(violation)

    async def identify(self, sid: str, *args: Any) -> None:
        try:
            command = self._parse(sid, "id", IdentifyCommand.from_args, args)
            async with self.store.lock:
                await self._identify(sid, command)
        except ProtocolViolation as violation:
            await self._terminate(violation)

    async def leave(self, sid: str, *args: Any) -> None:
        """Leave the current room and drop the claimed client id.

        The connection stays registered and may rejoin under a new id.
        """
        async with self.store.lock:
            session = self.store.registry.get(sid)
            room_id = None
            if session is not None:
                room_id = self.store.vacate(session)
                session.client_id = None

        if room_id is not None:
            logger.info("[SocketIO] Left room | sid=%s room=%s", sid, room_id)

    async def signal(self, sid: str, *args: Any) -> None:
        try:
            command = self._parse(sid, "signal", SignalCommand.from_args, args)
        except ProtocolViolation as violation:
            await self._terminate(violation)
            return
        await self.router.relay(sid, command)

    # -------------------------------------------------------------------------
    # Transitions (store lock held)
    # -------------------------------------------------------------------------

    async def _join(self, sid: str, command: JoinCommand) -> None:
        session = self.store.registry.get(sid)
        if session is None:
            logger.warning("[SocketIO] join from unregistered sid=%s", sid)
            return

        room_id = command.room_id
        peers = self.store.snapshot_room(room_id, exclude=sid)
        self._check_claim(session, command.client_id, peers)

        self.store.place(session, room_id)
        session.client_id = command.client_id

        await self.transport.emit(
            "join",
            (sid, {"clientId": command.client_id}),
            to=list(peers),
        )
        await self.transport.emit(
            "setClients",
            {
                peer_sid: peer.describe() if peer is not None else {}
                for peer_sid, peer in peers.items()
            },
            to=sid,
        )
        logger.info(
            "[SocketIO] Joined room | sid=%s room=%s client_id=%s peers=%d",
            sid, room_id, command.client_id, len(peers),
        )

    async def _identify(self, sid: str, command: IdentifyCommand) -> None:
        session = self.store.registry.get(sid)
        if session is None:
            logger.warning("[SocketIO] id from unregistered sid=%s", sid)
            return

        peers = {}
        if session.room_id is not None:
            peers = self.store.snapshot_room(session.room_id, exclude=sid)
        self._check_claim(session, command.client_id, peers)

        session.client_id = command.client_id
        await self.transport.emit(
            "setClient",
            (sid, session.describe()),
            to=list(peers),
        )
        logger.debug(
            "[SocketIO] Identified | sid=%s client_id=%s room=%s",
            sid, command.client_id, session.room_id,
        )

    @staticmethod
    def _check_claim(
        session: ConnectionSession,
        client_id: Any,
        peers: dict,
    ) -> None:
        """Reject a client id held by a peer or differing from the session's own."""
        if session.client_id is not None and session.client_id != client_id:
            raise SpoofingAttempt(
                session.sid,
                client_id,
                f"tried to change client id {session.client_id} -> {client_id}",
            )
        for peer_sid, peer in peers.items():
            if peer is not None and peer.client_id == client_id:
                raise SpoofingAttempt(
                    session.sid,
                    client_id,
                    f"client id already held by {peer_sid}",
                )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse(
        sid: str,
        event: str,
        parser: Callable[[Sequence[Any]], CommandT],
        args: Sequence[Any],
    ) -> CommandT:
        try:
            return parser(args)
        except ValueError as exc:
            raise MalformedCommand(sid, event, args) from exc

    async def _terminate(self, violation: ProtocolViolation) -> None:
        if isinstance(violation, MalformedCommand):
            logger.error(
                "[SocketIO] Socket %s sent invalid %s command: %r",
                violation.sid, violation.event, violation.payload,
            )
        else:
            logger.error(
                "[SocketIO] Socket %s sent invalid command, %s",
                violation.sid, violation,
            )
        await self.transport.disconnect(violation.sid)

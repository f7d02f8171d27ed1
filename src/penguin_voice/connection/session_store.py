"""In-memory session registry and room index.

``ConnectionRegistry`` maps a Socket.IO sid to its ``ConnectionSession``;
``RoomIndex`` maps a room id to the set of member sids. Neither is
synchronized on its own. ``SessionStore`` owns one of each together with the
single lock that serializes every read-then-decide sequence and every
mutation across connections.

Invariant kept by the store helpers: a sid is in ``RoomIndex[room_id]`` if and
only if its session's ``room_id`` equals ``room_id``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, FrozenSet, Iterator, Optional, Set

from penguin_voice.connection.models import ConnectionSession

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """sid -> ConnectionSession"""

    def __init__(self) -> None:
        self._sessions: Dict[str, ConnectionSession] = {}

    def get(self, sid: str) -> Optional[ConnectionSession]:
        return self._sessions.get(sid)

    def set(self, sid: str, session: ConnectionSession) -> None:
        self._sessions[sid] = session

    def remove(self, sid: str) -> Optional[ConnectionSession]:
        return self._sessions.pop(sid, None)

    def __contains__(self, sid: object) -> bool:
        return sid in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._sessions))


class RoomIndex:
    """room_id -> set of member sids. Empty rooms are dropped."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Set[str]] = {}

    def add_to_room(self, room_id: str, sid: str) -> None:
        self._rooms.setdefault(room_id, set()).add(sid)

    def remove_from_room(self, room_id: str, sid: str) -> bool:
        members = self._rooms.get(room_id)
        if not members or sid not in members:
            return False
        members.discard(sid)
        if not members:
            del self._rooms[room_id]
        return True

    def members_of(self, room_id: str) -> FrozenSet[str]:
        return frozenset(self._rooms.get(room_id, ()))

    def __len__(self) -> int:
        return len(self._rooms)


class SessionStore:
    """Shared relay state guarded by a single lock.

    Callers hold ``lock`` around any sequence that reads state to make a
    decision and then mutates or broadcasts based on it. The helper methods
    below assume the lock is already held.
    """

    def __init__(self) -> None:
        self.registry = ConnectionRegistry()
        self.rooms = RoomIndex()
        self.lock = asyncio.Lock()

    def count(self) -> int:
        """Number of live connections."""
        return len(self.registry)

    def open(self, sid: str) -> ConnectionSession:
        """Create the registry entry for a newly accepted connection."""
        session = self.registry.get(sid)
        if session is None:
            session = ConnectionSession(sid=sid)
            self.registry.set(sid, session)
        return session

    def snapshot_room(self, room_id: str, exclude: Optional[str] = None) -> Dict[str, Optional[ConnectionSession]]:
        """Members of a room with their sessions, optionally without one sid.

        Members lacking a registry entry map to None.
        """
        return {
            sid: self.registry.get(sid)
            for sid in self.rooms.members_of(room_id)
            if sid != exclude
        }

    def place(self, session: ConnectionSession, room_id: str) -> None:
        """Move a session into ``room_id``, leaving any previous room."""
        if session.room_id is not None and session.room_id != room_id:
            self.vacate(session)
        self.rooms.add_to_room(room_id, session.sid)
        session.room_id = room_id

    def vacate(self, session: ConnectionSession) -> Optional[str]:
        """Take a session out of its room. Returns the room it left."""
        room_id = session.room_id
        if room_id is None:
            return None
        self.rooms.remove_from_room(room_id, session.sid)
        session.room_id = None
        return room_id

    def discard(self, sid: str) -> Optional[ConnectionSession]:
        """Remove a connection from its room and from the registry.

        Returns the removed session, or None if the sid was already gone.
        """
        session = self.registry.remove(sid)
        if session is None:
            return None
        self.vacate(session)
        return session

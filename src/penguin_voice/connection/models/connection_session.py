"""Per-connection session attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

ClientId = Union[int, float]


def get_room_id(host_name: str, server_name: str, room_name: str) -> str:
    """Derive the room id from the host/server/room triple.

    Plain concatenation, so distinct triples can collide when the parts
    themselves contain dashes.
    """
    return host_name + "-" + server_name + "-" + room_name


@dataclass
class ConnectionSession:
    """State the relay keeps for one live Socket.IO connection."""

    sid: str
    client_id: Optional[ClientId] = None
    room_id: Optional[str] = None
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def joined(self) -> bool:
        return self.room_id is not None

    @property
    def identified(self) -> bool:
        return self.client_id is not None

    def describe(self) -> Dict[str, Any]:
        """Attributes shared with room peers."""
        if self.client_id is None:
            return {}
        return {"clientId": self.client_id}

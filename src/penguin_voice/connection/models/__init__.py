"""Connection models package"""

from penguin_voice.connection.models.commands import IdentifyCommand, JoinCommand, SignalCommand
from penguin_voice.connection.models.connection_session import (
    ClientId,
    ConnectionSession,
    get_room_id,
)

__all__ = [
    "ClientId",
    "ConnectionSession",
    "IdentifyCommand",
    "JoinCommand",
    "SignalCommand",
    "get_room_id",
]

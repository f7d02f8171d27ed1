"""Validated records for client-issued events.

Socket.IO delivers event arguments positionally and untyped. Each event is
parsed into one of these models before it touches shared state; any
``ValueError`` (pydantic's ``ValidationError`` included) means the command is
malformed.
"""

from __future__ import annotations

from typing import Any, Sequence, Union

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, confloat, field_validator

from penguin_voice.connection.models.connection_session import get_room_id

# JSON numbers arrive as int or float; bool is rejected by the strict types.
# NaN never compares equal, so it could not be checked for duplicates.
ClientIdValue = Union[StrictInt, confloat(strict=True, allow_inf_nan=False)]


def _positional(args: Sequence[Any], count: int) -> tuple:
    """Pad or cut positional args to ``count``; missing ones become None."""
    padded = tuple(args) + (None,) * count
    return padded[:count]


class JoinCommand(BaseModel):
    """``join(hostName, serverName, roomName, id)``"""

    model_config = ConfigDict(frozen=True)

    host_name: StrictStr
    server_name: StrictStr
    room_name: StrictStr
    client_id: ClientIdValue

    @classmethod
    def from_args(cls, args: Sequence[Any]) -> "JoinCommand":
        host_name, server_name, room_name, client_id = _positional(args, 4)
        return cls(
            host_name=host_name,
            server_name=server_name,
            room_name=room_name,
            client_id=client_id,
        )

    @property
    def room_id(self) -> str:
        return get_room_id(self.host_name, self.server_name, self.room_name)


class IdentifyCommand(BaseModel):
    """``id(clientId)``"""

    model_config = ConfigDict(frozen=True)

    client_id: ClientIdValue

    @classmethod
    def from_args(cls, args: Sequence[Any]) -> "IdentifyCommand":
        (client_id,) = _positional(args, 1)
        return cls(client_id=client_id)


class SignalCommand(BaseModel):
    """``signal({data, to})``

    ``data`` is opaque and forwarded untouched, but must be present and
    truthy. ``to`` names the destination connection.
    """

    data: Any
    to: StrictStr

    @field_validator("data")
    @classmethod
    def _require_data(cls, value: Any) -> Any:
        if not value:
            raise ValueError("signal data must be non-empty")
        return value

    @field_validator("to")
    @classmethod
    def _require_target(cls, value: str) -> str:
        if not value:
            raise ValueError("signal target must be non-empty")
        return value

    @classmethod
    def from_args(cls, args: Sequence[Any]) -> "SignalCommand":
        (payload,) = _positional(args, 1)
        return cls.model_validate(payload)

"""Unicast relay of opaque signaling payloads."""

import logging

from penguin_voice.connection.models import SignalCommand
from penguin_voice.connection.transport import Transport

logger = logging.getLogger(__name__)


class SignalRouter:
    """Forwards a signal to its destination, tagged with the sender's sid.

    The destination is looked up through the transport rather than the room
    index: peers may signal across rooms.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def relay(self, sender_sid: str, command: SignalCommand) -> bool:
        """Deliver ``{data, from}`` to ``command.to``.

        Returns:
            True if the signal was handed to the transport, False if the
            target is not a live connection and the signal was dropped
        """
        if not self._transport.is_connected(command.to):
            logger.debug(
                "[Signal] Dropped, target not connected | from=%s to=%s",
                sender_sid,
                command.to,
            )
            return False

        await self._transport.emit(
            "signal",
            {"data": command.data, "from": sender_sid},
            to=command.to,
        )
        logger.debug("[Signal] Relayed | from=%s to=%s", sender_sid, command.to)
        return True

"""Error taxonomy for the signaling relay.

Handshake rejections are raised before a connection exists. Protocol
violations are raised while handling a client event and always end with the
offending connection being disconnected; they never reach other sessions.

A signal addressed to an unknown connection is not an error: the relay drops
it silently.
"""

from typing import Any, Dict, Iterable, List, Optional


class RelayError(Exception):
    """Base class for all relay errors."""


class HandshakeRejected(RelayError):
    """Client declared a missing, malformed or unsupported version."""

    def __init__(
        self,
        message: str,
        supported_versions: Iterable[str],
        user_agent: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.supported_versions: List[str] = list(supported_versions)
        self.user_agent = user_agent

    def payload(self) -> Dict[str, Any]:
        """Structured data sent back with the refused connection."""
        return {
            "message": self.message,
            "supportedVersions": list(self.supported_versions),
        }


class ProtocolViolation(RelayError):
    """A connected client broke the protocol and must be disconnected."""

    def __init__(self, sid: str, message: str) -> None:
        super().__init__(message)
        self.sid = sid


class MalformedCommand(ProtocolViolation):
    """Event arguments had the wrong shape or type."""

    def __init__(self, sid: str, event: str, payload: Any) -> None:
        super().__init__(sid, f"invalid {event} command")
        self.event = event
        self.payload = payload


class SpoofingAttempt(ProtocolViolation):
    """Client claimed an id held by a room peer, or tried to change its own."""

    def __init__(self, sid: str, client_id: Any, reason: str) -> None:
        super().__init__(sid, f"spoofing attempt: {reason}")
        self.client_id = client_id
        self.reason = reason

"""Socket.IO server for the voice signaling relay.

Client -> server events:
- join(hostName, serverName, roomName, id)
- id(clientId)
- leave()
- signal({data, to})

Server -> client events:
- join(sid, {clientId})       to existing room peers
- setClients({sid: {...}})    to the joining connection
- setClient(sid, {clientId})  to room peers on identify
- signal({data, from})        to the addressed connection

Handlers run with ``async_handlers=False`` so events from one connection are
processed strictly in arrival order.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import socketio

from penguin_voice.config.settings import Settings
from penguin_voice.connection.errors import HandshakeRejected
from penguin_voice.connection.session_lifecycle import SessionLifecycle
from penguin_voice.connection.transport import SocketIOTransport
from penguin_voice.connection.version_gate import VersionGate

logger = logging.getLogger(__name__)

# =============================================================================
# Socket.IO Server Configuration
# =============================================================================

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    ping_timeout=30,
    ping_interval=25,
    async_handlers=False,
    logger=False,  # Disable socket.io internal logging (too verbose)
    engineio_logger=False,
)

transport = SocketIOTransport(sio)
session_lifecycle = SessionLifecycle(transport)


def configure(settings: Settings) -> None:
    """Apply deployment settings to the shared lifecycle."""
    session_lifecycle.version_gate = VersionGate(
        settings.supported_versions, product=settings.client_product
    )
    logger.info(
        "[SocketIO] Accepting %s versions: %s",
        settings.client_product,
        ", ".join(settings.supported_versions),
    )


def extract_user_agent(environ: Optional[Dict[str, Any]]) -> Optional[str]:
    """Read the client's User-Agent from the handshake environ."""
    if not environ:
        return None
    user_agent = environ.get("HTTP_USER_AGENT")
    if user_agent:
        return user_agent

    headers = environ.get("asgi.scope", {}).get("headers", [])
    for key, value in headers:
        if isinstance(key, bytes) and key.decode("latin-1").lower() == "user-agent":
            return value.decode("latin-1")
    return None


# =============================================================================
# Event Handlers
# =============================================================================

@sio.event
async def connect(sid: str, environ: Dict, auth: Optional[Dict] = None):
    """Gate the client version before the connection becomes usable."""
    user_agent = extract_user_agent(environ)
    try:
        await session_lifecycle.connect(sid, user_agent)
    except HandshakeRejected as exc:
        raise socketio.exceptions.ConnectionRefusedError(exc.message, exc.payload()) from exc


@sio.event
async def disconnect(sid: str, *args):
    await session_lifecycle.disconnect(sid)


@sio.on("join")
async def join(sid: str, *args):
    await session_lifecycle.join(sid, *args)


@sio.on("id")
async def identify(sid: str, *args):
    await session_lifecycle.identify(sid, *args)


@sio.on("leave")
async def leave(sid: str, *args):
    await session_lifecycle.leave(sid, *args)


@sio.on("signal")
async def signal(sid: str, *args):
    await session_lifecycle.signal(sid, *args)


# =============================================================================
# ASGI App
# =============================================================================

def create_socketio_app(other_app):
    """Create Socket.IO ASGI app wrapping another ASGI app.

    Args:
        other_app: The HTTP ASGI app (FastAPI)

    Returns:
        Combined ASGI app with Socket.IO
    """
    return socketio.ASGIApp(sio, other_asgi_app=other_app)

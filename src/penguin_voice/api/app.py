"""ASGI application: FastAPI status routes wrapped by the Socket.IO server."""

import logging
from typing import Optional

from fastapi import FastAPI

from penguin_voice import __version__
from penguin_voice.api.routes.status import router as status_router
from penguin_voice.config.settings import Settings, get_settings
from penguin_voice.connection import socketio_server

logger = logging.getLogger(__name__)


def create_http_app(settings: Settings) -> FastAPI:
    app = FastAPI(title="PenguinChat Voice Server", version=__version__)
    app.include_router(status_router)
    app.dependency_overrides[get_settings] = lambda: settings
    return app


def create_app(settings: Optional[Settings] = None):
    """Build the combined ASGI app.

    Used as a uvicorn factory; reads settings from the environment when none
    are given.
    """
    settings = settings or get_settings()
    socketio_server.configure(settings)
    app = socketio_server.create_socketio_app(create_http_app(settings))
    logger.info("PenguinChat Server started: %s", settings.address)
    return app

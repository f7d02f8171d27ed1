"""Landing page and health endpoints."""

import html
import logging
import os
import time

import psutil
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from penguin_voice.api.schemas.status import HealthResponse
from penguin_voice.config.settings import Settings, get_settings
from penguin_voice.connection import socketio_server
from penguin_voice.connection.session_lifecycle import SessionLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["status"])

LANDING_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>PenguinChat Voice Server</title>
</head>
<body>
  <h1>PenguinChat Voice Server</h1>
  <p>Address: <code>{address}</code></p>
  <p>Current connections: {connection_count}</p>
</body>
</html>
"""


def get_session_lifecycle() -> SessionLifecycle:
    return socketio_server.session_lifecycle


def process_uptime() -> float:
    """Seconds since this process started."""
    started = psutil.Process(os.getpid()).create_time()
    return max(0.0, time.time() - started)


@router.get("/", response_class=HTMLResponse)
async def index(
    settings: Settings = Depends(get_settings),
    lifecycle: SessionLifecycle = Depends(get_session_lifecycle),
) -> HTMLResponse:
    return HTMLResponse(
        LANDING_PAGE.format(
            address=html.escape(settings.address),
            connection_count=lifecycle.connection_count,
        )
    )


@router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health(
    settings: Settings = Depends(get_settings),
    lifecycle: SessionLifecycle = Depends(get_session_lifecycle),
) -> HealthResponse:
    return HealthResponse(
        uptime=process_uptime(),
        connection_count=lifecycle.connection_count,
        address=settings.address,
        name=settings.name,
    )

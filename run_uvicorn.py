#!/usr/bin/env python3
"""
Uvicorn runner script for the PenguinChat voice server.
Validates deployment settings, then serves the Socket.IO + HTTP app.
"""

import logging
import os
import sys
from pathlib import Path

import uvicorn
from dotenv import find_dotenv, load_dotenv

# Allow running from a source checkout without installing the package
src_dir = Path(__file__).parent / "src"
if src_dir.is_dir() and str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from penguin_voice.config.settings import ConfigurationError, Settings  # noqa: E402
from penguin_voice.utils.logging_utils import setup_logging  # noqa: E402

logger = logging.getLogger("penguin_voice")


def main():
    """Start the voice server with uvicorn."""
    # .env must be loaded before logging is configured from it
    load_dotenv(find_dotenv(usecwd=True))
    setup_logging(os.getenv("LOG_LEVEL", "INFO"), os.getenv("LOG_FILE"))

    try:
        settings = Settings.from_env()
        settings.require_tls_files()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    ssl_options = {}
    if settings.https_enabled:
        ssl_options = {
            "ssl_keyfile": str(settings.ssl_keyfile),
            "ssl_certfile": str(settings.ssl_certfile),
        }

    logger.info(
        "Listening on %s:%d (%s)",
        settings.host,
        settings.port,
        "https" if settings.https_enabled else "http",
    )

    uvicorn.run(
        "penguin_voice.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
        **ssl_options,
    )


if __name__ == "__main__":
    main()

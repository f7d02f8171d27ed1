"""Deployment settings read from the environment.

Values may also come from a ``.env`` file in the working directory, loaded
with python-dotenv. ``ADDRESS`` is the only required variable; without it the
server refuses to start.

Variables:
  - ``ADDRESS``: public address shown on the landing page and /health
  - ``HTTPS``: any non-empty value enables TLS
  - ``PORT``: listen port (443 with HTTPS, 9736 otherwise)
  - ``HOST``: bind host (0.0.0.0)
  - ``SSLPATH``: directory containing ``privkey.pem`` and ``fullchain.pem``
    (current directory by default)
  - ``NAME``: instance name reported by /health
  - ``SUPPORTED_VERSIONS``: comma-separated client versions (1.0.0)
  - ``LOG_LEVEL``: root log level (INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from penguin_voice.connection.version_gate import DEFAULT_PRODUCT, DEFAULT_SUPPORTED_VERSIONS

logger = logging.getLogger(__name__)

HTTP_PORT = 9736
HTTPS_PORT = 443
SSL_KEY_FILE = "privkey.pem"
SSL_CERT_FILE = "fullchain.pem"


class ConfigurationError(Exception):
    """Required deployment configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    address: str
    port: int = HTTP_PORT
    host: str = "0.0.0.0"
    https_enabled: bool = False
    ssl_path: Path = field(default_factory=Path.cwd)
    name: Optional[str] = None
    supported_versions: Tuple[str, ...] = DEFAULT_SUPPORTED_VERSIONS
    client_product: str = DEFAULT_PRODUCT
    log_level: str = "INFO"

    @property
    def ssl_keyfile(self) -> Path:
        return self.ssl_path / SSL_KEY_FILE

    @property
    def ssl_certfile(self) -> Path:
        return self.ssl_path / SSL_CERT_FILE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` plus .env by default).

        Raises:
            ConfigurationError: ADDRESS is unset or a value cannot be parsed
        """
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        address = (environ.get("ADDRESS") or "").strip()
        if not address:
            raise ConfigurationError("You must set the ADDRESS environment variable.")

        https_enabled = bool(environ.get("HTTPS"))

        raw_port = environ.get("PORT") or str(HTTPS_PORT if https_enabled else HTTP_PORT)
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid PORT value: {raw_port!r}") from exc
        if not 0 < port < 65536:
            raise ConfigurationError(f"PORT out of range: {port}")

        versions = tuple(
            v.strip() for v in (environ.get("SUPPORTED_VERSIONS") or "").split(",") if v.strip()
        ) or DEFAULT_SUPPORTED_VERSIONS

        ssl_path = environ.get("SSLPATH")

        return cls(
            address=address,
            port=port,
            host=environ.get("HOST") or "0.0.0.0",
            https_enabled=https_enabled,
            ssl_path=Path(ssl_path) if ssl_path else Path.cwd(),
            name=environ.get("NAME") or None,
            supported_versions=versions,
            log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        )

    def require_tls_files(self) -> None:
        """Ensure the TLS key and certificate exist when HTTPS is enabled."""
        if not self.https_enabled:
            return
        for path in (self.ssl_keyfile, self.ssl_certfile):
            if not path.is_file():
                raise ConfigurationError(f"TLS file not found: {path}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()

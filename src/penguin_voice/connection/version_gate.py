"""Client version gate applied during the Socket.IO handshake.

Clients identify themselves with a user agent of the form
``PenguinChat/<major>.<minor>.<patch> (<platform>)``. Connections whose user
agent does not match, or whose version is not supported, are refused before
any session state is created.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from penguin_voice.connection.errors import HandshakeRejected

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = "PenguinChat"
DEFAULT_SUPPORTED_VERSIONS = ("1.0.0",)


@dataclass(frozen=True)
class ClientVersion:
    """Version information parsed from an accepted user agent."""

    product: str
    version: str
    platform: str


class VersionGate:
    """Accepts or refuses a connection based on its declared client version."""

    def __init__(
        self,
        supported_versions: Iterable[str] = DEFAULT_SUPPORTED_VERSIONS,
        product: str = DEFAULT_PRODUCT,
    ) -> None:
        # Ordered and de-duplicated so the rejection message is stable.
        self._supported = tuple(dict.fromkeys(supported_versions))
        self._product = product
        self._pattern = re.compile(
            r"^%s/(\d+\.\d+\.\d+) \((\w+)\)$" % re.escape(product)
        )

    @property
    def product(self) -> str:
        return self._product

    @property
    def supported_versions(self) -> List[str]:
        return list(self._supported)

    def rejection_message(self) -> str:
        return (
            f"The voice server does not support your version of {self._product}.\n"
            f"Supported versions: {','.join(self._supported)}"
        )

    def check(self, user_agent: Optional[str]) -> ClientVersion:
        """Validate a user agent string.

        Args:
            user_agent: Raw ``User-Agent`` header value, or None if absent

        Returns:
            Parsed client version

        Raises:
            HandshakeRejected: If the header is absent, malformed or names an
                unsupported version
        """
        match = self._pattern.match(user_agent) if user_agent else None
        if match is None or match.group(1) not in self._supported:
            logger.debug("[VersionGate] Rejected user agent %r", user_agent)
            raise HandshakeRejected(
                self.rejection_message(),
                self._supported,
                user_agent=user_agent,
            )
        return ClientVersion(
            product=self._product,
            version=match.group(1),
            platform=match.group(2),
        )

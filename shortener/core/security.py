"""
Access Control

Guards the privileged (administrative) operations with a single shared
bearer secret taken from the settings object.

Behavior:
- No secret configured: every privileged call fails with ServiceDisabledError
- Secret configured: the Authorization header must be "Bearer <secret>"
"""

import logging
import secrets
from typing import Optional

from shortener.core.exceptions import AuthError, ServiceDisabledError
from shortener.core.setting import Settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AccessControl:
    """Checks bearer credentials against the configured shared secret."""

    def __init__(self, config: Settings):
        self._token = config.TOKEN
        if not self._token:
            logger.warning(
                "No TOKEN configured, privileged endpoints are disabled"
            )

    @property
    def enabled(self) -> bool:
        return self._token is not None

    def authorize(self, presented: Optional[str]) -> bool:
        """
        Compare a presented Authorization value with the expected one.

        Raises:
            ServiceDisabledError: If no secret is configured
        """
        if not self.enabled:
            raise ServiceDisabledError()
        if not presented:
            return False
        return secrets.compare_digest(
            presented.encode("utf-8"),
            f"{BEARER_PREFIX}{self._token}".encode("utf-8"),
        )

    def require(self, presented: Optional[str]) -> None:
        """Raise unless the credential authorizes a privileged call."""
        if not self.authorize(presented):
            raise AuthError()

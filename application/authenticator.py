"""
Bearer token acquisition.

The token is fetched once per authenticator and, when a cache store is
configured, shared across processes for ten hours.
"""

import hashlib
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from adapters.cache_adapter import CacheStore
from adapters.http_client import HTTPClientAdapter
from domain.errors import AuthenticationError

# Get logger for this module
logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=10)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenAuthenticator:
    """Get-or-fetch logic for the API bearer token."""

    def __init__(
        self,
        http_client: HTTPClientAdapter,
        login_url: str,
        username: str,
        password: str,
        cache: Optional[CacheStore] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.http_client = http_client
        self.login_url = login_url
        self.username = username
        self.password = password
        self.cache = cache
        self.clock = clock
        self.token: Optional[str] = None

    @property
    def cache_key(self) -> str:
        return hashlib.sha1(self.login_url.encode()).hexdigest()

    def authenticate(self) -> str:
        """
        Return the bearer token, logging in only when none is known.

        The token is never re-validated: expiry is left to the cache TTL and a
        token rejected by the API surfaces as an HTTP error on the next call.

        Raises:
            AuthenticationError: If the login response carries no token
        """
        if self.token:
            return self.token

        if self.cache is not None:
            cached = self.cache.get(self.cache_key)
            if isinstance(cached, str) and cached:
                logger.debug("Using cached API token")
                self.token = cached
                return cached

        logger.info("Logging in to %s as %s", self.login_url, self.username)
        status_code, content = self.http_client.request(
            "POST",
            self.login_url,
            json={"username": self.username, "password": self.password},
        )

        token = self._extract_token(content)
        if token is None:
            raise AuthenticationError(
                "token missing from response", detail={"status_code": status_code}
            )

        self.token = token
        if self.cache is not None:
            self.cache.set(self.cache_key, token, self.clock() + TOKEN_TTL)
        return token

    def _extract_token(self, content: str) -> Optional[str]:
        try:
            data = json.loads(content)
        except ValueError:
            logger.debug("Login response is not JSON")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) else None

"""
Authenticated request layer.

Builds calls against the API base URL, attaches the bearer token and
decodes JSON bodies. Payloads are returned untyped; decoding into domain
models happens in the calling operation.
"""

import hashlib
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from adapters.cache_adapter import CacheStore
from adapters.http_client import HTTPClientAdapter
from application.authenticator import TokenAuthenticator
from domain.errors import ResponseError, ValidationFailedError

# Get logger for this module
logger = logging.getLogger(__name__)

CACHE_TTL = timedelta(hours=10)
NO_CONTENT = 204


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def flatten_query(query: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested query mappings to bracket notation (``a[b]=c``)."""
    flat: Dict[str, Any] = {}
    for key, value in query.items():
        name = f"{prefix}[{key}]" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_query(value, name))
        else:
            flat[name] = value
    return flat


def decode_body(content: str) -> Any:
    """
    Decode a JSON response body.

    Raises:
        ResponseError: If the body is not valid JSON
    """
    if not content.strip():
        return {}
    try:
        return json.loads(content)
    except ValueError as e:
        raise ResponseError(f"Invalid JSON in response: {e}", detail=content[:200])


class ApiClient:
    """GET/POST/PUT/DELETE against the classifieds API."""

    def __init__(
        self,
        http_client: HTTPClientAdapter,
        authenticator: TokenAuthenticator,
        base_url: str,
        cache: Optional[CacheStore] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.http_client = http_client
        self.authenticator = authenticator
        self.base_url = base_url
        self.cache = cache
        self.clock = clock

    def _headers(self) -> Dict[str, str]:
        token = self.authenticator.authenticate()
        return {"X-AUTH-TOKEN": f"Bearer {token}"}

    def _cache_key(self, path: str, query: Dict[str, Any]) -> str:
        serialized = json.dumps(
            {"class": type(self).__name__, "path": path, "query": query},
            sort_keys=True,
            default=str,
        )
        return hashlib.sha1(serialized.encode()).hexdigest()

    def get(
        self, path: str, query: Optional[Dict[str, Any]] = None, use_cache: bool = False
    ) -> Any:
        """
        GET ``path`` and return the decoded body.

        With ``use_cache`` the decoded body is kept for ten hours and served
        without any network call, token included, while it is fresh.
        """
        query = query or {}
        key = None
        if use_cache and self.cache is not None:
            key = self._cache_key(path, query)
            cached = self.cache.get(key)
            if isinstance(cached, (list, dict)):
                logger.debug("Cache hit for GET %s %s", path, query)
                return cached

        _, content = self.http_client.request(
            "GET",
            self.base_url + path,
            params=flatten_query(query),
            headers=self._headers(),
        )
        data = decode_body(content)

        if key is not None:
            self.cache.set(key, data, self.clock() + CACHE_TTL)  # type: ignore[union-attr]
        return data

    def post(self, path: str, body: Dict[str, Any]) -> Any:
        _, content = self.http_client.request(
            "POST", self.base_url + path, json=body, headers=self._headers()
        )
        return decode_body(content)

    def put(self, path: str, body: Dict[str, Any]) -> Any:
        _, content = self.http_client.request(
            "PUT", self.base_url + path, json=body, headers=self._headers()
        )
        return decode_body(content)

    def delete(self, path: str) -> Any:
        """
        DELETE ``path``.

        Raises:
            ValidationFailedError: If the API answers with a status above 300
        """
        status_code, content = self.http_client.request(
            "DELETE", self.base_url + path, headers=self._headers()
        )
        if status_code > 300:
            raise ValidationFailedError(
                f"Deletion failed with status code {status_code}",
                detail={"path": path, "status_code": status_code},
            )
        if status_code == NO_CONTENT:
            return {}
        return decode_body(content)

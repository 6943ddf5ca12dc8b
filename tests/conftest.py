import pytest
from datetime import datetime
from typing import Callable, List, Optional

from adapters.cache_adapter import CacheStore, InMemoryCache
from application.api_client import ApiClient
from application.authenticator import TokenAuthenticator
from application.classifieds_client import ClassifiedsClient
from tests.helpers.fixtures import (
    API_URL,
    FIXED_NOW,
    LOGIN_URL,
    FakeHTTPClient,
    Route,
    login_route,
)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def memory_cache(clock: Callable[[], datetime]) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest.fixture
def build_client(
    clock: Callable[[], datetime],
) -> Callable[..., ClassifiedsClient]:
    """
    Return a factory wiring a ClassifiedsClient over a FakeHTTPClient.

    The login route is prepended unless ``with_login`` is False; the fake
    transport is reachable as ``client.api.http_client``.
    """

    def factory(
        routes: List[Route],
        cache: Optional[CacheStore] = None,
        with_login: bool = True,
    ) -> ClassifiedsClient:
        http_client = FakeHTTPClient(([login_route()] if with_login else []) + routes)
        authenticator = TokenAuthenticator(
            http_client=http_client,  # type: ignore[arg-type]
            login_url=LOGIN_URL,
            username="client-login",
            password="client-secret",
            cache=cache,
            clock=clock,
        )
        api = ApiClient(
            http_client=http_client,  # type: ignore[arg-type]
            authenticator=authenticator,
            base_url=API_URL,
            cache=cache,
            clock=clock,
        )
        return ClassifiedsClient(
            api=api,
            client_id="client-id",
            client_code="client-code",
            client_login="client-login",
        )

    return factory

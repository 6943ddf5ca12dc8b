import json
import logging
from datetime import datetime, timezone
from types import TracebackType
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from domain.enums import DataKey, Transaction
from domain.models import Ad

logger = logging.getLogger(__name__)

FIXED_NOW = datetime(2025, 10, 1, 8, 0, 0, tzinfo=timezone.utc)

API_URL = "https://api.example.test/api/"
LOGIN_URL = "https://auth.example.test/api/login_check"

QueryCondition = Callable[[Dict[str, Any]], bool]


class DummySpan:
    """Simple mock for an OpenTelemetry span."""

    def __init__(self) -> None:
        self.attributes: Dict[str, Any] = {}

    def __enter__(self) -> "DummySpan":
        return self

    def __exit__(
        self,
        exc_type: Optional[BaseException],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        pass

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def set_attributes(self, attrs: Dict[str, Any]) -> None:
        self.attributes.update(attrs)


class DummyTracer:
    """Tracer mock that returns a DummySpan."""

    def __init__(self) -> None:
        self.last_span: Optional[DummySpan] = None

    def start_as_current_span(self, name: str) -> DummySpan:
        span = DummySpan()
        self.last_span = span
        return span


class Route:
    """Canned answer for requests whose method and URL suffix match."""

    def __init__(
        self,
        method: str,
        path: str,
        body: Union[Any, Exception] = None,
        status_code: int = 200,
        when: Optional[QueryCondition] = None,
    ):
        self.method = method
        self.path = path
        self.body = body
        self.status_code = status_code
        self.when = when

    def matches(self, method: str, url: str, params: Dict[str, Any]) -> bool:
        if method != self.method or not url.endswith(self.path):
            return False
        return self.when is None or self.when(params)


class RecordedRequest:
    def __init__(
        self,
        method: str,
        url: str,
        params: Dict[str, Any],
        json_body: Any,
        headers: Dict[str, str],
    ):
        self.method = method
        self.url = url
        self.params = params
        self.json = json_body
        self.headers = headers


class FakeHTTPClient:
    """In-memory stand-in for HTTPClientAdapter that records every request."""

    def __init__(self, routes: List[Route]):
        self.routes = routes
        self.calls: List[RecordedRequest] = []

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, str]:
        params = params or {}
        self.calls.append(RecordedRequest(method, url, params, json, headers or {}))
        for route in self.routes:
            if route.matches(method, url, params):
                if isinstance(route.body, Exception):
                    raise route.body
                body = route.body if isinstance(route.body, str) else _dumps(route.body)
                return (route.status_code, body)
        raise AssertionError(f"Unexpected request: {method} {url} {params}")

    def calls_to(self, method: str, path: str) -> List[RecordedRequest]:
        return [c for c in self.calls if c.method == method and c.url.endswith(path)]


def _dumps(body: Any) -> str:
    return "" if body is None else json.dumps(body)


def has_page(expected_page: int) -> QueryCondition:
    """Route condition matching the ``page`` query parameter."""
    return lambda params: params.get("page") == expected_page


def login_route(token: str = "token-value") -> Route:
    return Route("POST", "login_check", {"token": token})


def make_ad(ad_id: Optional[int] = None, portals: Optional[List[str]] = None) -> Ad:
    """Build an apartment for sale, listed on two portals by default."""
    ad = Ad(
        ad_id,
        "AD-001",
        Transaction.SALE,
        1000,
        1200,
        "Great apartment",
        "Detailed description of the apartment",
        ["http://example.com/pic1.jpg", "http://example.com/pic2.jpg"],
        portals if portals is not None else ["portal1", "portal2"],
    )
    ad.add_data(DataKey.REFERENCE, "AD-001")
    ad.add_data(DataKey.POSTAL_CODE, "75001")
    ad.add_data(DataKey.CITY, "Paris")
    ad.add_data(DataKey.RENTAL_CHARGES, 150)
    ad.add_data(DataKey.LIFT, True)
    return ad


def publication_payload(
    publication_id: int, portal_code: str, selected: bool = True
) -> Dict[str, Any]:
    """A raw ad_publications element as returned by the API."""
    return {
        "id": publication_id,
        "advertiserPublication": {
            "id": publication_id + 1000,
            "portal": {"id": publication_id + 2000, "code": portal_code},
        },
        "selected": selected,
        "publishable": True,
        "publicationIncompatibilities": [],
        "lastPublishedAt": "2023-01-01T12:00:00+00:00",
        "unPublishedAt": None,
        "urlOnPortal": f"https://{portal_code}.example.com/ad/{publication_id}",
    }

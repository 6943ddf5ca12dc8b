"""
Lenient decoding of API payloads into domain models.

Every decoder is a field schema applied by :func:`decode`. A required field
that is absent or mistyped rejects the whole element; an optional one falls
back to its default. List endpoints go through :func:`decode_many`, which
drops rejected elements instead of failing.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

from dateutil import parser as dtparser

from domain.models import AdPublication, AdvertiserPublication, Contact, Portal

# Get logger for this module
logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class Field:
    """Where to read one value in a JSON object and how to accept it."""

    def __init__(
        self,
        path: str,
        kind: Union[type, Tuple[type, ...]] = object,
        required: bool = False,
        default: Any = None,
        convert: Optional[Callable[[Any], Any]] = None,
    ):
        self.path = tuple(path.split("."))
        self.kind = kind
        self.required = required
        self.default = default
        self.convert = convert

    def accepts(self, value: Any) -> bool:
        if value is _MISSING:
            return False
        if self.kind is object:
            return True
        # JSON booleans are not integers
        if isinstance(value, bool) and self.kind is int:
            return False
        return isinstance(value, self.kind)

    def fallback(self) -> Any:
        return self.default() if callable(self.default) else self.default


def _lookup(data: Dict[str, Any], path: Tuple[str, ...]) -> Any:
    current: Any = data
    for key in path:
        if not isinstance(current, dict) or current.get(key) is None:
            return _MISSING
        current = current[key]
    return current


def decode(data: Any, schema: Dict[str, Field]) -> Optional[Dict[str, Any]]:
    """
    Extract the values described by ``schema`` from a JSON object.

    Returns:
        A mapping of schema names to values, or None when ``data`` is not an
        object or a required field is absent or malformed.
    """
    if not isinstance(data, dict):
        return None

    values: Dict[str, Any] = {}
    for name, field_spec in schema.items():
        raw = _lookup(data, field_spec.path)
        if field_spec.accepts(raw):
            try:
                values[name] = field_spec.convert(raw) if field_spec.convert else raw
                continue
            except (ValueError, OverflowError):
                logger.debug("Malformed value for %s: %r", ".".join(field_spec.path), raw)
        if field_spec.required:
            return None
        values[name] = field_spec.fallback()
    return values


def decode_many(items: Any, decoder: Callable[[Any], Optional[T]]) -> List[T]:
    """Decode every element of a list payload, keeping only the successes."""
    if not isinstance(items, list):
        return []

    decoded = []
    for item in items:
        record = decoder(item)
        if record is None:
            logger.debug("Skipping malformed element: %r", item)
            continue
        decoded.append(record)
    return decoded


def parse_timestamp(value: str) -> datetime:
    """
    Parse an API timestamp into an aware UTC datetime.

    Timestamps without an offset are read as UTC. Raises ValueError when the
    value is not a timestamp or carries an offset outside +/-24 hours.
    """
    parsed = dtparser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _incompatibility_descriptions(items: List[Any]) -> List[str]:
    return [
        item["description"]
        for item in items
        if isinstance(item, dict) and isinstance(item.get("description"), str)
    ]


PORTAL_SCHEMA = {
    "id": Field("id", int, required=True),
    "code": Field("code", str, required=True),
    "name": Field("name", str, required=True),
}

AD_PUBLICATION_SCHEMA = {
    "id": Field("id", int, required=True),
    "advertiser_publication_id": Field("advertiserPublication.id", int, required=True),
    "portal_id": Field("advertiserPublication.portal.id", int, required=True),
    "portal_code": Field("advertiserPublication.portal.code", str, required=True),
    "selected": Field("selected", convert=bool, default=False),
    "publishable": Field("publishable", convert=bool, default=False),
    "incompatibilities": Field(
        "publicationIncompatibilities",
        list,
        default=list,
        convert=_incompatibility_descriptions,
    ),
    "last_published_at": Field("lastPublishedAt", str, convert=parse_timestamp),
    "unpublished_at": Field("unPublishedAt", str, convert=parse_timestamp),
    "url_on_portal": Field("urlOnPortal", str),
}

CONTACT_SCHEMA = {
    "id": Field("id", int),
    "portal_id": Field("portal.id", int),
    "ad_reference": Field("ad.reference", str),
    "url_on_portal": Field("urlOnPortal", str),
    "created_at": Field("createdAt", str, default=_now, convert=parse_timestamp),
    "civility": Field("contactInformation.civility", str),
    "first_name": Field("contactInformation.firstName", str),
    "name": Field("contactInformation.name", str),
    "identity": Field("contactInformation.identity", str),
    "email": Field("contactInformation.email", str),
    "phone": Field("contactInformation.phone", str),
    "address_locality": Field(
        "contactInformation.postalAddress.addressLocality", str
    ),
    "postal_code": Field("contactInformation.postalAddress.postalCode", str),
    "additional_information": Field("additionalInformation", str),
    "comment": Field("comment", str),
}


def decode_portal(data: Any) -> Optional[Portal]:
    values = decode(data, PORTAL_SCHEMA)
    return Portal(**values) if values is not None else None


def decode_ad_publication(data: Any) -> Optional[AdPublication]:
    values = decode(data, AD_PUBLICATION_SCHEMA)
    if values is None:
        return None

    # The publications endpoint does not expose portal names
    portal = Portal(id=values.pop("portal_id"), code=values.pop("portal_code"), name="")
    advertiser_publication = AdvertiserPublication(
        id=values.pop("advertiser_publication_id"), portal=portal
    )
    return AdPublication(advertiser_publication=advertiser_publication, **values)


def decode_contact(data: Any) -> Optional[Contact]:
    values = decode(data, CONTACT_SCHEMA)
    return Contact(**values) if values is not None else None

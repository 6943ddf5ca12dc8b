"""
Domain models for the classifieds syndication API.

Records decoded from the API are frozen snapshots. ``Ad`` is the only
model built by callers, and its identifier is assigned by the API on the
first successful publication.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.enums import DataKey, Transaction


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    return value


@dataclass(frozen=True)
class Portal:
    """A classifieds site ads can be syndicated to."""

    id: int
    code: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AdvertiserPublication:
    """Portal subscription under which an advertiser publishes."""

    id: int
    portal: Portal

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AdPublication:
    """State of one ad on one portal, as last read from the API."""

    id: int
    advertiser_publication: AdvertiserPublication
    selected: bool
    publishable: bool
    incompatibilities: List[str] = field(default_factory=list)
    last_published_at: Optional[datetime] = None
    unpublished_at: Optional[datetime] = None
    url_on_portal: Optional[str] = None

    @property
    def portal_code(self) -> str:
        return self.advertiser_publication.portal.code

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))  # type: ignore[no-any-return]


@dataclass(frozen=True)
class Contact:
    """A lead captured on a portal."""

    created_at: datetime
    id: Optional[int] = None
    portal_id: Optional[int] = None
    ad_reference: Optional[str] = None
    url_on_portal: Optional[str] = None
    civility: Optional[str] = None
    first_name: Optional[str] = None
    name: Optional[str] = None
    identity: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address_locality: Optional[str] = None
    postal_code: Optional[str] = None
    additional_information: Optional[str] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))  # type: ignore[no-any-return]


class Ad:
    """An ad to publish on one or more portals."""

    def __init__(
        self,
        id: Optional[int],
        reference: str,
        transaction: Transaction,
        price: float,
        housing_type: int,
        title: str,
        description: str,
        pictures: Optional[List[str]] = None,
        portals: Optional[List[str]] = None,
    ):
        self.id = id
        self._reference = reference
        self._transaction = transaction
        self._price = price
        self._housing_type = housing_type
        self._title = title
        self._description = description
        self._pictures = list(pictures or [])
        self._portals = list(portals or [])
        self._extra_data: Dict[DataKey, Any] = {}

    @property
    def reference(self) -> str:
        return self._reference

    @property
    def transaction(self) -> Transaction:
        return self._transaction

    @property
    def price(self) -> float:
        return self._price

    @property
    def housing_type(self) -> int:
        return self._housing_type

    @property
    def title(self) -> str:
        return self._title

    @property
    def description(self) -> str:
        return self._description

    @property
    def pictures(self) -> List[str]:
        return list(self._pictures)

    @property
    def portals(self) -> List[str]:
        return list(self._portals)

    @property
    def extra_data(self) -> Dict[DataKey, Any]:
        return dict(self._extra_data)

    def add_data(self, key: DataKey, value: Any) -> "Ad":
        """Set an extension attribute, replacing any previous value for the key."""
        self._extra_data[key] = value
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Build the create/update payload expected by the ``ads`` endpoint.

        ``adPublications.adPublications`` is a list holding a single list of
        portal entries; the API rejects the flat form.
        """
        return {
            "reference": self._reference,
            "status": "A",
            "transaction": {
                "code": self._transaction.code,
                "price": self._price,
                "privatePrice": False,
            },
            "productType": {"code": self._housing_type},
            "title": self._title,
            "description": self._description,
            "data": [
                {"code": key.code, "value": value}
                for key, value in self._extra_data.items()
            ],
            "mediaSupports": {
                "pictures": [{"sourceUrl": picture} for picture in self._pictures],
            },
            "adPublications": {
                "adPublications": [
                    [
                        {"advertiserPublication": {"portal": {"code": portal}}}
                        for portal in self._portals
                    ]
                ],
            },
        }

    def __repr__(self) -> str:
        return f"Ad(id={self.id}, reference={self._reference}, portals={self._portals})"

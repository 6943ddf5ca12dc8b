"""
Public operations of the classifieds syndication client.

This module holds the paginated listings and the publish/unpublish
workflow built on top of the authenticated request layer.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from opentelemetry import trace

from adapters.cache_adapter import CacheStore, FileCache
from adapters.http_client import HTTPClientAdapter
from application.api_client import ApiClient
from application.authenticator import TokenAuthenticator
from domain.decoders import (
    decode_ad_publication,
    decode_contact,
    decode_many,
    decode_portal,
)
from domain.enums import Universe
from domain.errors import ResponseError, ValidationFailedError
from domain.models import Ad, AdPublication, Contact, Portal
from infrastructure.config import ClientSettings

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


def paginate(fetch_page: Callable[[int], List[T]]) -> List[T]:
    """
    Call ``fetch_page`` with page numbers from 1 until a page yields nothing.

    The terminating empty page is requested too.
    """
    results: List[T] = []
    page = 1
    while True:
        records = fetch_page(page)
        if not records:
            return results
        results.extend(records)
        page += 1


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with explicit offset; naive datetimes are taken as local time."""
    return value.astimezone().isoformat(timespec="seconds")


class ClassifiedsClient:
    """Client for one advertiser account on the classifieds API."""

    def __init__(
        self,
        api: ApiClient,
        client_id: str,
        client_code: str,
        client_login: str,
    ):
        self.api = api
        self.client_id = client_id
        self.client_code = client_code
        self.client_login = client_login

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        http_client: Optional[HTTPClientAdapter] = None,
        cache: Optional[CacheStore] = None,
    ) -> "ClassifiedsClient":
        """Wire a client from settings, using the on-disk cache when configured."""
        http_client = http_client or HTTPClientAdapter(timeout=settings.http_timeout)
        if cache is None and settings.cache_dir:
            cache = FileCache(base_path=settings.cache_dir)

        authenticator = TokenAuthenticator(
            http_client=http_client,
            login_url=settings.login_url,
            username=settings.client_login,
            password=settings.client_secret,
            cache=cache,
        )
        api = ApiClient(
            http_client=http_client,
            authenticator=authenticator,
            base_url=settings.api_url,
            cache=cache,
        )
        return cls(
            api=api,
            client_id=settings.client_id,
            client_code=settings.client_code,
            client_login=settings.client_login,
        )

    # -------------------------------------------------------------------------
    # Portals
    # -------------------------------------------------------------------------

    def get_portal(self, portal_id: int) -> Optional[Portal]:
        """Return the portal, or None when the payload lacks a required field."""
        data = self.api.get(f"portals/{portal_id}", use_cache=True)
        return decode_portal(data)

    def get_portals(self, universe: Universe) -> List[Portal]:
        """List every portal of ``universe``, following pages until one is empty."""
        with tracer.start_as_current_span("get_portals") as span:
            span.set_attribute("universe", universe.code)

            def fetch_page(page: int) -> List[Portal]:
                data = self.api.get(
                    "portals",
                    {"page": page, "universe.code": universe.code},
                    use_cache=True,
                )
                return decode_many(data, decode_portal)

            portals = paginate(fetch_page)
            span.set_attribute("portals.count", len(portals))
            logger.info("Fetched %d portals for universe %s", len(portals), universe.code)
            return portals

    # -------------------------------------------------------------------------
    # Ads
    # -------------------------------------------------------------------------

    def publish_ad(self, ad: Ad) -> Ad:
        """
        Create or update ``ad`` and select it on exactly the portals it lists.

        The ad's identifier is set from the API response.

        Raises:
            ResponseError: If the API response has no integer ``id``
        """
        with tracer.start_as_current_span("publish_ad") as span:
            span.set_attribute("ad.reference", ad.reference)

            payload: Dict[str, Any] = {
                "advertiser": {"code": self.client_code},
                "source": {"code": self.client_login},
                **ad.to_dict(),
            }

            if ad.id:
                response = self.api.put(f"ads/{ad.id}", payload)
            else:
                response = self.api.post("ads", payload)

            ad_id = response.get("id") if isinstance(response, dict) else None
            if not isinstance(ad_id, int) or isinstance(ad_id, bool):
                raise ResponseError(
                    f"Unable to read the ad identifier for {ad.reference}",
                    detail=response,
                )
            ad.id = ad_id
            span.set_attribute("ad.id", ad_id)

            portals = set(ad.portals)
            for publication in self.get_ad_publications(ad):
                self.update_ad_publication(
                    publication, publication.portal_code in portals
                )

            logger.info("Published ad %s (id=%d)", ad.reference, ad_id)
            return ad

    def unpublish_ad(self, ad: Ad) -> Ad:
        """
        Deselect ``ad`` on every portal.

        Raises:
            ValidationFailedError: If the ad was never published
        """
        if not ad.id:
            raise ValidationFailedError("cannot unpublish an ad without an identifier")

        with tracer.start_as_current_span("unpublish_ad") as span:
            span.set_attribute("ad.id", ad.id)
            for publication in self.get_ad_publications(ad):
                self.update_ad_publication(publication, False)

        logger.info("Unpublished ad %s (id=%d)", ad.reference, ad.id)
        return ad

    def remove_ad(self, ad: Ad) -> Ad:
        """
        Delete ``ad`` on the API.

        Raises:
            ValidationFailedError: If the ad was never published or the API refuses
        """
        if not ad.id:
            raise ValidationFailedError("cannot delete an ad without an identifier")

        self.api.delete(f"ads/{ad.id}")
        logger.info("Removed ad %s (id=%d)", ad.reference, ad.id)
        return ad

    # -------------------------------------------------------------------------
    # Ad publications
    # -------------------------------------------------------------------------

    def get_ad_publications(self, ad: Ad) -> List[AdPublication]:
        data = self.api.get("ad_publications", {"ad.id": ad.id})
        publications = decode_many(data, decode_ad_publication)
        logger.debug("Ad %s has %d publications", ad.id, len(publications))
        return publications

    def update_ad_publication(self, publication: AdPublication, selected: bool) -> None:
        self.api.put(f"ad_publications/{publication.id}", {"selected": selected})

    # -------------------------------------------------------------------------
    # Contacts
    # -------------------------------------------------------------------------

    def get_contacts(
        self, created_after: datetime, ad: Optional[Ad] = None
    ) -> List[Contact]:
        """
        List contacts received since ``created_after``, optionally for one ad.

        A page that cannot be fetched or decoded ends the listing as if it
        were empty; the failure is logged and not raised.
        """
        with tracer.start_as_current_span("get_contacts") as span:
            query: Dict[str, Any] = {
                "ad.advertiser.id": self.client_id,
                "createdAt": {"after": format_timestamp(created_after)},
            }
            if ad is not None:
                query["ad.reference"] = ad.reference
                span.set_attribute("ad.reference", ad.reference)

            def fetch_page(page: int) -> List[Contact]:
                try:
                    data = self.api.get("mail_tracking_contacts", {"page": page, **query})
                    return decode_many(data, decode_contact)
                except Exception as e:
                    logger.warning("Stopping contacts listing at page %d: %s", page, e)
                    return []

            contacts = paginate(fetch_page)
            span.set_attribute("contacts.count", len(contacts))
            logger.info("Fetched %d contacts", len(contacts))
            return contacts

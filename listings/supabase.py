"""
Supabase listing source.

Reads a single row from the `properties` table through the PostgREST API.
Only fetch-by-id is supported; everything else the app does with the backend
lives elsewhere.
"""

import asyncio
from typing import Optional

import requests

from core.models import PropertyListing
from utils.config import Config

from .base import BasePropertySource, PropertyFetchError
from .mock import MockPropertySource


# =============================================================================
# Configuration
# =============================================================================

PROPERTIES_TABLE = "properties"
PROPERTY_SELECT = "*,city:cities(name)"
USER_AGENT = "domgo-deeplinks/1.0"

# PostgREST error code for an id that is not a valid UUID
INVALID_TEXT_REPRESENTATION = "22P02"


class SupabasePropertySource(BasePropertySource):
    """Fetches listings from the hosted Supabase backend."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the source.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            anon_key: Public anon API key.
            timeout: Request timeout in seconds.
            session: Optional requests session (injected in tests).
        """
        if not base_url:
            raise ValueError("base_url is required")
        if not anon_key:
            raise ValueError("anon_key is required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": anon_key,
            "Authorization": f"Bearer {anon_key}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/rest/v1/{PROPERTIES_TABLE}"

    async def get_property(self, property_id: str) -> Optional[PropertyListing]:
        """
        Fetch a listing by id without blocking the event loop.

        Args:
            property_id: Listing identifier.

        Returns:
            PropertyListing, or None if no row matches.

        Raises:
            PropertyFetchError: on network errors, backend errors or an
                unreadable row.
        """
        row = await asyncio.to_thread(self._fetch_row, property_id)
        if row is None:
            return None

        try:
            return PropertyListing.from_row(row)
        except (KeyError, TypeError, ValueError) as e:
            raise PropertyFetchError(property_id, f"malformed row: {e}") from e

    def _fetch_row(self, property_id: str) -> Optional[dict]:
        """Blocking request for one row."""
        try:
            response = self.session.get(
                self.endpoint,
                params={"id": f"eq.{property_id}", "select": PROPERTY_SELECT},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PropertyFetchError(property_id, str(e)) from e

        if response.status_code == 400 and self._error_code(response) == INVALID_TEXT_REPRESENTATION:
            # Not a UUID, so no row can have it
            return None

        try:
            response.raise_for_status()
            rows = response.json()
        except (requests.HTTPError, ValueError) as e:
            raise PropertyFetchError(property_id, str(e)) from e

        if not isinstance(rows, list):
            raise PropertyFetchError(property_id, "unexpected response shape")
        if not rows:
            return None
        if not isinstance(rows[0], dict):
            raise PropertyFetchError(property_id, "unexpected row shape")
        return rows[0]

    @staticmethod
    def _error_code(response: requests.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("code")
        return None


def get_property_source(config: Config) -> BasePropertySource:
    """Build the listing source selected by configuration."""
    if config.property_source == "supabase":
        return SupabasePropertySource(
            base_url=config.supabase_url,
            anon_key=config.supabase_anon_key,
            timeout=config.request_timeout,
        )
    return MockPropertySource()

"""
Base interface for listing sources.

The delivery routine only ever needs one thing from the backend: the listing
for an id, or nothing.
"""

from abc import ABC, abstractmethod
from typing import Optional

from core.models import PropertyListing


class PropertyFetchError(Exception):
    """Raised when a listing could not be fetched (network, backend, payload)."""

    def __init__(self, property_id: str, reason: str):
        self.property_id = property_id
        self.reason = reason
        super().__init__(f"Could not fetch property {property_id}: {reason}")


class BasePropertySource(ABC):
    """Abstract base class for listing sources."""

    @abstractmethod
    async def get_property(self, property_id: str) -> Optional[PropertyListing]:
        """
        Fetch a listing by id.

        Args:
            property_id: Listing identifier, as extracted from a link.

        Returns:
            PropertyListing, or None if no listing has this id.

        Raises:
            PropertyFetchError: the backend could not be queried.
        """
        pass

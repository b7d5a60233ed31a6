"""
Mock listing source for development and testing.
Generates realistic placeholder data without external requests.
"""

import random
from datetime import datetime, timedelta
from typing import Iterable, Optional

from core.models import ListingType, PropertyListing

from .base import BasePropertySource, PropertyFetchError


class MockPropertySource(BasePropertySource):
    """Mock source that generates a deterministic listing per id."""

    # Sample data for generating realistic listings
    LOCATIONS = {
        "Beograd": ["Vračar", "Dorćol", "Novi Beograd", "Zemun", "Voždovac", "Savski venac"],
        "Novi Sad": ["Liman", "Grbavica", "Detelinara", "Podbara", "Telep"],
        "Niš": ["Centar", "Palilula", "Medijana", "Pantelej"],
        "Kragujevac": ["Centar", "Aerodrom", "Stanovo"],
    }

    PROPERTY_TYPES = ["apartment", "house", "commercial", "land"]

    def __init__(
        self,
        missing_ids: Iterable[str] = (),
        failing_ids: Iterable[str] = (),
    ):
        """
        Initialize mock source.

        Args:
            missing_ids: Ids for which get_property returns None.
            failing_ids: Ids for which get_property raises PropertyFetchError.
        """
        self.missing_ids = set(missing_ids)
        self.failing_ids = set(failing_ids)
        self.requested_ids: list[str] = []

    async def get_property(self, property_id: str) -> Optional[PropertyListing]:
        """
        Generate a mock listing with the given ID.

        Args:
            property_id: Listing identifier.

        Returns:
            Mock PropertyListing, or None for ids configured as missing.
        """
        self.requested_ids.append(property_id)

        if property_id in self.failing_ids:
            raise PropertyFetchError(property_id, "mock backend unavailable")
        if property_id in self.missing_ids:
            return None

        return self._generate_listing(property_id)

    def _generate_listing(self, property_id: str) -> PropertyListing:
        """Generate a single mock listing, seeded by its id."""
        rng = random.Random(property_id)

        city = rng.choice(sorted(self.LOCATIONS))
        district = rng.choice(self.LOCATIONS[city])
        property_type = rng.choice(self.PROPERTY_TYPES)
        listing_type = rng.choice([ListingType.SALE, ListingType.RENT])
        rooms = rng.randint(1, 5)
        area = float(rng.randint(25, 40) + rooms * rng.randint(12, 20))

        if listing_type == ListingType.SALE:
            # Round to nearest 1000
            price = round(area * rng.randint(1400, 3200) / 1000) * 1000
        else:
            price = round(area * rng.randint(8, 16) / 10) * 10

        if city == "Beograd":
            price = int(price * 1.4)

        days_listed = rng.randint(1, 120)

        return PropertyListing(
            id=property_id,
            title=f"{rooms}-room {property_type}, {district}",
            listing_type=listing_type,
            property_type=property_type,
            price=price,
            area=area,
            rooms=rooms,
            location=f"{district}, {city}",
            city=city,
            description="Generated listing for development.",
            created_at=(datetime(2024, 1, 1) + timedelta(days=days_listed)).isoformat(),
        )

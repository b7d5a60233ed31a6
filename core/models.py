"""
Data models for listings delivered through deep links.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ListingType(Enum):
    """Whether a listing is for sale or for rent."""

    SALE = "sale"
    RENT = "rent"


class ListingStatus(Enum):
    """Publication status of a listing."""

    ACTIVE = "active"
    SOLD = "sold"
    RENTED = "rented"


@dataclass
class PropertyListing:
    """A property listing as stored in the backend `properties` table."""

    id: str
    title: str
    listing_type: ListingType
    property_type: str
    price: int
    area: float
    rooms: int
    location: str

    # Optional fields
    city: str = ""
    description: str = ""
    status: ListingStatus = ListingStatus.ACTIVE
    agency_id: Optional[str] = None
    created_at: Optional[str] = None
    images: list = field(default_factory=list)
    features: list = field(default_factory=list)

    def __post_init__(self):
        """Validate listing after initialization."""
        if not self.id:
            raise ValueError("id is required")
        if self.price < 0:
            raise ValueError("price must be non-negative")
        if self.area < 0:
            raise ValueError("area must be non-negative")

    @property
    def price_per_m2(self) -> float:
        """Price per square metre, 0 when area is unknown."""
        if self.area <= 0:
            return 0.0
        return self.price / self.area

    @property
    def is_available(self) -> bool:
        return self.status == ListingStatus.ACTIVE

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "type": self.listing_type.value,
            "property_type": self.property_type,
            "price": self.price,
            "area": self.area,
            "rooms": self.rooms,
            "location": self.location,
            "city": self.city,
            "description": self.description,
            "status": self.status.value,
            "agency_id": self.agency_id,
            "created_at": self.created_at,
            "images": list(self.images),
            "features": list(self.features),
        }

    @classmethod
    def from_row(cls, row: dict) -> "PropertyListing":
        """
        Create from a backend row.

        The row may carry the joined city as `{"city": {"name": ...}}`.

        Raises:
            KeyError: a required column is missing.
            ValueError: a column holds an unusable value.
        """
        city = row.get("city") or ""
        if isinstance(city, dict):
            city = city.get("name") or ""

        return cls(
            id=str(row["id"]),
            title=row["title"],
            listing_type=ListingType(row["type"]),
            property_type=row.get("property_type") or "",
            price=int(row["price"]),
            area=float(row.get("area") or 0),
            rooms=int(row.get("rooms") or 0),
            location=row.get("location") or "",
            city=city,
            description=row.get("description") or "",
            status=ListingStatus(row.get("status") or "active"),
            agency_id=row.get("agency_id"),
            created_at=row.get("created_at"),
            images=list(row.get("images") or []),
            features=list(row.get("features") or []),
        )

"""
Intent data model.

An intent is the classified meaning of one raw link. Every classification
produces a fresh, immutable intent whose `raw` field is the input verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class IntentType(Enum):
    """Kind of a classified link."""

    AUTH = "auth"
    PROPERTY = "property"
    AGENCY = "agency"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AuthIntent:
    """OAuth-style callback carrying a session token pair."""

    access_token: str
    refresh_token: str
    raw: str

    @property
    def type(self) -> IntentType:
        return IntentType.AUTH

    def to_dict(self, include_tokens: bool = False) -> dict:
        """
        Convert to dictionary.

        Tokens are redacted unless include_tokens is set, so the result is
        safe to log or return over the API.
        """
        if include_tokens:
            return {
                "type": self.type.value,
                "access_token": self.access_token,
                "refresh_token": self.refresh_token,
                "raw": self.raw,
            }
        return {
            "type": self.type.value,
            "access_token": "***",
            "refresh_token": "***",
            "raw": "***",
        }


@dataclass(frozen=True)
class PropertyIntent:
    """Link that should open a property's detail screen."""

    property_id: str
    raw: str

    @property
    def type(self) -> IntentType:
        return IntentType.PROPERTY

    def to_dict(self) -> dict:
        return {"type": self.type.value, "property_id": self.property_id, "raw": self.raw}


@dataclass(frozen=True)
class AgencyIntent:
    """Link that should open an agency page."""

    agency_id: str
    raw: str

    @property
    def type(self) -> IntentType:
        return IntentType.AGENCY

    def to_dict(self) -> dict:
        return {"type": self.type.value, "agency_id": self.agency_id, "raw": self.raw}


@dataclass(frozen=True)
class UnknownIntent:
    """Anything that is not a recognised link."""

    raw: str

    @property
    def type(self) -> IntentType:
        return IntentType.UNKNOWN

    def to_dict(self) -> dict:
        return {"type": self.type.value, "raw": self.raw}


Intent = Union[AuthIntent, PropertyIntent, AgencyIntent, UnknownIntent]

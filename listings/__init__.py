"""
Listing sources for fetching a property by id.

Available sources:
- MockPropertySource: Development/testing with generated data
- SupabasePropertySource: Live listings from the hosted backend
"""

from .base import BasePropertySource, PropertyFetchError
from .mock import MockPropertySource
from .supabase import SupabasePropertySource, get_property_source

__all__ = [
    "BasePropertySource",
    "PropertyFetchError",
    "MockPropertySource",
    "SupabasePropertySource",
    "get_property_source",
]

"""
DomGo Link Service - Core Logic

This package provides inbound link handling for DomGo listings:
1. Classification (raw link -> typed intent)          core.deeplink.classifier
2. Pending slot (one undelivered property, last wins)  core.deeplink.slot
3. Delivery (prefetch -> wait for navigation -> navigate -> clear)
                                                       core.deeplink.dispatcher

Only the listing model is exported here; listing sources import it, and the
dispatcher imports the listing sources.
"""

from .models import PropertyListing, ListingType, ListingStatus

__all__ = [
    "PropertyListing",
    "ListingType",
    "ListingStatus",
]

"""
Deep-link resolution and deferred navigation dispatch.

Inbound links are classified into intents by LinkClassifier; property intents
are parked in a PendingSlot and delivered by PendingIntentDispatcher once the
navigation shell can accept them.
"""

from .intents import (
    IntentType,
    Intent,
    AuthIntent,
    PropertyIntent,
    AgencyIntent,
    UnknownIntent,
)
from .patterns import LinkPatterns, DEFAULT_PATTERNS
from .classifier import ExtractionRule, LinkClassifier, build_rules, classify, get_classifier
from .slot import PendingEntry, PendingSlot, get_pending_slot, reset_pending_slot
from .dispatcher import (
    DEFAULT_GRACE_INTERVAL_SECONDS,
    AuthSessionHandler,
    DeliveryOutcome,
    DeliveryResult,
    NavigationReadiness,
    Navigator,
    PendingIntentDispatcher,
)
from .link_source import InMemoryLinkSource, LinkSource, attach_link_source

__all__ = [
    # Intents
    "IntentType",
    "Intent",
    "AuthIntent",
    "PropertyIntent",
    "AgencyIntent",
    "UnknownIntent",
    # Classification
    "LinkPatterns",
    "DEFAULT_PATTERNS",
    "ExtractionRule",
    "LinkClassifier",
    "build_rules",
    "classify",
    "get_classifier",
    # Pending slot
    "PendingEntry",
    "PendingSlot",
    "get_pending_slot",
    "reset_pending_slot",
    # Delivery
    "DEFAULT_GRACE_INTERVAL_SECONDS",
    "AuthSessionHandler",
    "DeliveryOutcome",
    "DeliveryResult",
    "NavigationReadiness",
    "Navigator",
    "PendingIntentDispatcher",
    # Link sources
    "InMemoryLinkSource",
    "LinkSource",
    "attach_link_source",
]

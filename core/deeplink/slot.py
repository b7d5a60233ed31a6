"""
Single-slot holder for a property link awaiting delivery.

One producer (the link handler) writes, one consumer (the delivery routine)
takes. A new write overwrites whatever is pending: last link wins, there is no
queue. Every write is stamped with a monotonically increasing token so that an
in-flight delivery can tell it has been superseded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PendingEntry:
    """A property id waiting for delivery."""

    property_id: str
    token: int

    def __post_init__(self):
        if not self.property_id:
            raise ValueError("property_id is required")
        if self.token < 1:
            raise ValueError("token must be positive")


class PendingSlot:
    """
    Holds at most one pending property id.

    Not thread-safe: all access is expected on one event loop, where
    take_and_clear() is a single uninterrupted step.
    """

    def __init__(self):
        self._entry: Optional[PendingEntry] = None
        self._latest_token = 0

    def set(self, property_id: str) -> PendingEntry:
        """
        Store a property id, replacing any pending one.

        Returns:
            The new entry with its token.
        """
        self._latest_token += 1
        self._entry = PendingEntry(property_id=property_id, token=self._latest_token)
        return self._entry

    def peek(self) -> Optional[PendingEntry]:
        """Pending entry without removing it."""
        return self._entry

    def take_and_clear(self) -> Optional[PendingEntry]:
        """Remove and return the pending entry, or None if empty."""
        entry, self._entry = self._entry, None
        return entry

    def clear(self) -> None:
        self._entry = None

    @property
    def is_empty(self) -> bool:
        return self._entry is None

    @property
    def latest_token(self) -> int:
        """Token of the most recent write (0 before any write)."""
        return self._latest_token

    def is_current(self, token: int) -> bool:
        """True if no write has happened since the entry with this token."""
        return token == self._latest_token


# =============================================================================
# Singleton Instance
# =============================================================================

_slot_instance: Optional[PendingSlot] = None


def get_pending_slot() -> PendingSlot:
    """Get the process-wide pending slot."""
    global _slot_instance
    if _slot_instance is None:
        _slot_instance = PendingSlot()
    return _slot_instance


def reset_pending_slot() -> None:
    """Reset the singleton instance (for testing)."""
    global _slot_instance
    _slot_instance = None

"""
Tests for the pending slot.

Tests covering:
1. Empty -> Pending -> Empty lifecycle
2. Last link wins on overwrite
3. Monotonic tokens and supersession checks
4. Process-wide singleton and reset
"""

import pytest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.deeplink.slot import (
    PendingEntry,
    PendingSlot,
    get_pending_slot,
    reset_pending_slot,
)


@pytest.fixture
def slot():
    return PendingSlot()


class TestLifecycle:
    """Tests for the slot lifecycle."""

    def test_starts_empty(self, slot):
        assert slot.is_empty
        assert slot.peek() is None
        assert slot.latest_token == 0

    def test_set_then_take(self, slot):
        slot.set("123")
        assert not slot.is_empty

        entry = slot.take_and_clear()
        assert entry.property_id == "123"
        assert slot.is_empty

    def test_take_on_empty_returns_none(self, slot):
        assert slot.take_and_clear() is None

    def test_take_only_once(self, slot):
        slot.set("123")
        assert slot.take_and_clear() is not None
        assert slot.take_and_clear() is None

    def test_peek_does_not_clear(self, slot):
        slot.set("123")
        assert slot.peek().property_id == "123"
        assert slot.peek().property_id == "123"
        assert not slot.is_empty

    def test_clear(self, slot):
        slot.set("123")
        slot.clear()
        assert slot.is_empty


class TestOverwrite:
    """Tests for last-link-wins semantics."""

    def test_second_set_overwrites(self, slot):
        slot.set("A")
        slot.set("B")
        assert slot.take_and_clear().property_id == "B"
        assert slot.take_and_clear() is None


class TestTokens:
    """Tests for write tokens."""

    def test_tokens_increase(self, slot):
        first = slot.set("A")
        second = slot.set("B")
        assert second.token > first.token
        assert slot.latest_token == second.token

    def test_tokens_survive_clear(self, slot):
        first = slot.set("A")
        slot.take_and_clear()
        second = slot.set("B")
        assert second.token == first.token + 1

    def test_is_current(self, slot):
        entry = slot.set("A")
        slot.take_and_clear()
        assert slot.is_current(entry.token)

        slot.set("B")
        assert not slot.is_current(entry.token)

    def test_entry_validation(self):
        with pytest.raises(ValueError):
            PendingEntry(property_id="", token=1)
        with pytest.raises(ValueError):
            PendingEntry(property_id="A", token=0)


class TestSingleton:
    """Tests for the process-wide slot."""

    def test_same_instance(self):
        reset_pending_slot()
        assert get_pending_slot() is get_pending_slot()

    def test_reset_gives_fresh_slot(self):
        reset_pending_slot()
        get_pending_slot().set("A")
        reset_pending_slot()
        assert get_pending_slot().is_empty

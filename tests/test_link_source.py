"""
Tests for inbound link sources.

Tests covering:
1. Launch link is handled before subscribing
2. Pushed links reach the dispatcher
3. Unsubscribing stops delivery
"""

import pytest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.deeplink.dispatcher import PendingIntentDispatcher
from core.deeplink.link_source import InMemoryLinkSource, attach_link_source
from core.deeplink.slot import PendingSlot
from listings import MockPropertySource


@pytest.fixture
def slot():
    return PendingSlot()


@pytest.fixture
def dispatcher(slot):
    async def no_wait(seconds):
        return None

    return PendingIntentDispatcher(MockPropertySource(), slot=slot, sleep=no_wait)


class TestAttachLinkSource:
    """Tests for attach_link_source."""

    @pytest.mark.asyncio
    async def test_launch_link_is_handled(self, dispatcher, slot):
        source = InMemoryLinkSource(initial="domgomobile://property/launch")
        await attach_link_source(source, dispatcher)
        assert slot.peek().property_id == "launch"

    @pytest.mark.asyncio
    async def test_without_launch_link(self, dispatcher, slot):
        source = InMemoryLinkSource()
        await attach_link_source(source, dispatcher)
        assert slot.is_empty
        assert source.listener_count == 1

    @pytest.mark.asyncio
    async def test_pushed_links_reach_dispatcher(self, dispatcher, slot):
        source = InMemoryLinkSource(initial="domgomobile://property/launch")
        await attach_link_source(source, dispatcher)
        await source.push("https://domgo.rs/property/789")
        assert slot.peek().property_id == "789"

    @pytest.mark.asyncio
    async def test_unsubscribe(self, dispatcher, slot):
        source = InMemoryLinkSource()
        detach = await attach_link_source(source, dispatcher)
        detach()
        assert source.listener_count == 0

        await source.push("domgomobile://property/123")
        assert slot.is_empty

    @pytest.mark.asyncio
    async def test_unsubscribe_twice_is_harmless(self, dispatcher):
        source = InMemoryLinkSource()
        detach = await attach_link_source(source, dispatcher)
        detach()
        detach()
        assert source.listener_count == 0

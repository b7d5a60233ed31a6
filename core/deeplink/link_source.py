"""
Inbound link sources.

The platform delivers links two ways: the link the app was launched with, and
a stream of links opened while it runs. Both end up in the dispatcher.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from loguru import logger

if TYPE_CHECKING:
    from .dispatcher import PendingIntentDispatcher


LinkListener = Callable[[str], Awaitable[Any]]


class LinkSource(ABC):
    """Push source of raw link strings."""

    @abstractmethod
    async def initial_link(self) -> Optional[str]:
        """Link the app was launched with, if any."""
        pass

    @abstractmethod
    def add_listener(self, listener: LinkListener) -> Callable[[], None]:
        """
        Subscribe to links opened while running.

        Returns:
            Callable that removes the listener.
        """
        pass


class InMemoryLinkSource(LinkSource):
    """Link source driven by explicit push() calls."""

    def __init__(self, initial: Optional[str] = None):
        self._initial = initial
        self._listeners: list[LinkListener] = []

    async def initial_link(self) -> Optional[str]:
        return self._initial

    def add_listener(self, listener: LinkListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def push(self, raw: str) -> None:
        """Deliver a link to every listener, in subscription order."""
        for listener in list(self._listeners):
            await listener(raw)


async def attach_link_source(
    source: LinkSource,
    dispatcher: "PendingIntentDispatcher",
) -> Callable[[], None]:
    """
    Feed a link source into a dispatcher.

    The launch link is handled first, then every link pushed afterwards.

    Returns:
        Callable that detaches the dispatcher from the source.
    """
    initial = await source.initial_link()
    if initial:
        logger.info("Handling launch link")
        await dispatcher.on_link_received(initial)

    return source.add_listener(dispatcher.on_link_received)

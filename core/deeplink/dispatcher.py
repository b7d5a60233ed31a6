"""
Deferred navigation dispatch for inbound links.

A link can arrive before the navigation shell is mounted (cold start) or while
it is busy. Property links are therefore parked in a PendingSlot and delivered
later by try_deliver():

1. Take the pending entry (slot is empty from here on)
2. Prefetch the listing, so the detail screen does not fetch it again
3. Wait until navigation can accept commands (readiness gate, or a fixed
   grace interval when no gate is wired)
4. Drop the delivery if a newer link arrived meanwhile
5. Navigate with the id and the prefetched listing

Every failure is terminal for that attempt. Nothing is retried; a new attempt
only happens when a new link arrives.
"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Final, Optional

from loguru import logger

from core.models import PropertyListing
from listings.base import BasePropertySource, PropertyFetchError

from .classifier import LinkClassifier, get_classifier
from .intents import AgencyIntent, AuthIntent, Intent, PropertyIntent
from .patterns import LinkPatterns
from .slot import PendingSlot, get_pending_slot

if TYPE_CHECKING:
    from utils.config import Config


# Observed mount-vs-ready gap of the mobile navigation container
DEFAULT_GRACE_INTERVAL_SECONDS: Final[float] = 0.5


# =============================================================================
# Collaborator interfaces
# =============================================================================


class Navigator(ABC):
    """The mounted navigation shell."""

    @abstractmethod
    def navigate_to_property(
        self,
        property_id: str,
        listing: Optional[PropertyListing] = None,
    ) -> Optional[Awaitable[Any]]:
        """
        Open the property detail screen.

        May be a plain method or a coroutine; a returned awaitable is awaited.
        """
        pass


class AuthSessionHandler(ABC):
    """Receives session tokens from auth callback links."""

    @abstractmethod
    async def set_session(self, access_token: str, refresh_token: str) -> bool:
        """Install the session. Returns False if the backend rejected it."""
        pass


AgencyHandler = Callable[[AgencyIntent], Optional[Awaitable[Any]]]


class NavigationReadiness:
    """
    Explicit "navigation can accept commands" signal.

    navigation_ready() marks it and navigation_unmounted() clears it. A shell
    that becomes navigable later than it mounts can also drive it directly.
    """

    def __init__(self):
        self._event = asyncio.Event()

    def mark_ready(self) -> None:
        self._event.set()

    def mark_unready(self) -> None:
        self._event.clear()

    @property
    def is_ready(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


# =============================================================================
# Delivery results
# =============================================================================


class DeliveryOutcome(Enum):
    """How a delivery attempt ended."""

    DELIVERED = "delivered"
    EMPTY = "empty"  # Nothing pending
    NOT_READY = "not_ready"  # No navigation target; entry left pending
    FETCH_FAILED = "fetch_failed"
    NOT_FOUND = "not_found"
    SUPERSEDED = "superseded"  # A newer link arrived during delivery


@dataclass(frozen=True)
class DeliveryResult:
    """Result of one try_deliver() call."""

    outcome: DeliveryOutcome
    property_id: Optional[str] = None
    listing: Optional[PropertyListing] = None
    reason: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.outcome == DeliveryOutcome.DELIVERED

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "property_id": self.property_id,
            "listing": self.listing.to_dict() if self.listing else None,
            "reason": self.reason,
        }


# =============================================================================
# Dispatcher
# =============================================================================


class PendingIntentDispatcher:
    """
    Classifies inbound links and delivers property intents once navigation
    is available.

    All methods must run on the same event loop.
    """

    def __init__(
        self,
        source: BasePropertySource,
        slot: Optional[PendingSlot] = None,
        classifier: Optional[LinkClassifier] = None,
        grace_interval: float = DEFAULT_GRACE_INTERVAL_SECONDS,
        readiness: Optional[NavigationReadiness] = None,
        auth_handler: Optional[AuthSessionHandler] = None,
        agency_handler: Optional[AgencyHandler] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            source: Fetches the listing for a pending id.
            slot: Pending slot (default: the process-wide slot).
            classifier: Link classifier (default: production link shapes).
            grace_interval: Seconds to wait before navigating when no
                readiness gate is given.
            readiness: Optional gate awaited instead of the grace interval.
            auth_handler: Receives tokens from auth callback links.
            agency_handler: Receives agency intents.
            sleep: Replacement for asyncio.sleep (tests).
        """
        if grace_interval < 0:
            raise ValueError("grace_interval must be non-negative")

        self.source = source
        self.slot = slot if slot is not None else get_pending_slot()
        self.classifier = classifier or get_classifier()
        self.grace_interval = grace_interval
        self.readiness = readiness
        self.auth_handler = auth_handler
        self.agency_handler = agency_handler
        self._sleep = sleep or asyncio.sleep
        self._navigator: Optional[Navigator] = None
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(
        cls,
        config: "Config",
        source: BasePropertySource,
        **kwargs,
    ) -> "PendingIntentDispatcher":
        """Build a dispatcher using configured link shapes and grace interval."""
        return cls(
            source=source,
            classifier=LinkClassifier(LinkPatterns.from_config(config)),
            grace_interval=config.grace_interval_seconds,
            **kwargs,
        )

    @property
    def navigator(self) -> Optional[Navigator]:
        return self._navigator

    # =========================================================================
    # Link intake
    # =========================================================================

    async def on_link_received(self, raw: str) -> Intent:
        """
        Handle one inbound link.

        Property links are parked in the slot, replacing any pending one.
        If navigation is already mounted, delivery is scheduled right away.

        Returns:
            The classified intent.
        """
        intent = self.classifier.classify(raw)

        if isinstance(intent, PropertyIntent):
            entry = self.slot.set(intent.property_id)
            logger.info(f"Pending property navigation set: {intent.property_id} (token {entry.token})")
            if self._navigator is not None:
                self._schedule_delivery()
        elif isinstance(intent, AuthIntent):
            await self._handle_auth(intent)
        elif isinstance(intent, AgencyIntent):
            await self._handle_agency(intent)
        else:
            logger.debug("Ignoring unrecognised link")

        return intent

    async def _handle_auth(self, intent: AuthIntent) -> None:
        if self.auth_handler is None:
            logger.warning("Auth callback received but no auth handler is configured")
            return

        if await self.auth_handler.set_session(intent.access_token, intent.refresh_token):
            logger.info("Session installed from auth callback")
        else:
            logger.error("Auth callback session was rejected")

    async def _handle_agency(self, intent: AgencyIntent) -> None:
        if self.agency_handler is None:
            logger.debug(f"No agency handler, ignoring agency link {intent.agency_id}")
            return

        result = self.agency_handler(intent)
        if inspect.isawaitable(result):
            await result

    # =========================================================================
    # Navigation lifecycle
    # =========================================================================

    def navigation_ready(self, navigator: Navigator) -> Optional[asyncio.Task]:
        """
        Signal that the navigation shell is mounted.

        Must be called from a running event loop.

        Returns:
            The scheduled delivery task if something was pending, else None.
        """
        self._navigator = navigator
        if self.readiness is not None:
            self.readiness.mark_ready()
        logger.debug("Navigation target attached")
        if self.slot.is_empty:
            return None
        return self._schedule_delivery()

    def navigation_unmounted(self) -> None:
        """Signal that the navigation shell went away."""
        self._navigator = None
        if self.readiness is not None:
            self.readiness.mark_unready()
        logger.debug("Navigation target detached")

    def _schedule_delivery(self) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.try_deliver(self._navigator))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> list[DeliveryResult]:
        """Wait for all scheduled deliveries, including ones scheduled meanwhile."""
        results: list[DeliveryResult] = []
        seen: set[asyncio.Task] = set()
        while True:
            pending = [task for task in self._tasks if task not in seen]
            if not pending:
                return results
            seen.update(pending)
            results.extend(await asyncio.gather(*pending))

    # =========================================================================
    # Delivery
    # =========================================================================

    async def try_deliver(self, navigator: Optional[Navigator]) -> DeliveryResult:
        """
        Deliver the pending property intent, if any.

        A no-op on an empty slot. Without a navigator the entry stays pending.

        Args:
            navigator: The mounted navigation shell.

        Returns:
            DeliveryResult describing how the attempt ended.
        """
        if self.slot.is_empty:
            return DeliveryResult(outcome=DeliveryOutcome.EMPTY)

        if navigator is None:
            return DeliveryResult(
                outcome=DeliveryOutcome.NOT_READY,
                property_id=self.slot.peek().property_id,
            )

        # Deliveries started for the attached shell follow it across remounts
        attached = navigator is self._navigator
        entry = self.slot.take_and_clear()
        property_id = entry.property_id
        logger.info(f"Delivering pending property {property_id}")

        try:
            listing = await self.source.get_property(property_id)
        except PropertyFetchError as e:
            logger.warning(f"Dropping pending property {property_id}: {e.reason}")
            return DeliveryResult(
                outcome=DeliveryOutcome.FETCH_FAILED,
                property_id=property_id,
                reason=e.reason,
            )
        except Exception as e:
            logger.exception(f"Dropping pending property {property_id}: unexpected fetch error")
            return DeliveryResult(
                outcome=DeliveryOutcome.FETCH_FAILED,
                property_id=property_id,
                reason=f"{type(e).__name__}: {e}",
            )

        if listing is None:
            logger.warning(f"Dropping pending property {property_id}: not found")
            return DeliveryResult(
                outcome=DeliveryOutcome.NOT_FOUND,
                property_id=property_id,
                reason="not found",
            )

        await self._wait_until_navigable()

        if not self.slot.is_current(entry.token):
            logger.warning(f"Delivery of property {property_id} superseded by a newer link")
            return DeliveryResult(
                outcome=DeliveryOutcome.SUPERSEDED,
                property_id=property_id,
                listing=listing,
                reason="superseded",
            )

        if attached and navigator is not self._navigator:
            if self._navigator is None:
                self.slot.set(property_id)
                logger.info(f"Navigation unmounted, property {property_id} parked again")
                return DeliveryResult(
                    outcome=DeliveryOutcome.NOT_READY,
                    property_id=property_id,
                    listing=listing,
                    reason="navigation unmounted",
                )
            navigator = self._navigator

        result = navigator.navigate_to_property(property_id, listing)
        if inspect.isawaitable(result):
            await result

        logger.info(f"Navigated to property {property_id}")
        return DeliveryResult(
            outcome=DeliveryOutcome.DELIVERED,
            property_id=property_id,
            listing=listing,
        )

    async def _wait_until_navigable(self) -> None:
        if self.readiness is not None:
            await self.readiness.wait()
        else:
            await self._sleep(self.grace_interval)

"""
Recognised link shapes.

The same listing can arrive as a native app link, a canonical web URL, or one
of the static redirector pages used while store review and universal-link
verification catch up with releases. LinkPatterns derives every prefix the
classifier checks from three settings: the app scheme, the primary domain and
the static mirror base.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from utils.config import Config


DEFAULT_APP_SCHEME: Final[str] = "domgomobile"
DEFAULT_PRIMARY_DOMAIN: Final[str] = "domgo.rs"
DEFAULT_MIRROR_BASE: Final[str] = "angstremoff.github.io/domgomobile"

PROPERTY: Final[str] = "property"
AGENCY: Final[str] = "agency"

LANDING_PAGE: Final[str] = "property.html"
HANDLER_PAGE: Final[str] = "deeplink-handler.html"


@dataclass(frozen=True)
class LinkPatterns:
    """Hosts and prefixes the classifier recognises."""

    app_scheme: str = DEFAULT_APP_SCHEME
    primary_domain: str = DEFAULT_PRIMARY_DOMAIN
    mirror_base: str = DEFAULT_MIRROR_BASE
    require_uuid_ids: bool = False

    def __post_init__(self):
        if not self.app_scheme:
            raise ValueError("app_scheme is required")
        if not self.primary_domain:
            raise ValueError("primary_domain is required")
        if "://" in self.primary_domain or "://" in self.mirror_base:
            raise ValueError("domains must not include a scheme")

    @classmethod
    def from_config(cls, config: "Config") -> "LinkPatterns":
        return cls(
            app_scheme=config.app_scheme,
            primary_domain=config.primary_domain,
            mirror_base=config.mirror_base.rstrip("/"),
            require_uuid_ids=config.require_uuid_ids,
        )

    # =========================================================================
    # Inbound prefixes
    # =========================================================================

    @property
    def auth_callback(self) -> str:
        return f"{self.app_scheme}://auth/callback"

    def native_authority(self, entity: str) -> str:
        """`domgomobile://property` style authority."""
        return f"{self.app_scheme}://{entity}"

    def web_path(self, entity: str) -> str:
        """`domgo.rs/property/` style path, matched by containment."""
        return f"{self.primary_domain}/{entity}/"

    def web_page(self, entity: str) -> str:
        """`domgo.rs/property.html` style landing page."""
        return f"{self.primary_domain}/{entity}.html"

    def mirror_pages(self, entity: str) -> tuple[str, ...]:
        """Static mirror pages. Only listings have them."""
        if entity != PROPERTY or not self.mirror_base:
            return ()
        return (
            f"{self.mirror_base}/{LANDING_PAGE}",
            f"{self.mirror_base}/{HANDLER_PAGE}",
        )

    def landing_pages(self, entity: str) -> tuple[str, ...]:
        """Every page that carries the id as an `id` query parameter."""
        return (self.web_page(entity),) + self.mirror_pages(entity)

    def allow_list(self, entity: str) -> tuple[str, ...]:
        """Prefixes that qualify a link for id extraction."""
        return (
            self.native_authority(entity),
            f"https://{self.web_page(entity)}",
            f"https://{self.web_path(entity)}",
        ) + tuple(f"https://{page}" for page in self.mirror_pages(entity))

    # =========================================================================
    # Outbound links
    # =========================================================================

    def app_link(self, property_id: str) -> str:
        """Native link that opens the listing in the app."""
        return f"{self.native_authority(PROPERTY)}/{property_id}"

    def web_link(self, property_id: str) -> str:
        """Canonical web URL of the listing."""
        return f"https://{self.web_path(PROPERTY)}{property_id}"


DEFAULT_PATTERNS: Final[LinkPatterns] = LinkPatterns()

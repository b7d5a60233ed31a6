"""
Link classifier.

Turns a raw inbound link into a typed Intent without navigating anywhere.

Recognition order (first match wins):
1. Auth callback with both tokens present
2. Property link on an allow-listed host, with an extractable id
3. Agency link on an allow-listed host, with an extractable id
4. Unknown

Id extraction is an ordered list of (predicate, extractor) rules, tried in
sequence until one yields a non-empty id. A link that qualifies for a
category but yields no id falls through to the next category.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Final, Optional
from urllib.parse import SplitResult, parse_qs, urlsplit

from loguru import logger

from .intents import AgencyIntent, AuthIntent, Intent, PropertyIntent, UnknownIntent
from .patterns import AGENCY, DEFAULT_PATTERNS, PROPERTY, LinkPatterns


UUID_PATTERN: Final = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


# =============================================================================
# URL helpers
# =============================================================================


def parse_url(raw: str) -> Optional[SplitResult]:
    """
    Parse raw as an absolute URL.

    Returns None when raw does not look like one: no scheme or authority,
    embedded whitespace, or a split error (e.g. a broken IPv6 host).
    """
    candidate = raw.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return None
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts


def query_param(parts: SplitResult, name: str) -> Optional[str]:
    """First value of a query parameter, or None if absent."""
    values = parse_qs(parts.query, keep_blank_values=True).get(name)
    if not values:
        return None
    return values[0]


def split_after(raw: str, marker: str) -> Optional[str]:
    """Trimmed remainder of raw after the first marker, or None."""
    if marker not in raw:
        return None
    remainder = raw.split(marker, 1)[1].strip()
    return remainder or None


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


# =============================================================================
# Extraction rules
# =============================================================================


@dataclass(frozen=True)
class ExtractionRule:
    """One way of pulling an entity id out of a link."""

    name: str
    matches: Callable[[str], bool]
    extract: Callable[[str], Optional[str]]

    def apply(self, raw: str) -> Optional[str]:
        """Return the extracted id, or None if the rule does not apply."""
        if not self.matches(raw):
            return None
        return self.extract(raw) or None


def _native_path_rule(patterns: LinkPatterns, entity: str) -> ExtractionRule:
    prefix = f"{patterns.native_authority(entity)}/"

    def extract(raw: str) -> Optional[str]:
        parts = parse_url(raw)
        if parts is None:
            return split_after(raw, prefix)
        segments = [segment for segment in parts.path.split("/") if segment.strip()]
        return segments[-1] if segments else None

    return ExtractionRule(
        name=f"native_{entity}_path",
        matches=lambda raw: raw.startswith(prefix),
        extract=extract,
    )


def _native_query_rule(patterns: LinkPatterns, entity: str) -> ExtractionRule:
    authority = patterns.native_authority(entity)

    def extract(raw: str) -> Optional[str]:
        parts = parse_url(raw)
        value = query_param(parts, "id") if parts is not None else None
        if value:
            return value
        return split_after(raw, "?id=")

    return ExtractionRule(
        name=f"native_{entity}_query",
        matches=lambda raw: raw.startswith(authority),
        extract=extract,
    )


def _web_path_rule(patterns: LinkPatterns, entity: str) -> ExtractionRule:
    marker = patterns.web_path(entity)

    def extract(raw: str) -> Optional[str]:
        parts = parse_url(raw)
        if parts is None:
            return None
        segments = parts.path.split("/")
        if entity not in segments:
            return None
        index = segments.index(entity) + 1
        if index < len(segments):
            return segments[index]
        return None

    return ExtractionRule(
        name=f"web_{entity}_path",
        matches=lambda raw: marker in raw,
        extract=extract,
    )


def _landing_page_rule(patterns: LinkPatterns, entity: str) -> ExtractionRule:
    pages = patterns.landing_pages(entity)

    def extract(raw: str) -> Optional[str]:
        parts = parse_url(raw)
        if parts is None:
            return None
        return query_param(parts, "id")

    return ExtractionRule(
        name=f"{entity}_landing_page",
        matches=lambda raw: any(page in raw for page in pages),
        extract=extract,
    )


def build_rules(patterns: LinkPatterns, entity: str) -> list[ExtractionRule]:
    """Extraction rules for an entity, in priority order."""
    return [
        _native_path_rule(patterns, entity),
        _native_query_rule(patterns, entity),
        _web_path_rule(patterns, entity),
        _landing_page_rule(patterns, entity),
    ]


# =============================================================================
# Classifier
# =============================================================================


class LinkClassifier:
    """
    Classifies raw links against a fixed set of link patterns.

    Stateless after construction; classify() is pure and never raises.
    """

    def __init__(self, patterns: Optional[LinkPatterns] = None):
        self.patterns = patterns or DEFAULT_PATTERNS
        self._property_rules = build_rules(self.patterns, PROPERTY)
        self._agency_rules = build_rules(self.patterns, AGENCY)

    @property
    def property_rules(self) -> list[ExtractionRule]:
        return list(self._property_rules)

    @property
    def agency_rules(self) -> list[ExtractionRule]:
        return list(self._agency_rules)

    def classify(self, raw: str) -> Intent:
        """
        Classify a raw link.

        Args:
            raw: Link exactly as delivered by the OS or the browser.

        Returns:
            AuthIntent, PropertyIntent, AgencyIntent or UnknownIntent.
            The intent's raw field is always the input verbatim.
        """
        auth = self._match_auth(raw)
        if auth is not None:
            logger.debug("Classified auth callback link")
            return auth

        property_id = self._match_entity(raw, PROPERTY, self._property_rules)
        if property_id is not None:
            logger.debug(f"Classified property link: {property_id}")
            return PropertyIntent(property_id=property_id, raw=raw)

        agency_id = self._match_entity(raw, AGENCY, self._agency_rules)
        if agency_id is not None:
            logger.debug(f"Classified agency link: {agency_id}")
            return AgencyIntent(agency_id=agency_id, raw=raw)

        return UnknownIntent(raw=raw)

    def _match_auth(self, raw: str) -> Optional[AuthIntent]:
        if self.patterns.auth_callback not in raw:
            return None

        parts = parse_url(raw)
        if parts is None:
            return None

        access_token = query_param(parts, "access_token")
        refresh_token = query_param(parts, "refresh_token")
        if access_token and refresh_token:
            return AuthIntent(access_token=access_token, refresh_token=refresh_token, raw=raw)
        return None

    def _match_entity(
        self,
        raw: str,
        entity: str,
        rules: list[ExtractionRule],
    ) -> Optional[str]:
        allowed = self.patterns.allow_list(entity)
        if not any(raw.startswith(prefix) or prefix in raw for prefix in allowed):
            return None

        for rule in rules:
            entity_id = rule.apply(raw)
            if entity_id is None:
                continue
            if self.patterns.require_uuid_ids and not is_uuid(entity_id):
                logger.debug(f"Rejected non-UUID {entity} id from rule {rule.name}")
                return None
            return entity_id

        return None


# =============================================================================
# Module-level entry point
# =============================================================================

_default_classifier: Optional[LinkClassifier] = None


def get_classifier() -> LinkClassifier:
    """Get the classifier for the default link patterns."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = LinkClassifier()
    return _default_classifier


def classify(raw: str, patterns: Optional[LinkPatterns] = None) -> Intent:
    """
    Classify a raw link into an Intent.

    Args:
        raw: The raw link string.
        patterns: Link shapes to recognise (default: production DomGo shapes).

    Returns:
        The classified Intent. Never raises.
    """
    if patterns is None:
        return get_classifier().classify(raw)
    return LinkClassifier(patterns).classify(raw)

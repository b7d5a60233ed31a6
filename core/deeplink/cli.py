#!/usr/bin/env python3
"""
CLI for inspecting how inbound links are resolved.

Usage:
    python -m core.deeplink.cli classify <url> [<url> ...]
    python -m core.deeplink.cli deliver <url> [--source mock|supabase]

Examples:
    # Show the intent for a native link
    python -m core.deeplink.cli classify domgomobile://property/123

    # Run receive -> prefetch -> navigate against the mock backend
    python -m core.deeplink.cli deliver https://domgo.rs/property/789
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from core.models import PropertyListing
from listings import get_property_source
from utils.config import Config
from utils.log_config import configure_logging

from .classifier import LinkClassifier
from .dispatcher import Navigator, PendingIntentDispatcher
from .patterns import LinkPatterns


class PrintingNavigator(Navigator):
    """Navigator that writes the navigation command to stdout."""

    def __init__(self):
        self.calls: list[str] = []

    def navigate_to_property(
        self,
        property_id: str,
        listing: Optional[PropertyListing] = None,
    ) -> None:
        self.calls.append(property_id)
        print(json.dumps({
            "screen": "PropertyDetails",
            "property_id": property_id,
            "listing": listing.to_dict() if listing else None,
        }, indent=2, ensure_ascii=False))


def cmd_classify(args, config: Config) -> int:
    """Print the intent of each link."""
    classifier = LinkClassifier(LinkPatterns.from_config(config))
    for raw in args.urls:
        intent = classifier.classify(raw)
        print(json.dumps(intent.to_dict(), ensure_ascii=False))
    return 0


async def _deliver(raw: str, config: Config) -> int:
    try:
        source = get_property_source(config)
    except ValueError as e:
        print(f"Error: Invalid listing source configuration: {e}", file=sys.stderr)
        return 2

    dispatcher = PendingIntentDispatcher.from_config(config, source=source)
    intent = await dispatcher.on_link_received(raw)
    print(f"Intent: {intent.type.value}", file=sys.stderr)

    result = await dispatcher.try_deliver(PrintingNavigator())
    print(f"Delivery: {result.outcome.value}", file=sys.stderr)
    return 0 if result.delivered else 1


def cmd_deliver(args, config: Config) -> int:
    """Run the full delivery flow for one link."""
    if args.source:
        config.property_source = args.source
    return asyncio.run(_deliver(args.url, config))


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="DomGo deep-link resolver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m core.deeplink.cli classify domgomobile://property/123
    python -m core.deeplink.cli deliver https://domgo.rs/property/789 --source mock
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Classify command
    classify_parser = subparsers.add_parser(
        "classify",
        help="Print the intent of one or more links",
    )
    classify_parser.add_argument("urls", nargs="+", help="Raw links")
    classify_parser.set_defaults(func=cmd_classify)

    # Deliver command
    deliver_parser = subparsers.add_parser(
        "deliver",
        help="Receive a link and deliver it to a printing navigator",
    )
    deliver_parser.add_argument("url", help="Raw link")
    deliver_parser.add_argument(
        "--source",
        choices=["mock", "supabase"],
        default=None,
        help="Listing source (default: PROPERTY_SOURCE or mock)",
    )
    deliver_parser.set_defaults(func=cmd_deliver)

    args = parser.parse_args(argv)

    config = Config.load()
    configure_logging(args.log_level or config.log_level)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())

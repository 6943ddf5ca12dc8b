"""
Command-line interface adapter.

Read-only queries against the classifieds API, printed as JSON.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any, Callable, List, Optional

from opentelemetry import trace

from application.classifieds_client import ClassifiedsClient
from domain.enums import Transaction, Universe
from domain.models import Ad
from infrastructure.config import ClientSettings

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


def parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 date: {value!r}")


def setup_argument_parser(prog: str = "ubiflow") -> argparse.ArgumentParser:
    """Configure CLI arguments."""
    parser = argparse.ArgumentParser(
        prog=prog, description="Query the classifieds syndication API"
    )
    parser.add_argument(
        "-out",
        "--output-file",
        dest="output_file",
        help="Write the JSON result to this file instead of stdout",
    )
    subparsers = parser.add_subparsers(dest="query", required=True)

    portal = subparsers.add_parser("portal", help="Show one portal")
    portal.add_argument("portal_id", type=int, help="Portal identifier")

    portals = subparsers.add_parser("portals", help="List the portals of a universe")
    portals.add_argument(
        "--universe",
        choices=[universe.code for universe in Universe],
        default=Universe.IMMO.code,
        help="Universe code (default: IMMO)",
    )

    publications = subparsers.add_parser(
        "publications", help="Show the per-portal publications of an ad"
    )
    publications.add_argument("ad_id", type=int, help="Ad identifier")

    contacts = subparsers.add_parser("contacts", help="List contacts received")
    contacts.add_argument(
        "--since",
        type=parse_datetime,
        required=True,
        help="Only contacts created after this ISO-8601 date",
    )
    contacts.add_argument("--reference", help="Restrict to the ad with this reference")
    return parser


def _ad_stub(ad_id: Optional[int], reference: str = "") -> Ad:
    # Listings only read the identifier and reference of an ad
    return Ad(ad_id, reference, Transaction.SALE, 0, 0, "", "")


class QueryCLI:
    """CLI for read-only API queries."""

    def __init__(
        self,
        client_factory: Optional[Callable[[], ClassifiedsClient]] = None,
    ) -> None:
        self.parser = setup_argument_parser()
        self.client_factory = client_factory or (
            lambda: ClassifiedsClient.from_settings(ClientSettings.from_env())
        )

    def execute(self, client: ClassifiedsClient, args: argparse.Namespace) -> Any:
        """Run the parsed query and return JSON-ready data."""
        if args.query == "portal":
            portal = client.get_portal(args.portal_id)
            return portal.to_dict() if portal else None
        if args.query == "portals":
            return [p.to_dict() for p in client.get_portals(Universe(args.universe))]
        if args.query == "publications":
            return [p.to_dict() for p in client.get_ad_publications(_ad_stub(args.ad_id))]
        if args.query == "contacts":
            ad = _ad_stub(None, args.reference) if args.reference else None
            return [c.to_dict() for c in client.get_contacts(args.since, ad)]
        raise ValueError(f"Unknown query: {args.query}")

    def write_output(self, data: Any, output_file: Optional[str]) -> None:
        if output_file:
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.info("Wrote result to %s", output_file)
        else:
            json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
            sys.stdout.write("\n")

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI application.

        Returns:
            Exit code (0 for success, 1 for error)
        """
        parsed_args = self.parser.parse_args(args)
        logger.debug("Parsed CLI arguments: %s", parsed_args)

        with tracer.start_as_current_span("query_cli.run") as span:
            span.set_attribute("cli.query", parsed_args.query)
            try:
                client = self.client_factory()
                data = self.execute(client, parsed_args)
                self.write_output(data, parsed_args.output_file)
                span.set_attribute("exit_code", 0)
                return 0
            except Exception as e:
                logger.error("Query %s failed: %s", parsed_args.query, str(e))
                span.set_attribute("error.type", type(e).__name__)
                span.set_attribute("error.message", str(e))
                span.set_attribute("exit_code", 1)
                return 1

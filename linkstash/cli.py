#!/usr/bin/env python3
"""
Command-line interface for local linkstash administration.

Works directly against the mapping store, without the web service or an admin
session.

Usage:
    linkstash shorten <url>
    linkstash get <identifier>
    linkstash list [--offset N] [--limit N]
    linkstash count
    linkstash seed [--count N]
"""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from .common.logging_config import setup_logging
from .common.validators import is_valid_url
from .database import open_store
from .errors import LinkStashError, MappingNotFoundError
from .mock_data import generate_mock_data

DEFAULT_DB_URL = "sqlite:///./data/linkstash.sqlite3"


class LinkStashCLI:
    """Command-line interface for linkstash."""

    def __init__(self, db_url: str, verbose: bool = False):
        self.db_url = db_url
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None

    def initialize(self):
        self.store = open_store(self.db_url)

    async def cleanup(self):
        if self.store:
            await self.store.close()

    def _print(self, payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    async def shorten(self, url: str) -> int:
        """Shorten a URL."""
        is_valid, error = is_valid_url(url)
        if not is_valid:
            return self._print({"success": False, "error": f"Invalid URL: {error}"}, error=True)

        identifier = await self.store.create(url)
        return self._print({
            "success": True,
            "short_identifier": identifier,
            "original_url": url,
        })

    async def get(self, identifier: str) -> int:
        """Show a mapping without counting a visit."""
        try:
            record = await self.store.get(identifier)
        except MappingNotFoundError as e:
            return self._print({"success": False, "error": str(e)}, error=True)

        return self._print({"success": True, "short_identifier": identifier, **record.to_dict()})

    async def list_mappings(self, offset: int, limit: int) -> int:
        page = await self.store.list_page(offset, limit)
        return self._print({
            "success": True,
            "total_count": page.total_count,
            "offset": page.offset,
            "limit": page.limit,
            "mappings": [
                {"short_identifier": entry.identifier, **entry.record.to_dict()}
                for entry in page.entries
            ],
        })

    async def count(self) -> int:
        return self._print({"success": True, "total_count": await self.store.count()})

    async def seed(self, count: int) -> int:
        """Inject synthetic mappings."""
        report = await generate_mock_data(self.store, count)
        return self._print({"success": not report.failed, **report.to_dict()}, error=bool(report.failed))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkstash",
        description="linkstash CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Show a mapping and its visit analytics
  %(prog)s get 1a2b3c4d

  # List the first 10 mappings
  %(prog)s list --limit 10

  # Add 50 synthetic mappings
  %(prog)s seed --count 50
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DB_URL", DEFAULT_DB_URL),
        help=f"Mapping store URL (default: from DB_URL env or {DEFAULT_DB_URL})"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    get_parser = subparsers.add_parser("get", help="Show a mapping")
    get_parser.add_argument("identifier", help="Short identifier")

    list_parser = subparsers.add_parser("list", help="List mappings in identifier order")
    list_parser.add_argument("--offset", type=int, default=0, help="Mappings to skip")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    subparsers.add_parser("count", help="Count mappings")

    seed_parser = subparsers.add_parser("seed", help="Inject synthetic mappings")
    seed_parser.add_argument("--count", type=int, default=10, help="Number of mappings to create")

    return parser


async def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = LinkStashCLI(db_url=args.db_url, verbose=args.verbose)

    try:
        cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "get":
            return await cli.get(args.identifier)
        elif args.command == "list":
            return await cli.list_mappings(args.offset, args.limit)
        elif args.command == "count":
            return await cli.count()
        elif args.command == "seed":
            return await cli.seed(args.count)
        else:
            parser.print_help()
            return 1

    except (LinkStashError, ValueError) as e:
        return cli._print({"success": False, "error": str(e)}, error=True)
    finally:
        await cli.cleanup()


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()

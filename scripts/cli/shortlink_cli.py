#!/usr/bin/env python3
"""
Command-line interface for the shortlink stores.

Usage:
    python shortlink_cli.py shorten <urls> [--password TOKEN]
    python shortlink_cli.py resolve <path>
    python shortlink_cli.py keys
    python shortlink_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional, List

from shortlink.keygen import KeyGenerator
from shortlink.resolver import RedirectResolver
from shortlink.service import ShortlinkService
from shortlink.storage import RedisStore, TieredCache, load_seed
from shortlink.common.logging_config import setup_logging


class ShortlinkCLI:
    """Command-line interface for shortlink."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        seed_file: Optional[str] = None,
        base_url: str = "http://localhost:9200",
        verbose: bool = False,
    ):
        """Initialize CLI."""
        self.redis_url = redis_url
        self.seed_file = seed_file
        self.base_url = base_url
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None
        self.resolver = None
        self.service = None

    def initialize(self):
        """Build the tiered store and the services on top of it."""
        remote = None
        if self.redis_url:
            remote = RedisStore(redis_url=self.redis_url, logger=self.logger)

        self.store = TieredCache(
            remote=remote,
            seed=load_seed(self.seed_file, logger=self.logger),
            logger=self.logger,
        )
        self.resolver = RedirectResolver(store=self.store, logger=self.logger)
        self.service = ShortlinkService(
            store=self.store,
            key_generator=KeyGenerator(self.store, logger=self.logger),
            logger=self.logger,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.resolver:
            await self.resolver.drain()
        if self.service:
            await self.service.close()

    def _emit(self, payload: dict, ok: bool = True) -> int:
        print(json.dumps(payload, indent=2), file=sys.stdout if ok else sys.stderr)
        return 0 if ok else 1

    async def shorten(self, urls: str, password: Optional[str] = None) -> int:
        """Shorten a comma/newline separated URL list."""
        try:
            results = await self.service.shorten(urls, password=password)
        except ValueError as e:
            return self._emit({"success": False, "error": str(e)}, ok=False)

        payload = {
            "success": True,
            "results": [r.to_dict() for r in results],
        }
        if not self.store.remote_enabled:
            payload["warning"] = "No remote store configured; keys live only for this process"
        return self._emit(payload)

    async def resolve(self, path: str) -> int:
        """Show the redirect decision for a request path."""
        resolution = await self.resolver.resolve(path.lstrip("/"), origin=self.base_url)
        return self._emit({
            "success": True,
            "path": path,
            "state": resolution.state.value,
            "location": resolution.location,
        })

    async def keys(self) -> int:
        """List every key, marking password-protected ones by bare token only."""
        keys = await self.store.keys()
        listing = sorted(
            f"{KeyGenerator.bare_token(k)} (protected)" if KeyGenerator.is_secure(k) else k
            for k in keys
        )
        return self._emit({"success": True, "count": len(listing), "keys": listing})

    async def health(self) -> int:
        """Check store health."""
        health_status = await self.service.health_check()
        return self._emit({"success": True, "health": health_status}, ok=health_status["overall"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Shortlink CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten two URLs
  %(prog)s shorten "example.com,https://example.org/page"

  # Shorten behind a password
  %(prog)s shorten https://example.org/private --password abc

  # Show what a request path would do
  %(prog)s resolve /a1b2c3

  # List keys across all tiers
  %(prog)s keys
        """
    )

    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )

    parser.add_argument(
        "--seed-file",
        default=os.getenv("SEED_FILE"),
        help="JSON file with extra static seed entries (default: from SEED_FILE env)"
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:9200"),
        help="Origin used when printing unlock redirects"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten URLs")
    shorten_parser.add_argument("urls", help="URLs separated by commas or newlines")
    shorten_parser.add_argument("--password", help="Password token for the keys")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a request path")
    resolve_parser.add_argument("path", help="Request path, with or without leading slash")

    subparsers.add_parser("keys", help="List keys")
    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortlinkCLI(
        redis_url=args.redis_url,
        seed_file=args.seed_file,
        base_url=args.base_url,
        verbose=args.verbose,
    )
    cli.initialize()

    try:
        if args.command == "shorten":
            return await cli.shorten(args.urls, args.password)
        elif args.command == "resolve":
            return await cli.resolve(args.path)
        elif args.command == "keys":
            return await cli.keys()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)

#!/usr/bin/env python3
"""Print suggestions for a site: cached ones if present, otherwise fetched from WordPress.com."""
import argparse
import asyncio
import sys
from pathlib import Path

import redis

root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root / "src"))
from wpsuggest.cache import SuggestionCache
from wpsuggest.client import WordPressComClient
from wpsuggest.config import load_settings
from wpsuggest.errors import SuggestionError
from wpsuggest.filter import search
from wpsuggest.logging_setup import configure_logging
from wpsuggest.models import Site, SuggestionType, display_title
from wpsuggest.reachability import HttpReachability
from wpsuggest.service import SuggestionService


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    configure_logging(args.log_level or settings.log_level, settings.log_path)

    client = redis.Redis(
        host=settings.redis_host, port=settings.redis_port, db=settings.redis_db, decode_responses=True
    )
    cache = SuggestionCache(client, key_prefix=settings.cache_key_prefix, ttl_seconds=settings.cache_ttl_seconds)
    service = SuggestionService(
        cache,
        reachability=HttpReachability(settings.api_base_url),
        fetch_timeout=settings.fetch_timeout_seconds,
    )
    suggestion_type = SuggestionType(args.type)

    async with WordPressComClient(
        settings.api_base_url, token=settings.api_token, timeout_seconds=settings.api_timeout_seconds
    ) as api:
        site = Site(args.site_id, args.hostname, api)
        try:
            if args.refresh:
                suggestions = await service.refresh(site, suggestion_type)
            else:
                suggestions = await service.get_suggestions(site, suggestion_type)
        except SuggestionError as e:
            print(f"{e.code}: {e}", file=sys.stderr)
            return 1

    matches = search(suggestions, args.query, suggestion_type)[: args.limit]
    print(f"Site {args.site_id}: {len(matches)} of {len(suggestions)} {suggestion_type.value} match '{args.query}'\n")
    for i, s in enumerate(matches, 1):
        print(f"  {i}. {display_title(s)}  {s.label}")
    print()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Show @mention or +cross-post suggestions for a site")
    parser.add_argument("site_id", type=int, help="WordPress.com site ID")
    parser.add_argument("query", nargs="?", default="", help="Typed word, e.g. +news or @ann")
    parser.add_argument("--hostname", help="Site hostname, required for xposts (e.g. example.wordpress.com)")
    parser.add_argument("--type", choices=[t.value for t in SuggestionType], default=SuggestionType.XPOSTS.value)
    parser.add_argument("--limit", type=int, default=10, help="Max suggestions to print")
    parser.add_argument("--refresh", action="store_true", help="Ignore the cache and refetch")
    parser.add_argument("--config", type=Path, default=root / "configs" / "api.yaml", help="Config YAML")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from pagekit.fetch import (
    FetchSettings,
    HTTPClient,
    HttpRequest,
    LinkPageSource,
    PagedFetchEngine,
    RetryingRequestExecutor,
)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Page through a GitHub listing via the Link header")
    p.add_argument("repo", nargs="?", default="python/cpython")
    p.add_argument("resource", nargs="?", default="tags", choices=["tags", "issues", "releases"])
    p.add_argument("per_page", nargs="?", type=int, default=30)
    p.add_argument("max_pages", nargs="?", type=int, default=3)
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    settings = FetchSettings()
    async with HTTPClient.from_settings(settings) as client:
        executor = RetryingRequestExecutor(
            client, settings.retry_policy(), rate_limiter=settings.rate_limiter()
        )
        source = LinkPageSource(
            executor,
            HttpRequest(
                url=f"https://api.github.com/repos/{args.repo}/{args.resource}",
                params={"per_page": args.per_page},
                headers={"Accept": "application/vnd.github+json"},
            ),
            use_link_header=True,
            max_pages=args.max_pages,
        )
        result = await PagedFetchEngine().fetch_all(source)

    print("=" * 65)
    print(f"Repository : {args.repo}")
    print(f"Pages      : {result.pages_merged}")
    print(f"Rows       : {len(result)}")
    print(f"Fields     : {', '.join(result.fields or ())}")
    print("=" * 65)
    key = "name" if result.fields and "name" in result.fields else "id"
    for row in result:
        print(row.get(key))


if __name__ == "__main__":
    asyncio.run(main())

#!/usr/bin/env python3
"""Stream rows from an offset/limit API, stopping early on Ctrl+C."""

from __future__ import annotations

import argparse
import asyncio
import signal

from pagekit.fetch import (
    CancellationToken,
    FetchCancelledError,
    HTTPClient,
    HttpRequest,
    OffsetPageSource,
    PagedFetchEngine,
    RateLimiter,
    RetryingRequestExecutor,
    RetryPolicy,
)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream an offset-paginated JSON API")
    p.add_argument("url", nargs="?", default="https://pokeapi.co/api/v2/pokemon")
    p.add_argument("records_path", nargs="?", default="results")
    p.add_argument("page_size", nargs="?", type=int, default=50)
    p.add_argument("--total-path", default="count")
    p.add_argument("--interval", type=float, default=0.2, help="Seconds between requests")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    token = CancellationToken()
    asyncio.get_running_loop().add_signal_handler(signal.SIGINT, token.cancel, "interrupted")

    async with HTTPClient(timeout=15.0) as client:
        executor = RetryingRequestExecutor(client, RetryPolicy(max_attempts=4, respect_retry_after=True))
        source = OffsetPageSource(
            executor,
            HttpRequest(url=args.url),
            records_path=args.records_path,
            page_size=args.page_size,
            total_path=args.total_path,
            cancel_token=token,
        )
        engine = PagedFetchEngine(rate_limiter=RateLimiter(args.interval), missing=None)

        count = 0
        try:
            async for page in engine.iter_pages(source, cancel_token=token):
                count += len(page.rows)
                print(f"page {page.index:>4} | rows {len(page.rows):>4} | total {count:>7}")
        except FetchCancelledError as e:
            print(f"Stopped: {e}")

    print(f"Received {count} rows")


if __name__ == "__main__":
    asyncio.run(main())

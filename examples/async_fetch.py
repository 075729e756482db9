#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "memfetch",
# ]
#
# [tool.uv.sources]
# memfetch = { path = "../", editable = true }
# ///

import asyncio

from memfetch import AsyncCacheFetcher


async def fetch_and_print(fetcher: AsyncCacheFetcher, url: str) -> None:
    print(f"\n➡ Sending request to {url}...")
    response = await fetcher.fetch(url)

    print(f"📦 Status: {response.status_code}")
    print(f"🧾 Cache-Control: {response.headers.get('Cache-Control')}")
    print(f"🔄 From Cache: {response.extensions['from_cache']}")


async def main() -> None:
    url = "https://example.com/"
    async with AsyncCacheFetcher(cleanup_interval=30) as fetcher:
        await fetch_and_print(fetcher, url)
        await fetch_and_print(fetcher, url)
        print(f"\n🧹 Expired entries removed: {len(fetcher.cleanup())}")


if __name__ == "__main__":
    asyncio.run(main())

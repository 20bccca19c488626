"""
cover_letter_cache.py — Cached, de-duplicated cover letter generation.

Demonstrates one feature cache fed by a slow upstream call: concurrent
identical requests share one call, repeats are served from the cache, and
a prefetch warms the next request in the background.

Usage:
    python examples/cover_letter_cache.py
"""

import asyncio

from aicache import CachedFetcher, FeatureCacheRegistry, Prefetcher


async def generate_cover_letter(params) -> str:
    await asyncio.sleep(0.5)
    return f"Dear {params['company']} team, I am applying for {params['position']}."


async def main() -> None:
    registry = FeatureCacheRegistry.with_default_features()
    fetcher = CachedFetcher(registry.get("cover_letter"), generate_cover_letter)
    prefetcher = Prefetcher(fetcher)

    request = {"position": "Software Engineer", "company": "Google"}
    letters = await asyncio.gather(fetcher.fetch(request), fetcher.fetch(request))
    print(letters[0])

    prefetcher.prefetch({"position": "Product Manager", "company": "Apple"})
    await prefetcher.wait()

    again = await fetcher.fetch_with_meta(request)
    print(f"from cache: {again.from_cache}")
    print(registry.get("cover_letter").get_stats().to_dict())


if __name__ == "__main__":
    asyncio.run(main())

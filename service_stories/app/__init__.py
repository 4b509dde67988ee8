"""
Story cache service package.

Serves trending/newest story listings and per-story comment threads from
the public story API, normalized into one record shape and cached with
max-age / stale-while-revalidate freshness.

Structure:
- app.main: FastAPI app, routes, and dependency wiring.
- app.adapters: HTTP clients for the upstream search and item APIs.
- app.stories: Record models, normalizer, fan-out fetcher, listing strategies.
- app.caching: Cache keys, freshness policy, stores, and the cache-aside loader.
"""

"""
Story cache package.

Provides the cache-aside loader, cache keys, freshness policies, and the
stores it reads and writes. Entries are short-lived and expire by time;
there is no explicit invalidation.
"""

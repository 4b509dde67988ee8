"""
Freshness contracts attached to cached listings and comment threads.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FreshnessPolicy:
    """max-age plus a stale-while-revalidate extension, in seconds."""

    max_age: int
    stale_while_revalidate: int

    def cache_control(self) -> str:
        return (
            f"public, max-age={self.max_age}, s-maxage={self.max_age}, "
            f"stale-while-revalidate={self.stale_while_revalidate}"
        )


LISTING_FRESHNESS = FreshnessPolicy(max_age=300, stale_while_revalidate=600)
COMMENT_FRESHNESS = FreshnessPolicy(max_age=180, stale_while_revalidate=300)

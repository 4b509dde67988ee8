"""
Adapters package for the story cache service.

HTTP client wrappers for the upstream story APIs. These adapters
encapsulate base URLs, request shapes, and the mapping of HTTP and
decode failures onto the shared upstream errors. No retries happen here.
"""

from .upstream_client import UpstreamClient
from .search_client import SearchApiClient
from .item_client import ItemApiClient

__all__ = [
    "UpstreamClient",
    "SearchApiClient",
    "ItemApiClient",
]

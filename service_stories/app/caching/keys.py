"""
Cache key construction.
"""

import hashlib
from urllib.parse import urlsplit, urlunsplit

KEY_PREFIX = "stories"


def request_identity(url: str) -> str:
    """Resource identity of a request URL: scheme, host, and path only."""
    parts = urlsplit(str(url))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def build_key(identity: str, discriminator: str) -> str:
    """Deterministic cache key for ``discriminator`` ("top", "new", or a story id) under ``identity``."""
    key_string = ":".join([request_identity(identity), str(discriminator)])
    return f"{KEY_PREFIX}:{hashlib.md5(key_string.encode()).hexdigest()}"

"""
Tests for cache key construction.
"""

from service_stories.app.caching.keys import build_key, request_identity


REQUEST_A = "https://news.example.com/api/stories"
REQUEST_B = "https://news.example.com/api/comments/8863"


def test_same_inputs_give_same_key():
    assert build_key(REQUEST_A, "top") == build_key(REQUEST_A, "top")


def test_discriminators_do_not_collide():
    keys = {build_key(REQUEST_A, discriminator) for discriminator in ("top", "new", "8863")}

    assert len(keys) == 3


def test_different_requests_give_different_keys():
    assert build_key(REQUEST_A, "8863") != build_key(REQUEST_B, "8863")


def test_query_string_and_fragment_are_ignored():
    assert build_key(f"{REQUEST_A}?utm_source=feed#top", "top") == build_key(REQUEST_A, "top")


def test_key_is_prefixed_and_opaque():
    key = build_key(REQUEST_A, "top")

    assert key.startswith("stories:")
    assert REQUEST_A not in key


def test_request_identity_keeps_scheme_host_and_path():
    assert request_identity("http://localhost:8000/api/stories?x=1") == "http://localhost:8000/api/stories"

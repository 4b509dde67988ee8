"""
Story and comment records, normalization, and upstream fan-out.

Records are built eagerly at the upstream boundary so the rest of the
service never branches on whether an optional upstream field exists.
"""

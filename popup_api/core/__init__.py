"""
Core utilities shared across the popup API.

This package hosts configuration, logging setup and the localized messages
returned to clients. Routers and services depend on these primitives instead
of reading os.environ directly.
"""

"""
Pricing kernels.

- `python/` holds the integer-only kernels the public `core/` API wraps.
"""

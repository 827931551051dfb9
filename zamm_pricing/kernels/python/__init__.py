"""
Python reference kernels (integer-only, auditable).
"""

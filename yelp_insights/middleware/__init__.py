"""
HTTP middleware and rate limiting.
"""

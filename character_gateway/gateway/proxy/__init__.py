"""
Gateway proxy package.

This package contains the HTTP client for the upstream API.
"""

from .http_client import UpstreamClient

__all__ = [
    "UpstreamClient",
]

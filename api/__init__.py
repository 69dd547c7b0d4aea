"""
HTTP API for the purchase confirmation notifier.

Exposes the order confirmation trigger endpoints and a health check.
"""

from api.main import app

__all__ = ["app"]

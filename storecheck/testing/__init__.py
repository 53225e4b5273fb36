"""
Test harness for the in-process storefront.

This module provides:
- HarnessContext, the explicit per-test-file context (database, connection,
  application, client)
- build_test_app() and test_client() for request injection
- Seeder, creating valid minimal entities
- A pytest plugin (``storecheck.testing.plugin``) exposing all of the above
  as fixtures
"""

from .app import build_test_app, test_client
from .context import HarnessContext
from .seed import DEFAULT_PASSWORD, Catalog, Seeder

__all__ = [
    "DEFAULT_PASSWORD",
    "Catalog",
    "HarnessContext",
    "Seeder",
    "build_test_app",
    "test_client",
]

"""
Ephemeral database fixture and its helpers.

This module provides:
- EphemeralDatabase, a throwaway database per test file (sqlite or postgresql)
- Connection, the shared handle whose close() simulates an outage
- CleanupResult, the outcome of the per-test purge
- QueryLogger, per-query logging via SQLAlchemy events
"""

from .backends import BACKENDS, PostgresBackend, SQLiteBackend, make_backend
from .core import QueryLogger, format_query_string, safe_url
from .ephemeral import Connection, EphemeralDatabase
from .result import CleanupResult

__all__ = [
    "BACKENDS",
    "CleanupResult",
    "Connection",
    "EphemeralDatabase",
    "PostgresBackend",
    "QueryLogger",
    "SQLiteBackend",
    "format_query_string",
    "make_backend",
    "safe_url",
]

"""
Provisioning backends for the ephemeral database.

A backend creates a throwaway database, reports its URL and engine options,
and destroys it again. Two are available:

- ``sqlite``: a database file inside a fresh temporary directory
- ``postgresql``: a uniquely named database on an existing server
"""

import secrets
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any

import sqlalchemy
import sqlalchemy.exc
import sqlalchemy_utils

from ..exceptions import DatabaseError
from .core import safe_url


class SQLiteBackend:
    """Throwaway SQLite database file in a temporary directory."""

    name = "sqlite"

    def __init__(self, lg: Any, cfg: Any) -> None:
        self._lg = lg
        self._cfg = cfg
        self._dir: Path | None = None
        self._url: str | None = None

    @property
    def url(self) -> str | None:
        return self._url

    def provision(self) -> str:
        """Create the temporary directory and return the database URL."""
        try:
            self._dir = Path(tempfile.mkdtemp(prefix="storecheck-"))
        except OSError as e:
            raise DatabaseError("cannot create database directory", error=str(e)) from e

        self._url = f"sqlite:///{self._dir / 'store.db'}"
        self._lg.debug("provisioned sqlite db", extra={"path": str(self._dir)})
        return self._url

    def engine_kwargs(self) -> dict[str, Any]:
        # Request-injection clients serve the app from a worker thread
        return {
            "connect_args": {"check_same_thread": False},
            "echo": bool(getattr(self._cfg, "echo", False)),
        }

    def destroy(self) -> None:
        """Remove the database file and its directory."""
        if self._dir is None:
            return
        shutil.rmtree(self._dir)
        self._lg.debug("removed sqlite db", extra={"path": str(self._dir)})
        self._dir = None
        self._url = None


class PostgresBackend:
    """Throwaway database named ``storecheck_<hex>`` on a PostgreSQL server."""

    name = "postgresql"

    def __init__(self, lg: Any, cfg: Any) -> None:
        server_url = getattr(cfg, "server_url", None)
        if not server_url:
            raise DatabaseError("database.server_url is required for postgresql")
        self._lg = lg
        self._cfg = cfg
        self._server_url = sqlalchemy.engine.make_url(server_url)
        self._url: sqlalchemy.engine.URL | None = None

    @property
    def url(self) -> str | None:
        if self._url is None:
            return None
        return self._url.render_as_string(hide_password=False)

    def provision(self) -> str:
        """Create a uniquely named database and return its URL."""
        start = time.monotonic()
        url = self._server_url.set(database=f"storecheck_{secrets.token_hex(4)}")
        try:
            if sqlalchemy_utils.database_exists(url):
                raise DatabaseError("database already exists", url=safe_url(url))
            sqlalchemy_utils.create_database(url)
        except sqlalchemy.exc.SQLAlchemyError as e:
            raise DatabaseError(
                "cannot create database", url=safe_url(url), error=str(e)
            ) from e

        self._url = url
        self._lg.info(
            "created db",
            extra={"url": safe_url(url), "after": time.monotonic() - start},
        )
        return url.render_as_string(hide_password=False)

    def engine_kwargs(self) -> dict[str, Any]:
        return {
            "pool_pre_ping": True,
            "echo": bool(getattr(self._cfg, "echo", False)),
        }

    def destroy(self) -> None:
        """Drop the database if it still exists."""
        if self._url is None:
            return
        if sqlalchemy_utils.database_exists(self._url):
            sqlalchemy_utils.drop_database(self._url)
        self._lg.info("dropped db", extra={"url": safe_url(self._url)})
        self._url = None


BACKENDS: dict[str, type[SQLiteBackend] | type[PostgresBackend]] = {
    SQLiteBackend.name: SQLiteBackend,
    PostgresBackend.name: PostgresBackend,
}


def make_backend(lg: Any, cfg: Any) -> SQLiteBackend | PostgresBackend:
    """
    Create the backend named by ``cfg.backend`` (sqlite when unset).

    Raises:
        DatabaseError: If the backend name is unknown
    """
    name = getattr(cfg, "backend", None) or SQLiteBackend.name
    try:
        cls = BACKENDS[name]
    except KeyError:
        raise DatabaseError(
            "unknown database backend", backend=name, known=",".join(BACKENDS)
        ) from None
    return cls(lg, cfg)

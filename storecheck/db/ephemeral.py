"""
Ephemeral database fixture.

Provisions a throwaway database for the duration of a test file, hands out
the single shared connection handle, purges every table between tests and
destroys the database at the end of the file.

Lifecycle:

    db = EphemeralDatabase(lg, cfg.database)
    uri = db.start()            # once per file
    conn = db.connect(uri)      # once per file
    ...                         # tests
    db.cleanup()                # after every test, never raises
    db.teardown()               # once per file, never raises
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import sqlalchemy
import sqlalchemy.exc
import sqlalchemy.orm

from ..exceptions import DatabaseError
from ..log import LoggerFactory
from .backends import make_backend
from .core import QueryLogger, safe_url
from .result import CleanupResult

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


class Connection:
    """
    The shared connection handle for one ephemeral database.

    Closing it mid-suite simulates a database outage: sessions can no longer
    be created and callers receive DatabaseError instead of hanging.
    """

    def __init__(
        self, lg: Any, engine: Engine, query_logger: QueryLogger | None = None
    ) -> None:
        self._lg = lg
        self._engine = engine
        self._query_logger = query_logger
        self._SessionCls = sqlalchemy.orm.sessionmaker(
            bind=engine, expire_on_commit=False
        )
        self._open = True

    @property
    def url(self) -> str:
        """URL safe for logging (no credentials)."""
        return safe_url(self._engine.url)

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def engine(self) -> Engine:
        self._check_open()
        return self._engine

    def _check_open(self) -> None:
        if not self._open:
            raise DatabaseError("connection is closed", url=self.url)

    def session(self) -> Session:
        """
        Create a new database session.

        Raises:
            DatabaseError: If the connection has been closed
        """
        self._check_open()
        return self._SessionCls()

    def tables(self) -> list[str]:
        """Names of the tables currently present in the database."""
        self._check_open()
        return sorted(sqlalchemy.inspect(self._engine).get_table_names())

    def close(self) -> None:
        """Close the connection; calling it again is a no-op."""
        if not self._open:
            return
        self._open = False
        if self._query_logger is not None:
            self._query_logger.remove()
        self._engine.dispose()
        self._lg.debug("closed connection", extra={"url": self.url})


class EphemeralDatabase:
    """
    Throwaway database for one test file.

    Example:
        >>> db = EphemeralDatabase(lg, cfg.database)
        >>> conn = db.connect(db.start())
        >>> with conn.session() as session:
        ...     session.add(Brand(name="Acme", slug="acme"))
        ...     session.commit()
        >>> db.cleanup().ok
        True
        >>> db.teardown()
    """

    def __init__(self, lg: Any, cfg: Any = None, base: Any = None) -> None:
        """
        Initialize the fixture.

        Args:
            lg: Parent logger; the fixture logs under ``/db``
            cfg: ``database`` config section, sqlite defaults when None
            base: Declarative base whose tables are created on connect,
                the storefront models when None
        """
        if lg is None:
            raise ValueError("Logger cannot be None")

        self._cfg = cfg
        self._lg = LoggerFactory.derive(lg, "db")
        self._backend = make_backend(self._lg, cfg)
        self._base = base
        self._uri: str | None = None
        self._connection: Connection | None = None

    @property
    def backend(self) -> str:
        return self._backend.name

    @property
    def uri(self) -> str | None:
        return self._uri

    @property
    def connection(self) -> Connection | None:
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.is_open

    def start(self) -> str:
        """
        Provision the database and return its connection URI.

        A second call returns the same URI.

        Raises:
            DatabaseError: If the database cannot be provisioned
        """
        if self._uri is not None:
            return self._uri

        self._uri = self._backend.provision()
        self._lg.info(
            "started ephemeral db",
            extra={"backend": self.backend, "url": safe_url(self._uri)},
        )
        return self._uri

    def _metadata(self) -> sqlalchemy.MetaData:
        if self._base is None:
            from ..store.models import Base

            self._base = Base
        return self._base.metadata

    def connect(self, uri: str | None = None) -> Connection:
        """
        Establish the shared connection and create the schema.

        An open connection is returned as is; a closed one is replaced.

        Args:
            uri: Database URI, the one returned by start() when None

        Raises:
            DatabaseError: If the database cannot be reached
        """
        if self.is_connected:
            assert self._connection is not None
            return self._connection

        uri = uri or self.start()
        start = time.monotonic()
        query_lg = LoggerFactory.derive(self._lg, "query")
        engine: Engine | None = None

        try:
            engine = sqlalchemy.create_engine(uri, **self._backend.engine_kwargs())
            query_logger = QueryLogger(
                engine, query_lg, getattr(self._cfg, "query_log_level", "trace")
            )
            query_logger.setup_callbacks()
            self._metadata().create_all(engine)
        except sqlalchemy.exc.SQLAlchemyError as e:
            if engine is not None:
                engine.dispose()
            self._lg.error(
                "failed to connect to db",
                extra={"url": safe_url(uri), "error": str(e)},
            )
            raise DatabaseError(
                "cannot connect to database", url=safe_url(uri), error=str(e)
            ) from e

        self._connection = Connection(self._lg, engine, query_logger)
        self._lg.debug(
            "connected",
            extra={"url": safe_url(uri), "after": time.monotonic() - start},
        )
        return self._connection

    def cleanup(self) -> CleanupResult:
        """
        Delete all rows from every table.

        Tables are purged children first. A failure on one table is recorded
        and the remaining tables are still purged. Skipped when there is no
        open connection. Never raises.
        """
        if not self.is_connected:
            return CleanupResult.skip()

        assert self._connection is not None
        engine = self._connection.engine
        result = CleanupResult()

        metadata = sqlalchemy.MetaData()
        try:
            metadata.reflect(bind=engine)
        except sqlalchemy.exc.SQLAlchemyError as e:
            result.errors["*"] = str(e)
            return result

        for table in reversed(metadata.sorted_tables):
            try:
                with engine.begin() as conn:
                    deleted = conn.execute(table.delete()).rowcount
            except sqlalchemy.exc.SQLAlchemyError as e:
                result.errors[table.name] = str(e)
                continue
            result.purged[table.name] = max(deleted, 0)

        return result

    def teardown(self) -> None:
        """
        Close the connection if open and destroy the database.

        Tolerates a connection already closed mid-test. Never raises;
        problems are logged.
        """
        if self._connection is not None:
            self._connection.close()
            self._connection = None

        try:
            self._backend.destroy()
        except (sqlalchemy.exc.SQLAlchemyError, OSError) as e:
            self._lg.warning(
                "failed to destroy ephemeral db",
                extra={"backend": self.backend, "error": str(e)},
            )
        else:
            self._lg.debug("destroyed ephemeral db", extra={"backend": self.backend})
        self._uri = None

    def __enter__(self) -> EphemeralDatabase:
        uri = self.start()
        try:
            self.connect(uri)
        except BaseException:
            self.teardown()
            raise
        return self

    def __exit__(self, *exc: Any) -> None:
        self.teardown()

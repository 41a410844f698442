"""SQL statement runner on top of a SQLAlchemy engine.

The runner is the only place that talks to a live server.  It executes
one statement per call in autocommit mode and turns every
``SQLAlchemyError`` into ``BackendExecutionError`` carrying the failing
statement.

Usage:
    from schemashift.drivers.runner import SQLRunner

    runner = SQLRunner.from_url("mysql://root@localhost/shop")
    rows = runner.query("DESCRIBE `orders`")
    runner.execute("DROP TABLE `orders`")
    runner.close()
"""

import logging
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from schemashift.errors import BackendExecutionError

logger = logging.getLogger(__name__)

# Scheme aliases -> SQLAlchemy URL with an explicit DBAPI driver
URL_SCHEMES = {
    "postgres://": "postgresql+psycopg://",
    "postgresql://": "postgresql+psycopg://",
    "mysql://": "mysql+mysqlconnector://",
    "mariadb://": "mariadb+mysqlconnector://",
}


def normalize_url(dsn: str) -> str:
    """Pin plain scheme aliases to the DBAPI drivers schemashift ships with.

    Example:
        >>> normalize_url("postgres://u@h/db")
        'postgresql+psycopg://u@h/db'
    """
    for alias, scheme in URL_SCHEMES.items():
        if dsn.startswith(alias):
            return scheme + dsn[len(alias) :]
    return dsn


def build_url(dsn: str, username: str | None = None, password: str | None = None) -> URL:
    """Parse *dsn* and apply credentials given separately from it.

    Raises:
        sqlalchemy.exc.ArgumentError: *dsn* is not a valid URL.
    """
    url = make_url(normalize_url(dsn))
    if username is not None:
        url = url.set(username=username)
    if password is not None:
        url = url.set(password=password)
    return url


def create_engine_pooled(url: str | URL, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine with connection pooling.

    Default pool settings for server backends:

    - ``pool_size=5``: Reasonable default for schema work.
    - ``max_overflow=10``: Allow burst connections.
    - ``pool_recycle=300``: Recycle connections every 5 minutes.

    ``pool_pre_ping=True`` applies to every backend.  SQLite keeps its
    own pool class, which rejects the sizing arguments.

    Args:
        url: SQLAlchemy URL.
        **kwargs: Forwarded to ``create_engine``; override the defaults.
    """
    url = make_url(url)
    defaults: dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": False,
    }
    if url.get_backend_name() != "sqlite":
        defaults.update({"pool_size": 5, "max_overflow": 10, "pool_recycle": 300})
    # Caller kwargs override defaults
    merged = {**defaults, **kwargs}
    return create_engine(url, **merged)


class SQLRunner:
    """Executes SQL statements and queries against one engine.

    Args:
        engine: A SQLAlchemy engine.  The runner owns it and disposes it on
            ``close()``.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(
        cls,
        dsn: str,
        username: str | None = None,
        password: str | None = None,
        **engine_kwargs: Any,
    ) -> "SQLRunner":
        """Build a runner for a connection URL."""
        return cls(create_engine_pooled(build_url(dsn, username, password), **engine_kwargs))

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def backend_name(self) -> str:
        """SQLAlchemy backend name, e.g. ``mysql`` or ``sqlite``."""
        return self._engine.url.get_backend_name()

    def execute(self, statement: str, params: dict[str, Any] | None = None) -> int:
        """Execute a statement and return the affected row count.

        Raises:
            BackendExecutionError: The backend rejected the statement.
        """
        logger.debug("Executing: %s", statement)
        try:
            with self._engine.connect() as conn:
                conn = conn.execution_options(isolation_level="AUTOCOMMIT")
                result = _run(conn, statement, params)
                return max(result.rowcount, 0)
        except SQLAlchemyError as e:
            raise BackendExecutionError(
                f"Statement failed: {e}", statement=statement
            ) from e

    def query(
        self, statement: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Run a query and return rows as dicts with lowercased keys.

        Raises:
            BackendExecutionError: The backend rejected the query.
        """
        logger.debug("Querying: %s", statement)
        try:
            with self._engine.connect() as conn:
                result = _run(conn, statement, params)
                return [
                    {str(key).lower(): value for key, value in row.items()}
                    for row in result.mappings()
                ]
        except SQLAlchemyError as e:
            raise BackendExecutionError(
                f"Query failed: {e}", statement=statement
            ) from e

    def query_column(
        self, statement: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        """Run a query and return the first column of every row."""
        return [next(iter(row.values())) for row in self.query(statement, params) if row]

    def close(self) -> None:
        """Dispose the engine and its connection pool."""
        self._engine.dispose()


def _run(conn: Any, statement: str, params: dict[str, Any] | None) -> Any:
    # Without parameters the statement is passed through verbatim, so
    # colons inside literals are never taken for bind markers.
    if params:
        return conn.execute(text(statement), params)
    return conn.exec_driver_sql(statement)

"""SQL server driver.

Composes a ``Dialect`` (type codec, quoting, catalog queries) with an
``SQLRunner`` (statement execution) and applies the driver-wide error
conventions:

- reads catch ``BackendExecutionError``, log a warning and return ``None``
- writes let ``BackendExecutionError`` propagate
- operations the dialect does not support log at DEBUG and return
  ``None`` or ``False``

Usage:
    from schemashift.dialects import MySQLDialect
    from schemashift.drivers.runner import SQLRunner
    from schemashift.drivers.sql import SQLDriver

    driver = SQLDriver(SQLRunner.from_url("mysql://root@localhost"), MySQLDialect())
    table = driver.get_table("shop", "default", "orders")
    driver.set_table("archive", "default", table)
    driver.close()
"""

import logging

from schemashift.dialects.base import Capability, Dialect
from schemashift.drivers.runner import SQLRunner
from schemashift.errors import BackendExecutionError
from schemashift.schema.comparator import diff_columns
from schemashift.schema.ddl import alter_table_sql, create_table_sql
from schemashift.schema.models import Table

logger = logging.getLogger(__name__)


class SQLDriver:
    """Driver for MySQL, SQLite and PostgreSQL servers.

    Args:
        runner: Executes statements against the server.
        dialect: The server's dialect.

    Example:
        with SQLDriver(runner, SQLiteDialect()) as driver:
            print(driver.list_tables("default", "default"))
    """

    def __init__(self, runner: SQLRunner, dialect: Dialect) -> None:
        self._runner = runner
        self._dialect = dialect

    def __enter__(self) -> "SQLDriver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def capabilities(self) -> frozenset[Capability]:
        return self._dialect.capabilities

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_databases(self) -> list[str] | None:
        if Capability.DATABASES not in self.capabilities:
            logger.debug("%s: listing databases is not supported", self._dialect.name)
            return None
        try:
            return self._dialect.list_databases(self._runner)
        except BackendExecutionError as e:
            logger.warning("Failed to list databases: %s", e)
            return None

    def list_schemas(self, database: str) -> list[str] | None:
        if Capability.SCHEMAS not in self.capabilities:
            logger.debug("%s: listing schemas is not supported", self._dialect.name)
            return None
        try:
            return self._dialect.list_schemas(self._runner, database)
        except BackendExecutionError as e:
            logger.warning("Failed to list schemas of %s: %s", database, e)
            return None

    def list_tables(self, database: str, schema: str) -> list[str] | None:
        try:
            return self._dialect.list_tables(self._runner, database, schema)
        except BackendExecutionError as e:
            logger.warning("Failed to list tables of %s.%s: %s", database, schema, e)
            return None

    def get_table(self, database: str, schema: str, table: str) -> Table | None:
        """Introspect a table.  Type decoding errors propagate."""
        try:
            return self._dialect.describe_table(self._runner, database, schema, table)
        except BackendExecutionError as e:
            logger.warning("Failed to read table %s: %s", table, e)
            return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def plan_table(self, database: str, schema: str, table: Table) -> str | None:
        """Return the statement ``set_table`` would run, without running it.

        Returns:
            A CREATE TABLE statement if the table does not exist, an ALTER
            TABLE statement if it differs, or ``None`` if it already
            matches.

        Raises:
            MissingTypeError: A column to be written has no type.
        """
        ref = self._dialect.table_ref(database, schema, table.name or "")
        current = self.get_table(database, schema, table.name or "")
        if current is None:
            return create_table_sql(self._dialect, ref, table)
        return alter_table_sql(self._dialect, ref, diff_columns(current, table))

    def set_table(
        self, database: str, schema: str, table: Table, force: bool = False
    ) -> bool:
        statement = self.plan_table(database, schema, table)
        if statement is None:
            logger.debug("Table %s is up to date", table.name)
            return True
        logger.info("Applying DDL to %s", table.name)
        self._runner.execute(statement)
        return True

    def create_database(self, database: str) -> bool:
        return self._run_optional(self._dialect.create_database_sql(database), "create database")

    def create_schema(self, database: str, schema: str) -> bool:
        return self._run_optional(
            self._dialect.create_schema_sql(database, schema), "create schema"
        )

    def drop_database(self, database: str) -> bool:
        return self._run_optional(self._dialect.drop_database_sql(database), "drop database")

    def drop_schema(self, database: str, schema: str) -> bool:
        return self._run_optional(
            self._dialect.drop_schema_sql(database, schema), "drop schema"
        )

    def drop_table(self, database: str, schema: str, table: str) -> bool:
        return self._run_optional(
            self._dialect.drop_table_sql(database, schema, table), "drop table"
        )

    def close(self) -> None:
        self._runner.close()

    def _run_optional(self, statement: str | None, action: str) -> bool:
        if statement is None:
            logger.debug("%s: %s is not supported here", self._dialect.name, action)
            return False
        self._runner.execute(statement)
        return True

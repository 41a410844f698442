"""Driver protocol definition.

Defines the ``Driver`` Protocol every schema backend implements: SQL
servers, JSON snapshot files and template renderers.

A driver addresses tables by ``(database, schema, table)``.  Backends
without a database or schema level accept the synthetic names
``DATABASE_DEFAULT`` and ``SCHEMA_DEFAULT``.

Return value conventions:

- Listing and reading return ``None`` when the operation is unsupported
  or the backend failed (the failure is logged at WARNING).
- Writes return ``True`` on success and ``False`` when the operation is
  unsupported.  A backend failure raises ``BackendExecutionError``.
- ``capabilities`` tells callers up front which of these are supported.

Usage:
    from schemashift.drivers.base import Driver, DATABASE_DEFAULT, SCHEMA_DEFAULT

    def copy_one(source: Driver, dest: Driver, name: str) -> None:
        table = source.get_table(DATABASE_DEFAULT, SCHEMA_DEFAULT, name)
        if table is not None:
            dest.set_table(DATABASE_DEFAULT, SCHEMA_DEFAULT, table)
"""

from typing import Protocol

from schemashift.dialects.base import DATABASE_DEFAULT, SCHEMA_DEFAULT, Capability
from schemashift.schema.models import Table

__all__ = ["DATABASE_DEFAULT", "SCHEMA_DEFAULT", "Capability", "Driver"]


class Driver(Protocol):
    """Schema backend interface that all drivers must implement."""

    @property
    def capabilities(self) -> frozenset[Capability]:
        """The operations this driver supports."""
        ...

    def list_databases(self) -> list[str] | None:
        """Names of all databases, or ``None``."""
        ...

    def list_schemas(self, database: str) -> list[str] | None:
        """Names of all schemas in *database*, or ``None``."""
        ...

    def list_tables(self, database: str, schema: str) -> list[str] | None:
        """Names of all tables in *database*.*schema*, or ``None``."""
        ...

    def get_table(self, database: str, schema: str, table: str) -> Table | None:
        """Read a table definition.

        Returns:
            The table, or ``None`` if it does not exist, reading is
            unsupported, or the backend failed.

        Raises:
            UnknownTypeError: A column has an unrecognized native type.
            UnsupportedTypeError: A column has a recognized but unhandled
                native type.
        """
        ...

    def set_table(
        self, database: str, schema: str, table: Table, force: bool = False
    ) -> bool:
        """Make the stored table match *table*.

        Creates the table if it is missing.  Otherwise applies the column
        difference; writing an identical table is a no-op.

        Args:
            force: Reserved for destructive operations beyond dropping
                columns.  Advisory for all current drivers.

        Returns:
            ``True`` on success, ``False`` if writing is unsupported.

        Raises:
            MissingTypeError: A column to be written has no type.
            BackendExecutionError: The backend failed.
        """
        ...

    def create_database(self, database: str) -> bool: ...

    def create_schema(self, database: str, schema: str) -> bool: ...

    def drop_database(self, database: str) -> bool: ...

    def drop_schema(self, database: str, schema: str) -> bool: ...

    def drop_table(self, database: str, schema: str, table: str) -> bool: ...

    def close(self) -> None:
        """Release connections and other resources."""
        ...

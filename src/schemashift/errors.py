"""Exception hierarchy for schemashift.

Decode, encode and diff errors are raised immediately and never
recovered from.  Backend failures are normalized at the driver boundary:
read operations return ``None`` and write operations raise
``BackendExecutionError``.
"""

from __future__ import annotations


class SchemaShiftError(Exception):
    """Base class for errors raised by schemashift."""


class UnknownTypeError(SchemaShiftError):
    """Raised when an introspected type name is not in any lookup table."""

    def __init__(self, type_name: str, dialect: str | None = None) -> None:
        self.type_name = type_name
        self.dialect = dialect
        where = f" for dialect {dialect}" if dialect else ""
        super().__init__(f"Type {type_name} is not known{where}")


class UnsupportedTypeError(SchemaShiftError):
    """Raised for recognized types that have no mapping.

    Covers both directions: a native type that is deliberately not decoded
    (``BIT``, ``SET``, ``YEAR``) and a canonical type variant that a dialect
    cannot encode.
    """

    def __init__(self, type_name: str, dialect: str | None = None) -> None:
        self.type_name = type_name
        self.dialect = dialect
        where = f" by dialect {dialect}" if dialect else ""
        super().__init__(f"Type {type_name} is not supported{where}")


class MissingTypeError(SchemaShiftError):
    """Raised when a column without a type reaches DDL synthesis."""

    def __init__(self, column_name: str | None) -> None:
        self.column_name = column_name
        super().__init__(f"Column {column_name!r} has no type")


class DriverConfigurationError(SchemaShiftError):
    """Raised when a driver is constructed with a missing or invalid option."""


class BackendExecutionError(SchemaShiftError):
    """Raised when the backend fails to execute a write operation."""

    def __init__(self, message: str, statement: str | None = None) -> None:
        self.statement = statement
        super().__init__(message)

"""SQL dialects: type codecs, quoting and catalog queries per backend."""

from schemashift.dialects.base import (
    DATABASE_DEFAULT,
    SCHEMA_DEFAULT,
    Capability,
    Dialect,
    TypeSpec,
    parse_quoted_list,
    parse_type_params,
    strip_delimiters,
)
from schemashift.dialects.mysql import MySQLDialect
from schemashift.dialects.postgres import PostgreSQLDialect
from schemashift.dialects.sqlite import SQLiteDialect

# SQLAlchemy backend name -> dialect class
DIALECTS: dict[str, type] = {
    "mysql": MySQLDialect,
    "mariadb": MySQLDialect,
    "sqlite": SQLiteDialect,
    "postgresql": PostgreSQLDialect,
}


def get_dialect(backend_name: str) -> Dialect:
    """Return a dialect instance for a SQLAlchemy backend name.

    Raises:
        KeyError: No dialect handles the backend.
    """
    return DIALECTS[backend_name]()


__all__ = [
    "DATABASE_DEFAULT",
    "DIALECTS",
    "SCHEMA_DEFAULT",
    "Capability",
    "Dialect",
    "MySQLDialect",
    "PostgreSQLDialect",
    "SQLiteDialect",
    "TypeSpec",
    "get_dialect",
    "parse_quoted_list",
    "parse_type_params",
    "strip_delimiters",
]

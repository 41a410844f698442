"""DDL synthesis -- turn tables and diffs into CREATE and ALTER statements.

Statements are built from dialect hooks (quoting, type encoding, the
sequence keyword, table suffix and column modification clauses), so the
same code produces MySQL, SQLite and PostgreSQL DDL.

A column definition always has the shape::

    <quoted name> <TYPE>[ PRIMARY KEY][ <sequence keyword>][ NOT NULL][ DEFAULT <literal>]

Usage:
    from schemashift.schema.ddl import create_table_sql, alter_table_sql

    ref = dialect.table_ref("shop", "default", "orders")
    sql = create_table_sql(dialect, ref, table)

    diff = diff_columns(current, desired)
    sql = alter_table_sql(dialect, ref, diff)  # None if nothing changed
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from schemashift.errors import MissingTypeError
from schemashift.schema.comparator import TableDiff
from schemashift.schema.models import Column, Table

if TYPE_CHECKING:
    from schemashift.dialects.base import Dialect


def require_types(columns: Iterable[Column]) -> None:
    """Raise ``MissingTypeError`` for the first column without a type."""
    for column in columns:
        if column.type is None:
            raise MissingTypeError(column.name)


def column_definition(dialect: "Dialect", column: Column) -> str:
    """Render a single column definition.

    Raises:
        MissingTypeError: The column has no type.
    """
    if column.type is None:
        raise MissingTypeError(column.name)

    parts = [
        dialect.quote_identifier(column.name or ""),
        dialect.encode_type(column.type),
    ]
    if column.primary:
        parts.append("PRIMARY KEY")
    if column.sequence:
        parts.append(dialect.sequence_keyword)
    if not column.nullable:
        parts.append("NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {dialect.quote_literal(column.default)}")
    return " ".join(parts)


def create_table_sql(dialect: "Dialect", table_ref: str, table: Table) -> str:
    """Build a CREATE TABLE statement listing every column in order.

    Raises:
        MissingTypeError: Any column has no type.
    """
    require_types(table.columns)
    definitions = ",\n".join(column_definition(dialect, c) for c in table.columns)
    return f"CREATE TABLE {table_ref} (\n{definitions}\n){dialect.create_table_suffix}"


def alter_table_sql(dialect: "Dialect", table_ref: str, diff: TableDiff) -> str | None:
    """Build one ALTER TABLE statement applying *diff*.

    Clauses are emitted as all drops, then all adds, then all
    modifications, each group in diff order.

    Returns:
        The statement, or ``None`` if the diff is empty.

    Raises:
        MissingTypeError: An added or changed column has no type.  Checked
            before any clause is rendered.
    """
    if diff.is_empty:
        return None

    require_types(diff.added)
    require_types(new for _old, new in diff.changed)

    clauses: list[str] = []
    for column in diff.dropped:
        clauses.append(f"DROP COLUMN {dialect.quote_identifier(column.name or '')}")
    for column in diff.added:
        clauses.append(f"ADD COLUMN {column_definition(dialect, column)}")
    for old, new in diff.changed:
        clauses.extend(dialect.modify_clauses(old, new))

    return f"ALTER TABLE {table_ref} " + ", ".join(clauses)

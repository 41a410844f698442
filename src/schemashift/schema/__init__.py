"""Schema model, column diffing and DDL synthesis.

Usage:
    >>> from schemashift.schema import Table, Column, Integer, diff_columns
"""

from schemashift.schema.comparator import TableDiff, diff_columns
from schemashift.schema.models import Column, Table
from schemashift.schema.types import (
    Boolean,
    ColumnType,
    DateTime,
    Decimal,
    Enum,
    Float,
    Integer,
    String,
    parse_column_type,
)

__all__ = [
    "Boolean",
    "Column",
    "ColumnType",
    "DateTime",
    "Decimal",
    "Enum",
    "Float",
    "Integer",
    "String",
    "Table",
    "TableDiff",
    "diff_columns",
    "parse_column_type",
]

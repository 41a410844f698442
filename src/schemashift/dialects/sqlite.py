"""SQLite dialect.

SQLite has a single database per file and no schemas, so database and
schema listings are unsupported and their names are ignored when
building table references.

Introspection reads ``PRAGMA table_info`` and the ``sqlite_master``
catalog.  Declared type names are normalized through a synonym table
(``INT8`` -> ``BIGINT``, ``NVARCHAR`` -> ``VARCHAR``, ...) before lookup.
An unsigned integer is written with a leading ``UNSIGNED`` qualifier,
e.g. ``UNSIGNED INTEGER``.

SQLite does not support ``ALTER TABLE ... MODIFY``; changing an existing
column therefore fails at execution time and surfaces as a
``BackendExecutionError``.
"""

from typing import TYPE_CHECKING, Any

from schemashift.dialects.base import (
    Capability,
    parse_int_params,
    parse_quoted_list,
    parse_type_params,
    quote_with,
    strip_delimiters,
)
from schemashift.dialects.mysql import (
    DATETIME_FLAGS,
    STRING_LENGTHS,
    UNSUPPORTED_TYPES,
    decode_decimal,
    decode_sized_string,
    encode_datetime,
    encode_string,
)
from schemashift.errors import UnknownTypeError, UnsupportedTypeError
from schemashift.schema.ddl import column_definition
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
)

if TYPE_CHECKING:
    from schemashift.drivers.runner import SQLRunner


TYPE_SYNONYMS = {
    "INT2": "SMALLINT",
    "INT4": "INTEGER",
    "INT8": "BIGINT",
    "TINY INT": "TINYINT",
    "SMALL INT": "SMALLINT",
    "MEDIUM INT": "MEDIUMINT",
    "BIG INT": "BIGINT",
    "INT": "INTEGER",
    "NCHAR": "CHAR",
    "NATIVE CHARACTER": "CHAR",
    "NVARCHAR": "VARCHAR",
    "VARYING CHARACTER": "VARCHAR",
    "CHARACTER": "CHAR",
    "DOUBLE PRECISION": "DOUBLE",
    "REAL": "DOUBLE",
}

INTEGER_SIZES = {
    "TINYINT": 1,
    "SMALLINT": 2,
    "MEDIUMINT": 3,
    "INTEGER": 4,
    "BIGINT": 8,
}

INTEGER_NAMES = {size: name for name, size in INTEGER_SIZES.items()}

FLOAT_SIZES = {
    "FLOAT": 4,
    "DOUBLE": 8,
}

SIZED_STRINGS = ("CHAR", "VARCHAR", "BINARY", "VARBINARY")

_UNSIGNED_PREFIX = "UNSIGNED "


class SQLiteDialect:
    """SQLite 3."""

    name = "sqlite"
    capabilities = frozenset({Capability.LIST, Capability.READ, Capability.WRITE})
    sequence_keyword = "AUTOINCREMENT"
    create_table_suffix = ""

    def quote_identifier(self, identifier: str) -> str:
        return quote_with(identifier, "`")

    def quote_literal(self, value: Any) -> str:
        if isinstance(value, bool):
            value = int(value)
        return "'" + str(value).replace("'", "''") + "'"

    # -- type codec -----------------------------------------------------

    def decode_type(self, raw: str) -> ColumnType:
        """Decode a declared column type.

        Examples:
            >>> SQLiteDialect().decode_type("UNSIGNED BIG INT")
            Integer(type='Integer', size=8, unsigned=True)
            >>> SQLiteDialect().decode_type("NVARCHAR(40)")
            String(type='String', length=40, variable=True, binary=False)
        """
        text = raw.strip()
        unsigned = text.upper().startswith(_UNSIGNED_PREFIX)
        if unsigned:
            text = text[len(_UNSIGNED_PREFIX) :]

        name, params, extra = parse_type_params(text)
        name = TYPE_SYNONYMS.get(name, name)
        unsigned = unsigned or "UNSIGNED" in extra.split()

        if name in INTEGER_SIZES:
            return Integer(size=INTEGER_SIZES[name], unsigned=unsigned)
        if name in SIZED_STRINGS:
            return decode_sized_string(name, params)
        if name in STRING_LENGTHS:
            return String(
                length=STRING_LENGTHS[name], variable=True, binary="BLOB" in name
            )
        if name in FLOAT_SIZES:
            return Float(size=FLOAT_SIZES[name])
        if name in ("DECIMAL", "NUMERIC"):
            return decode_decimal(params)
        if name in DATETIME_FLAGS:
            date, time, zone = DATETIME_FLAGS[name]
            return DateTime(date=date, time=time, zone=zone)
        if name == "ENUM":
            values = parse_quoted_list(params or "")
            if values is None:
                raise UnknownTypeError(raw, self.name)
            return Enum(values=values)
        if name in ("BOOL", "BOOLEAN"):
            return Boolean()
        if name in UNSUPPORTED_TYPES:
            raise UnsupportedTypeError(name, self.name)
        raise UnknownTypeError(name, self.name)

    def encode_type(self, column_type: ColumnType) -> str:
        if isinstance(column_type, Integer):
            name = INTEGER_NAMES.get(column_type.size)
            if name is None:
                name = "INTEGER" if column_type.size <= 4 else "BIGINT"
            return _UNSIGNED_PREFIX + name if column_type.unsigned else name
        if isinstance(column_type, String):
            return encode_string(column_type)
        if isinstance(column_type, Float):
            return "DOUBLE" if column_type.size > 4 else "FLOAT"
        if isinstance(column_type, Decimal):
            return f"DECIMAL({column_type.precision}, {column_type.scale})"
        if isinstance(column_type, DateTime):
            return encode_datetime(column_type)
        if isinstance(column_type, Enum):
            longest = max((len(v) for v in column_type.values), default=1)
            return f"VARCHAR({max(longest, 1)})"
        if isinstance(column_type, Boolean):
            return "UNSIGNED TINYINT(1)"
        raise UnsupportedTypeError(type(column_type).__name__, self.name)

    def modify_clauses(self, old: Column, new: Column) -> list[str]:
        return [f"MODIFY {column_definition(self, new)}"]

    # -- naming ---------------------------------------------------------

    def table_ref(self, database: str, schema: str, table: str) -> str:
        return self.quote_identifier(table)

    # -- catalog --------------------------------------------------------

    def list_databases(self, runner: "SQLRunner") -> list[str] | None:
        return None

    def list_schemas(self, runner: "SQLRunner", database: str) -> list[str] | None:
        return None

    def list_tables(
        self, runner: "SQLRunner", database: str, schema: str
    ) -> list[str] | None:
        return runner.query_column(
            "SELECT name FROM sqlite_master"
            " WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
        )

    def describe_table(
        self, runner: "SQLRunner", database: str, schema: str, table: str
    ) -> Table | None:
        rows = runner.query(f"PRAGMA table_info({self.quote_identifier(table)})")
        if not rows:
            return None

        created = runner.query_column(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = :name",
            {"name": table},
        )
        autoincrement = bool(created) and "AUTOINCREMENT" in (created[0] or "").upper()

        columns = [self.decode_column(row, autoincrement) for row in rows]
        return Table(name=table, columns=columns)

    def decode_column(self, row: dict[str, Any], autoincrement: bool = False) -> Column:
        """Build a column from one ``PRAGMA table_info`` row."""
        primary = int(row.get("pk") or 0) > 0
        return Column(
            name=row["name"],
            type=self.decode_type(row.get("type") or ""),
            nullable=not int(row.get("notnull") or 0),
            primary=primary,
            sequence=primary and autoincrement,
            default=_decode_default(row.get("dflt_value")),
        )

    # -- statements -----------------------------------------------------

    def create_database_sql(self, database: str) -> str | None:
        return None

    def create_schema_sql(self, database: str, schema: str) -> str | None:
        return None

    def drop_database_sql(self, database: str) -> str | None:
        return None

    def drop_schema_sql(self, database: str, schema: str) -> str | None:
        return None

    def drop_table_sql(self, database: str, schema: str, table: str) -> str | None:
        return f"DROP TABLE {self.table_ref(database, schema, table)}"


def _decode_default(value: Any) -> Any:
    """Unquote a ``dflt_value`` expression; ``NULL`` means no default."""
    if value is None:
        return None
    text = str(value)
    if text.upper() == "NULL":
        return None
    stripped = strip_delimiters(text, "'")
    if stripped is not None and not stripped[1]:
        return stripped[0]
    return text

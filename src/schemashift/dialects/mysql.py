"""MySQL / MariaDB dialect.

Introspection uses ``SHOW DATABASES``, ``SHOW TABLES`` and ``DESCRIBE``.
MySQL has no schema level distinct from databases, so the schema name
stands in for the database when the database is left at its default.

Type strings follow the server's ``DESCRIBE`` output, for example
``int(11) unsigned``, ``varchar(9)``, ``enum('a','b')``.
"""

import logging
from typing import TYPE_CHECKING, Any

from schemashift.dialects.base import (
    DATABASE_DEFAULT,
    SCHEMA_DEFAULT,
    Capability,
    parse_int_params,
    parse_quoted_list,
    parse_type_params,
    quote_with,
    select_string_tier,
    sized_string_sql,
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

logger = logging.getLogger(__name__)


INTEGER_SIZES = {
    "TINYINT": 1,
    "SMALLINT": 2,
    "MEDIUMINT": 3,
    "INT": 4,
    "INTEGER": 4,
    "BIGINT": 8,
}

INTEGER_NAMES = {
    1: "TINYINT",
    2: "SMALLINT",
    3: "MEDIUMINT",
    4: "INTEGER",
    8: "BIGINT",
}

FLOAT_SIZES = {
    "FLOAT": 4,
    "REAL": 8,
    "DOUBLE": 8,
    "DOUBLE PRECISION": 8,
}

STRING_LENGTHS = {
    "TINYTEXT": 255,
    "TINYBLOB": 255,
    "TEXT": 65535,
    "BLOB": 65535,
    "MEDIUMTEXT": 16777215,
    "MEDIUMBLOB": 16777215,
    "LONGTEXT": 4294967296,
    "LONGBLOB": 4294967296,
}

STRING_TIERS = (
    (255, "TINYTEXT", "TINYBLOB"),
    (65535, "TEXT", "BLOB"),
    (16777215, "MEDIUMTEXT", "MEDIUMBLOB"),
    (4294967296, "LONGTEXT", "LONGBLOB"),
)

SIZED_STRINGS = {
    # name: (variable, binary)
    "CHAR": (False, False),
    "VARCHAR": (True, False),
    "BINARY": (False, True),
    "VARBINARY": (True, True),
}

DATETIME_FLAGS = {
    # name: (date, time, zone)
    "DATETIME": (True, True, False),
    "TIMESTAMP": (True, True, True),
    "DATE": (True, False, False),
    "TIME": (False, True, False),
}

UNSUPPORTED_TYPES = {"BIT", "SET", "YEAR"}

SYSTEM_DATABASES = {"information_schema", "mysql", "performance_schema", "sys"}


# ------------------------------------------------------------------
# Type codec
# ------------------------------------------------------------------


def decode_integer(name: str, extra: str) -> Integer:
    return Integer(size=INTEGER_SIZES[name], unsigned="UNSIGNED" in extra.split())


def encode_integer(column_type: Integer) -> str:
    name = INTEGER_NAMES.get(column_type.size)
    if name is None:
        name = "INT" if column_type.size <= 4 else "BIGINT"
    return f"{name} UNSIGNED" if column_type.unsigned else name


def decode_decimal(params: str | None) -> Decimal:
    numbers = parse_int_params(params)
    if not numbers:
        return Decimal()
    scale = numbers[1] if len(numbers) > 1 else 0
    return Decimal(precision=numbers[0], scale=scale)


def decode_sized_string(name: str, params: str | None) -> String:
    variable, binary = SIZED_STRINGS[name]
    numbers = parse_int_params(params)
    length = numbers[0] if numbers else (255 if variable else 1)
    return String(length=length, variable=variable, binary=binary)


def encode_string(column_type: String, tiers=STRING_TIERS) -> str:
    """Sized form below 255 characters, otherwise the smallest text/blob tier."""
    if column_type.length < 255:
        return sized_string_sql(column_type)
    return select_string_tier(column_type, tiers)


def encode_datetime(column_type: DateTime) -> str:
    if column_type.date and column_type.time:
        return "TIMESTAMP" if column_type.zone else "DATETIME"
    return "DATE" if column_type.date else "TIME"


def encode_enum(column_type: Enum, quote_literal) -> str:
    return "ENUM(" + ",".join(quote_literal(v) for v in column_type.values) + ")"


class MySQLDialect:
    """MySQL and MariaDB.

    Identifiers are quoted with backticks.  Tables are created with
    ``ENGINE=InnoDB DEFAULT CHARSET=utf8``.
    """

    name = "mysql"
    capabilities = frozenset(
        {
            Capability.LIST,
            Capability.READ,
            Capability.WRITE,
            Capability.DATABASES,
            Capability.SCHEMAS,
        }
    )
    sequence_keyword = "AUTO_INCREMENT"
    create_table_suffix = " ENGINE=InnoDB DEFAULT CHARSET=utf8"

    # -- quoting --------------------------------------------------------

    def quote_identifier(self, identifier: str) -> str:
        return quote_with(identifier, "`")

    def quote_literal(self, value: Any) -> str:
        if isinstance(value, bool):
            value = int(value)
        text = str(value).replace("\\", "\\\\").replace("'", "''")
        return f"'{text}'"

    # -- type codec -----------------------------------------------------

    def decode_type(self, raw: str) -> ColumnType:
        """Decode a ``DESCRIBE`` type string.

        Examples:
            >>> MySQLDialect().decode_type("int(11) unsigned")
            Integer(type='Integer', size=4, unsigned=True)
            >>> MySQLDialect().decode_type("varchar(9)")
            String(type='String', length=9, variable=True, binary=False)
        """
        name, params, extra = parse_type_params(raw)

        if name in INTEGER_SIZES:
            return decode_integer(name, extra)
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
            values = parse_quoted_list(params or "", escape="\\")
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
            return encode_integer(column_type)
        if isinstance(column_type, String):
            return encode_string(column_type)
        if isinstance(column_type, Float):
            return "DOUBLE" if column_type.size > 4 else "FLOAT"
        if isinstance(column_type, Decimal):
            return f"DECIMAL({column_type.precision}, {column_type.scale})"
        if isinstance(column_type, DateTime):
            return encode_datetime(column_type)
        if isinstance(column_type, Enum):
            return encode_enum(column_type, self.quote_literal)
        if isinstance(column_type, Boolean):
            return "TINYINT(1) UNSIGNED"
        raise UnsupportedTypeError(type(column_type).__name__, self.name)

    def modify_clauses(self, old: Column, new: Column) -> list[str]:
        return [f"MODIFY {column_definition(self, new)}"]

    # -- naming ---------------------------------------------------------

    def resolve_database(self, database: str, schema: str) -> str | None:
        """Pick the database a reference targets.

        The database wins unless it is the default, then the schema, then
        neither (the connection's current database).
        """
        if database != DATABASE_DEFAULT:
            return database
        if schema != SCHEMA_DEFAULT:
            return schema
        return None

    def table_ref(self, database: str, schema: str, table: str) -> str:
        target = self.resolve_database(database, schema)
        quoted = self.quote_identifier(table)
        if target is None:
            return quoted
        return f"{self.quote_identifier(target)}.{quoted}"

    # -- catalog --------------------------------------------------------

    def list_databases(self, runner: "SQLRunner") -> list[str] | None:
        return [
            name
            for name in (_text(v) for v in runner.query_column("SHOW DATABASES"))
            if name not in SYSTEM_DATABASES
        ]

    def list_schemas(self, runner: "SQLRunner", database: str) -> list[str] | None:
        # Schemas are databases here; expose the single synthetic one
        runner.query("SHOW SCHEMAS")
        return [SCHEMA_DEFAULT]

    def list_tables(
        self, runner: "SQLRunner", database: str, schema: str
    ) -> list[str] | None:
        target = self.resolve_database(database, schema)
        statement = "SHOW TABLES"
        if target is not None:
            statement += f" IN {self.quote_identifier(target)}"
        return [_text(v) for v in runner.query_column(statement)]

    def describe_table(
        self, runner: "SQLRunner", database: str, schema: str, table: str
    ) -> Table | None:
        rows = runner.query(f"DESCRIBE {self.table_ref(database, schema, table)}")
        if not rows:
            return None
        return Table(name=table, columns=[self.decode_column(row) for row in rows])

    def decode_column(self, row: dict[str, Any]) -> Column:
        """Build a column from one ``DESCRIBE`` row (lowercased keys).

        Example:
            >>> MySQLDialect().decode_column({
            ...     "field": "Id", "type": "int(11)", "null": "NO",
            ...     "key": "PRI", "default": None, "extra": "auto_increment",
            ... }).sequence
            True
        """
        key = _text(row.get("key")) or ""
        default = row.get("default")
        if isinstance(default, bytes):
            default = default.decode()
        if default == "NULL":
            default = None
        return Column(
            name=_text(row["field"]),
            type=self.decode_type(_text(row["type"])),
            nullable=_text(row.get("null")) != "NO",
            primary=key == "PRI",
            unique=key == "UNI",
            sequence="AUTO_INCREMENT" in (_text(row.get("extra")) or "").upper(),
            default=default,
        )

    # -- statements -----------------------------------------------------

    def create_database_sql(self, database: str) -> str | None:
        if database == DATABASE_DEFAULT:
            return None
        return f"CREATE DATABASE {self.quote_identifier(database)}"

    def create_schema_sql(self, database: str, schema: str) -> str | None:
        target = self.resolve_database(database, schema)
        if target is None:
            return None
        return f"CREATE SCHEMA IF NOT EXISTS {self.quote_identifier(target)}"

    def drop_database_sql(self, database: str) -> str | None:
        if database == DATABASE_DEFAULT:
            return None
        return f"DROP DATABASE {self.quote_identifier(database)}"

    def drop_schema_sql(self, database: str, schema: str) -> str | None:
        return None

    def drop_table_sql(self, database: str, schema: str, table: str) -> str | None:
        return f"DROP TABLE {self.table_ref(database, schema, table)}"


def _text(value: Any) -> Any:
    """Some MySQL drivers return catalog strings as bytes."""
    if isinstance(value, (bytes, bytearray)):
        return value.decode()
    return value

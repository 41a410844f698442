"""PostgreSQL dialect.

Columns are introspected through ``pg_catalog`` so that
``format_type()`` reports full type strings such as
``character varying(40)`` or ``timestamp(3) with time zone``.  Primary
key and unique flags come from ``information_schema`` constraints.

A connection is bound to one database, so table operations always target
the connected database and only the schema qualifies table references.
The default schema maps to ``public``.

Integers are always signed here; the unsigned flag is dropped on encode.
"""

import re
from typing import TYPE_CHECKING, Any

from schemashift.dialects.base import (
    DATABASE_DEFAULT,
    SCHEMA_DEFAULT,
    Capability,
    parse_int_params,
    quote_with,
)
from schemashift.errors import UnknownTypeError, UnsupportedTypeError
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


DEFAULT_SCHEMA_NAME = "public"

# Longest VARCHAR(n) PostgreSQL accepts; longer strings become TEXT
VARCHAR_MAX_LENGTH = 10485760

# Length reported for unbounded TEXT and BYTEA columns
TEXT_LENGTH = 1073741823

INTEGER_SIZES = {
    "SMALLINT": 2,
    "INTEGER": 4,
    "BIGINT": 8,
}

FLOAT_SIZES = {
    "REAL": 4,
    "DOUBLE PRECISION": 8,
}

DATETIME_FLAGS = {
    "TIMESTAMP WITH TIME ZONE": (True, True, True),
    "TIMESTAMP WITHOUT TIME ZONE": (True, True, False),
    "DATE": (True, False, False),
    "TIME WITHOUT TIME ZONE": (False, True, False),
    "TIME WITH TIME ZONE": (False, True, True),
}

UNSUPPORTED_TYPES = {"BIT", "BIT VARYING", "INTERVAL", "MONEY"}

BOOLEAN_DEFAULTS = {"true": "1", "false": "0"}

_PG_TYPE_PATTERN = re.compile(r"^(?P<head>[^(]*)(?:\((?P<params>[^)]*)\))?(?P<tail>.*)$")
_CAST_LITERAL_PATTERN = re.compile(r"^'(?P<value>(?:[^']|'')*)'(?:::[\w\s\"]+)?$")

_COLUMNS_QUERY = """
    SELECT
        a.attname AS name,
        format_type(a.atttypid, a.atttypmod) AS type,
        a.attnotnull AS notnull,
        pg_get_expr(d.adbin, d.adrelid) AS dflt_value,
        a.attidentity AS identity
    FROM pg_attribute a
    JOIN pg_class c ON c.oid = a.attrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    LEFT JOIN pg_attrdef d ON d.adrelid = a.attrelid AND d.adnum = a.attnum
    WHERE n.nspname = :schema
      AND c.relname = :table
      AND c.relkind IN ('r', 'p')
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""

_KEYS_QUERY = """
    SELECT
        kcu.column_name,
        tc.constraint_type
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    WHERE tc.table_schema = :schema
      AND tc.table_name = :table
      AND tc.constraint_type IN ('PRIMARY KEY', 'UNIQUE')
"""


class PostgreSQLDialect:
    """PostgreSQL 10 and later (identity columns)."""

    name = "postgresql"
    capabilities = frozenset(
        {
            Capability.LIST,
            Capability.READ,
            Capability.WRITE,
            Capability.DATABASES,
            Capability.SCHEMAS,
        }
    )
    sequence_keyword = "GENERATED BY DEFAULT AS IDENTITY"
    create_table_suffix = ""

    def quote_identifier(self, identifier: str) -> str:
        return quote_with(identifier, '"')

    def quote_literal(self, value: Any) -> str:
        if isinstance(value, bool):
            return "'true'" if value else "'false'"
        return "'" + str(value).replace("'", "''") + "'"

    # -- type codec -----------------------------------------------------

    def decode_type(self, raw: str) -> ColumnType:
        """Decode a ``format_type()`` string.

        Examples:
            >>> PostgreSQLDialect().decode_type("character varying(40)")
            String(type='String', length=40, variable=True, binary=False)
            >>> PostgreSQLDialect().decode_type("timestamp(3) with time zone")
            DateTime(type='DateTime', date=True, time=True, zone=True)
        """
        match = _PG_TYPE_PATTERN.match(raw.strip())
        head = match.group("head") if match else raw
        params = match.group("params") if match else None
        tail = match.group("tail") if match else ""
        name = " ".join(f"{head} {tail}".split()).upper()

        if name in INTEGER_SIZES:
            return Integer(size=INTEGER_SIZES[name])
        if name in ("CHARACTER VARYING", "VARCHAR"):
            numbers = parse_int_params(params)
            return String(length=numbers[0] if numbers else TEXT_LENGTH)
        if name in ("CHARACTER", "CHAR", "BPCHAR"):
            numbers = parse_int_params(params)
            return String(length=numbers[0] if numbers else 1, variable=False)
        if name == "TEXT":
            return String(length=TEXT_LENGTH)
        if name == "BYTEA":
            return String(length=TEXT_LENGTH, binary=True)
        if name in FLOAT_SIZES:
            return Float(size=FLOAT_SIZES[name])
        if name in ("NUMERIC", "DECIMAL"):
            numbers = parse_int_params(params)
            if not numbers:
                return Decimal()
            return Decimal(
                precision=numbers[0], scale=numbers[1] if len(numbers) > 1 else 0
            )
        if name in DATETIME_FLAGS:
            date, time, zone = DATETIME_FLAGS[name]
            return DateTime(date=date, time=time, zone=zone)
        if name == "BOOLEAN":
            return Boolean()
        if name in UNSUPPORTED_TYPES:
            raise UnsupportedTypeError(name, self.name)
        raise UnknownTypeError(name, self.name)

    def encode_type(self, column_type: ColumnType) -> str:
        if isinstance(column_type, Integer):
            if column_type.size <= 2:
                return "SMALLINT"
            return "INTEGER" if column_type.size <= 4 else "BIGINT"
        if isinstance(column_type, String):
            if column_type.binary:
                return "BYTEA"
            if column_type.length > VARCHAR_MAX_LENGTH:
                return "TEXT"
            base = "VARCHAR" if column_type.variable else "CHAR"
            return f"{base}({column_type.length})"
        if isinstance(column_type, Float):
            return "DOUBLE PRECISION" if column_type.size > 4 else "REAL"
        if isinstance(column_type, Decimal):
            return f"DECIMAL({column_type.precision}, {column_type.scale})"
        if isinstance(column_type, DateTime):
            if column_type.date and column_type.time:
                return "TIMESTAMP WITH TIME ZONE" if column_type.zone else "TIMESTAMP"
            return "DATE" if column_type.date else "TIME"
        if isinstance(column_type, Enum):
            longest = max((len(v) for v in column_type.values), default=1)
            return f"VARCHAR({max(longest, 1)})"
        if isinstance(column_type, Boolean):
            return "BOOLEAN"
        raise UnsupportedTypeError(type(column_type).__name__, self.name)

    def modify_clauses(self, old: Column, new: Column) -> list[str]:
        """``ALTER COLUMN`` clauses: type first, then nullability, default, identity."""
        name = self.quote_identifier(new.name or "")
        clauses = [f"ALTER COLUMN {name} TYPE {self.encode_type(new.type)}"]

        if old.nullable != new.nullable:
            action = "DROP NOT NULL" if new.nullable else "SET NOT NULL"
            clauses.append(f"ALTER COLUMN {name} {action}")

        if old.default != new.default:
            if new.default is None:
                clauses.append(f"ALTER COLUMN {name} DROP DEFAULT")
            else:
                literal = self.quote_literal(new.default)
                clauses.append(f"ALTER COLUMN {name} SET DEFAULT {literal}")

        if old.sequence != new.sequence:
            if new.sequence:
                clauses.append(f"ALTER COLUMN {name} ADD {self.sequence_keyword}")
            else:
                clauses.append(f"ALTER COLUMN {name} DROP IDENTITY IF EXISTS")

        return clauses

    # -- naming ---------------------------------------------------------

    def schema_name(self, schema: str) -> str:
        return DEFAULT_SCHEMA_NAME if schema == SCHEMA_DEFAULT else schema

    def table_ref(self, database: str, schema: str, table: str) -> str:
        return (
            f"{self.quote_identifier(self.schema_name(schema))}"
            f".{self.quote_identifier(table)}"
        )

    # -- catalog --------------------------------------------------------

    def list_databases(self, runner: "SQLRunner") -> list[str] | None:
        return runner.query_column(
            "SELECT datname FROM pg_database WHERE NOT datistemplate ORDER BY datname"
        )

    def list_schemas(self, runner: "SQLRunner", database: str) -> list[str] | None:
        return runner.query_column(
            """
            SELECT schema_name
            FROM information_schema.schemata
            WHERE schema_name <> 'information_schema'
              AND schema_name NOT LIKE 'pg\\_%'
            ORDER BY schema_name
            """
        )

    def list_tables(
        self, runner: "SQLRunner", database: str, schema: str
    ) -> list[str] | None:
        return runner.query_column(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = :schema
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
            """,
            {"schema": self.schema_name(schema)},
        )

    def describe_table(
        self, runner: "SQLRunner", database: str, schema: str, table: str
    ) -> Table | None:
        params = {"schema": self.schema_name(schema), "table": table}
        rows = runner.query(_COLUMNS_QUERY, params)
        if not rows:
            return None

        primary: set[str] = set()
        unique: set[str] = set()
        for row in runner.query(_KEYS_QUERY, params):
            target = primary if row["constraint_type"] == "PRIMARY KEY" else unique
            target.add(row["column_name"])

        columns = []
        for row in rows:
            column = self.decode_column(row)
            column.primary = column.name in primary
            column.unique = column.name in unique
            columns.append(column)
        return Table(name=table, columns=columns)

    def decode_column(self, row: dict[str, Any]) -> Column:
        """Build a column from one catalog row (without key flags)."""
        default = row.get("dflt_value")
        serial = isinstance(default, str) and default.startswith("nextval(")
        identity = (row.get("identity") or "") in ("a", "d")
        column_type = self.decode_type(row["type"])
        default = None if serial else _decode_default(default)
        if isinstance(column_type, Boolean) and default is not None:
            default = BOOLEAN_DEFAULTS.get(default.lower(), default)
        return Column(
            name=row["name"],
            type=column_type,
            nullable=not row.get("notnull"),
            sequence=identity or serial,
            default=default,
        )

    # -- statements -----------------------------------------------------

    def create_database_sql(self, database: str) -> str | None:
        if database == DATABASE_DEFAULT:
            return None
        return f"CREATE DATABASE {self.quote_identifier(database)}"

    def create_schema_sql(self, database: str, schema: str) -> str | None:
        if schema == SCHEMA_DEFAULT:
            return None
        return f"CREATE SCHEMA IF NOT EXISTS {self.quote_identifier(schema)}"

    def drop_database_sql(self, database: str) -> str | None:
        if database == DATABASE_DEFAULT:
            return None
        return f"DROP DATABASE {self.quote_identifier(database)}"

    def drop_schema_sql(self, database: str, schema: str) -> str | None:
        if schema == SCHEMA_DEFAULT:
            return None
        return f"DROP SCHEMA {self.quote_identifier(schema)}"

    def drop_table_sql(self, database: str, schema: str, table: str) -> str | None:
        return f"DROP TABLE {self.table_ref(database, schema, table)}"


def _decode_default(expression: str | None) -> str | None:
    """Turn a default expression like ``'foo'::character varying`` into ``foo``."""
    if expression is None or expression.upper() == "NULL":
        return None
    match = _CAST_LITERAL_PATTERN.match(expression)
    if match:
        return match.group("value").replace("''", "'")
    return expression

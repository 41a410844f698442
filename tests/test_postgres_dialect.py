"""Tests for the PostgreSQL dialect: format_type() codec, defaults and ALTER COLUMN."""

from unittest.mock import MagicMock

import pytest

from schemashift.dialects.postgres import TEXT_LENGTH, PostgreSQLDialect
from schemashift.errors import UnknownTypeError, UnsupportedTypeError
from schemashift.schema.models import Column
from schemashift.schema.types import (
    Boolean,
    DateTime,
    Decimal,
    Enum,
    Float,
    Integer,
    String,
)


@pytest.fixture
def dialect() -> PostgreSQLDialect:
    return PostgreSQLDialect()


class TestDecode:
    """format_type() strings to canonical types."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("smallint", Integer(size=2)),
            ("integer", Integer(size=4)),
            ("bigint", Integer(size=8)),
            ("character varying(40)", String(length=40)),
            ("character varying", String(length=TEXT_LENGTH)),
            ("character(3)", String(length=3, variable=False)),
            ("text", String(length=TEXT_LENGTH)),
            ("bytea", String(length=TEXT_LENGTH, binary=True)),
            ("real", Float(size=4)),
            ("double precision", Float(size=8)),
            ("numeric(10,2)", Decimal(precision=10, scale=2)),
            ("numeric", Decimal()),
            ("timestamp with time zone", DateTime()),
            ("timestamp(3) with time zone", DateTime()),
            ("timestamp without time zone", DateTime(zone=False)),
            ("date", DateTime(time=False, zone=False)),
            ("time without time zone", DateTime(date=False, zone=False)),
            ("boolean", Boolean()),
        ],
    )
    def test_decode(self, dialect: PostgreSQLDialect, raw: str, expected) -> None:
        """Each catalog type decodes to the expected canonical type."""
        assert dialect.decode_type(raw) == expected

    def test_unsupported(self, dialect: PostgreSQLDialect) -> None:
        """Intervals are recognized but not handled."""
        with pytest.raises(UnsupportedTypeError):
            dialect.decode_type("interval")

    def test_unknown(self, dialect: PostgreSQLDialect) -> None:
        """Unrecognized types raise UnknownTypeError."""
        with pytest.raises(UnknownTypeError, match="TSVECTOR"):
            dialect.decode_type("tsvector")


class TestEncode:
    """Canonical types to PostgreSQL DDL types."""

    @pytest.mark.parametrize(
        "column_type, expected",
        [
            (Integer(size=1), "SMALLINT"),
            (Integer(size=4, unsigned=True), "INTEGER"),
            (Integer(size=8), "BIGINT"),
            (String(length=9), "VARCHAR(9)"),
            (String(length=2, variable=False), "CHAR(2)"),
            (String(length=2**32), "TEXT"),
            (String(length=16, binary=True), "BYTEA"),
            (Float(size=4), "REAL"),
            (Float(size=8), "DOUBLE PRECISION"),
            (Decimal(precision=10, scale=2), "DECIMAL(10, 2)"),
            (DateTime(), "TIMESTAMP WITH TIME ZONE"),
            (DateTime(zone=False), "TIMESTAMP"),
            (DateTime(time=False), "DATE"),
            (DateTime(date=False), "TIME"),
            (Boolean(), "BOOLEAN"),
            (Enum(values=["on", "off"]), "VARCHAR(3)"),
        ],
    )
    def test_encode(self, dialect: PostgreSQLDialect, column_type, expected: str) -> None:
        """Each canonical type encodes to the expected DDL type."""
        assert dialect.encode_type(column_type) == expected


class TestNaming:
    """Schemas qualify tables; the default schema is public."""

    def test_default_schema_is_public(self, dialect: PostgreSQLDialect) -> None:
        """The synthetic default schema maps to public."""
        assert dialect.table_ref("default", "default", "t") == '"public"."t"'

    def test_named_schema(self, dialect: PostgreSQLDialect) -> None:
        """The database never appears in table references."""
        assert dialect.table_ref("shop", "sales", "t") == '"sales"."t"'

    def test_literals(self, dialect: PostgreSQLDialect) -> None:
        """Booleans become true/false literals and quotes are doubled."""
        assert dialect.quote_literal(True) == "'true'"
        assert dialect.quote_literal("it's") == "'it''s'"

    def test_default_names_not_created(self, dialect: PostgreSQLDialect) -> None:
        """The default database and schema cannot be created."""
        assert dialect.create_database_sql("default") is None
        assert dialect.create_schema_sql("shop", "default") is None
        assert dialect.create_schema_sql("shop", "sales") == 'CREATE SCHEMA IF NOT EXISTS "sales"'


class TestModifyClauses:
    """ALTER COLUMN clauses for a changed column."""

    def test_type_only(self, dialect: PostgreSQLDialect) -> None:
        """A type change is a single ALTER COLUMN ... TYPE clause."""
        old = Column(name="n", type=Integer())
        new = Column(name="n", type=Integer(size=8))
        assert dialect.modify_clauses(old, new) == ['ALTER COLUMN "n" TYPE BIGINT']

    def test_all_properties(self, dialect: PostgreSQLDialect) -> None:
        """Type, then nullability, default and identity."""
        old = Column(name="n", type=Integer(), default="1")
        new = Column(name="n", type=Integer(), nullable=False, sequence=True)

        assert dialect.modify_clauses(old, new) == [
            'ALTER COLUMN "n" TYPE INTEGER',
            'ALTER COLUMN "n" SET NOT NULL',
            'ALTER COLUMN "n" DROP DEFAULT',
            'ALTER COLUMN "n" ADD GENERATED BY DEFAULT AS IDENTITY',
        ]

    def test_reverse_properties(self, dialect: PostgreSQLDialect) -> None:
        """Relaxing nullability, setting a default and dropping identity."""
        old = Column(name="n", type=Integer(), nullable=False, sequence=True)
        new = Column(name="n", type=Integer(), default="5")

        assert dialect.modify_clauses(old, new)[1:] == [
            'ALTER COLUMN "n" DROP NOT NULL',
            "ALTER COLUMN \"n\" SET DEFAULT '5'",
            'ALTER COLUMN "n" DROP IDENTITY IF EXISTS',
        ]


class TestDescribe:
    """Catalog rows and key constraints become a table."""

    def test_describe_table(self, dialect: PostgreSQLDialect) -> None:
        """Columns, key flags, identity and cast defaults are decoded."""
        runner = MagicMock()
        runner.query.side_effect = [
            [
                {"name": "id", "type": "integer", "notnull": True, "dflt_value": None, "identity": "d"},
                {"name": "code", "type": "character(3)", "notnull": True, "dflt_value": "'abc'::bpchar", "identity": ""},
                {"name": "legacy", "type": "bigint", "notnull": True, "dflt_value": "nextval('t_legacy_seq'::regclass)", "identity": ""},
                {"name": "note", "type": "text", "notnull": False, "dflt_value": None, "identity": ""},
            ],
            [
                {"column_name": "id", "constraint_type": "PRIMARY KEY"},
                {"column_name": "code", "constraint_type": "UNIQUE"},
            ],
        ]

        table = dialect.describe_table(runner, "default", "default", "t")

        assert table.column_names == ["id", "code", "legacy", "note"]
        id_column, code, legacy, note = table.columns
        assert id_column.primary and id_column.sequence
        assert code.unique and not code.primary
        assert code.default == "abc"
        assert legacy.sequence is True
        assert legacy.default is None
        assert note.nullable is True
        assert runner.query.call_args[0][1] == {"schema": "public", "table": "t"}

    def test_boolean_default_matches_written_column(self, dialect: PostgreSQLDialect) -> None:
        """A boolean default reported as ``true`` equals a column written with True."""
        column = dialect.decode_column(
            {"name": "active", "type": "boolean", "notnull": False, "dflt_value": "true", "identity": ""}
        )

        assert column == Column(name="active", type=Boolean(), default=True)
        assert column.default == "1"

    def test_missing_table(self, dialect: PostgreSQLDialect) -> None:
        """No catalog rows means no table."""
        runner = MagicMock()
        runner.query.return_value = []
        assert dialect.describe_table(runner, "default", "default", "t") is None

"""Tests for the MySQL dialect: type codec, quoting, naming and DESCRIBE rows."""

import pytest

from schemashift.dialects.base import parse_quoted_list, parse_type_params
from schemashift.dialects.mysql import MySQLDialect
from schemashift.errors import UnknownTypeError, UnsupportedTypeError
from schemashift.schema.ddl import column_definition
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
def dialect() -> MySQLDialect:
    return MySQLDialect()


# ============================================================================
# Type string parsing helpers
# ============================================================================


class TestParseTypeParams:
    """Splitting native type strings."""

    def test_name_params_extra(self) -> None:
        """Parameters and trailing qualifier are separated from the name."""
        assert parse_type_params("int(11) unsigned") == ("INT", "11", "UNSIGNED")

    def test_no_params(self) -> None:
        """A bare name has no parameters and no qualifier."""
        assert parse_type_params("timestamp") == ("TIMESTAMP", None, "")

    def test_multi_word_name_kept(self) -> None:
        """Multi-word names survive when there are no parentheses."""
        assert parse_type_params("double precision") == ("DOUBLE PRECISION", None, "")

    def test_trailing_modifier_without_params(self) -> None:
        """UNSIGNED after a bare name moves to the qualifier."""
        assert parse_type_params("bigint unsigned") == ("BIGINT", None, "UNSIGNED")

    def test_enum_params_keep_quotes(self) -> None:
        """Enum parameters are returned verbatim."""
        assert parse_type_params("enum('a','b')").params == "'a','b'"


class TestParseQuotedList:
    """Parsing single-quoted, comma-separated lists."""

    def test_simple_list(self) -> None:
        """Plain literals are unquoted in order."""
        assert parse_quoted_list("'a','b','c'") == ["a", "b", "c"]

    def test_doubled_quote_unescaped(self) -> None:
        """A doubled quote becomes a single literal quote."""
        assert parse_quoted_list("'it''s','x'") == ["it's", "x"]

    def test_separator_inside_literal(self) -> None:
        """Commas inside a literal do not split it."""
        assert parse_quoted_list("'a,b','c'") == ["a,b", "c"]

    def test_malformed_returns_none(self) -> None:
        """An unterminated literal is rejected."""
        assert parse_quoted_list("'a','b") is None

    def test_backslash_escape(self) -> None:
        """With an escape character the next character is taken literally."""
        assert parse_quoted_list(r"'a\\b','it\'s'", escape="\\") == ["a\\b", "it's"]

    def test_backslash_kept_without_escape(self) -> None:
        """Without an escape character backslashes are plain text."""
        assert parse_quoted_list(r"'a\\b'") == ["a\\\\b"]


# ============================================================================
# Decode
# ============================================================================


class TestDecode:
    """DESCRIBE type strings to canonical types."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("int(11)", Integer(size=4)),
            ("int(10) unsigned", Integer(size=4, unsigned=True)),
            ("tinyint(4)", Integer(size=1)),
            ("mediumint(9)", Integer(size=3)),
            ("bigint(20) unsigned", Integer(size=8, unsigned=True)),
            ("varchar(9)", String(length=9)),
            ("char(8)", String(length=8, variable=False)),
            ("varbinary(16)", String(length=16, binary=True)),
            ("binary(4)", String(length=4, variable=False, binary=True)),
            ("tinyblob", String(length=255, binary=True)),
            ("text", String(length=65535)),
            ("mediumtext", String(length=16777215)),
            ("longblob", String(length=4294967296, binary=True)),
            ("float", Float(size=4)),
            ("double", Float(size=8)),
            ("double precision", Float(size=8)),
            ("decimal(10,2)", Decimal(precision=10, scale=2)),
            ("decimal(8)", Decimal(precision=8, scale=0)),
            ("timestamp", DateTime(date=True, time=True, zone=True)),
            ("datetime", DateTime(date=True, time=True, zone=False)),
            ("date", DateTime(date=True, time=False, zone=False)),
            ("time", DateTime(date=False, time=True, zone=False)),
            ("enum('a','b','c')", Enum(values=["a", "b", "c"])),
        ],
    )
    def test_decode(self, dialect: MySQLDialect, raw: str, expected) -> None:
        """Each native type decodes to the expected canonical type."""
        assert dialect.decode_type(raw) == expected

    def test_decode_is_case_insensitive(self, dialect: MySQLDialect) -> None:
        """Upper and lower case names decode the same."""
        assert dialect.decode_type("VARCHAR(9)") == dialect.decode_type("varchar(9)")

    @pytest.mark.parametrize("raw", ["bit", "bit(1)", "set('a','b')", "year(4)"])
    def test_unsupported(self, dialect: MySQLDialect, raw: str) -> None:
        """Recognized but unhandled types raise UnsupportedTypeError."""
        with pytest.raises(UnsupportedTypeError):
            dialect.decode_type(raw)

    def test_unknown(self, dialect: MySQLDialect) -> None:
        """Unrecognized types raise UnknownTypeError."""
        with pytest.raises(UnknownTypeError, match="FUBAR"):
            dialect.decode_type("fubar")


# ============================================================================
# Encode
# ============================================================================


class TestEncode:
    """Canonical types to MySQL DDL types."""

    @pytest.mark.parametrize(
        "column_type, expected",
        [
            (Integer(), "INTEGER"),
            (Integer(size=1), "TINYINT"),
            (Integer(size=7), "BIGINT"),
            (Integer(size=4, unsigned=True), "INTEGER UNSIGNED"),
            (String(length=9), "VARCHAR(9)"),
            (String(length=8, variable=False), "CHAR(8)"),
            (String(length=16, binary=True), "VARBINARY(16)"),
            (String(length=4, variable=False, binary=True), "BINARY(4)"),
            (String(length=255), "TINYTEXT"),
            (String(length=255, binary=True), "TINYBLOB"),
            (String(length=300), "TEXT"),
            (String(length=300, binary=True), "BLOB"),
            (String(length=65537), "MEDIUMTEXT"),
            (String(length=2**28, binary=True), "LONGBLOB"),
            (String(length=2**40), "LONGTEXT"),
            (Float(), "FLOAT"),
            (Float(size=7), "DOUBLE"),
            (Decimal(precision=10, scale=2), "DECIMAL(10, 2)"),
            (DateTime(), "TIMESTAMP"),
            (DateTime(zone=False), "DATETIME"),
            (DateTime(time=False, zone=False), "DATE"),
            (DateTime(date=False), "TIME"),
            (Boolean(), "TINYINT(1) UNSIGNED"),
            (Enum(values=["a", "b", "c"]), "ENUM('a','b','c')"),
        ],
    )
    def test_encode(self, dialect: MySQLDialect, column_type, expected: str) -> None:
        """Each canonical type encodes to the expected DDL type."""
        assert dialect.encode_type(column_type) == expected

    def test_enum_literals_escaped(self, dialect: MySQLDialect) -> None:
        """Quotes inside enum values are doubled."""
        assert dialect.encode_type(Enum(values=["it's"])) == "ENUM('it''s')"


class TestRoundTrip:
    """decode(encode(t)) == t over the dialect's exact domain."""

    @pytest.mark.parametrize(
        "column_type",
        [
            Integer(size=1),
            Integer(size=2, unsigned=True),
            Integer(size=3),
            Integer(size=4),
            Integer(size=8, unsigned=True),
            String(length=9),
            String(length=8, variable=False),
            String(length=100, binary=True),
            String(length=255),
            String(length=65535, binary=True),
            Float(size=4),
            Float(size=8),
            Decimal(precision=12, scale=4),
            DateTime(),
            DateTime(zone=False),
            DateTime(time=False, zone=False),
            DateTime(date=False, zone=False),
            Enum(values=["a", "it's", "c"]),
            Enum(values=["a\\b", "it\\'s"]),
        ],
    )
    def test_round_trip(self, dialect: MySQLDialect, column_type) -> None:
        """Encoding then decoding gives back an equal type."""
        assert dialect.decode_type(dialect.encode_type(column_type)) == column_type

    def test_boolean_decodes_as_tiny_unsigned_integer(self, dialect: MySQLDialect) -> None:
        """MySQL has no boolean; it comes back as an unsigned 1-byte integer."""
        assert dialect.decode_type(dialect.encode_type(Boolean())) == Integer(
            size=1, unsigned=True
        )


# ============================================================================
# Quoting, naming and column rows
# ============================================================================


class TestQuoting:
    """Identifier and literal quoting."""

    def test_identifier_backticks(self, dialect: MySQLDialect) -> None:
        """Identifiers are wrapped in backticks with embedded ones doubled."""
        assert dialect.quote_identifier("Id") == "`Id`"
        assert dialect.quote_identifier("we`ird") == "`we``ird`"

    def test_literal_escapes(self, dialect: MySQLDialect) -> None:
        """Quotes and backslashes are doubled in literals."""
        assert dialect.quote_literal("it's") == "'it''s'"
        assert dialect.quote_literal("a\\b") == "'a\\\\b'"

    def test_literal_scalars(self, dialect: MySQLDialect) -> None:
        """Numbers and booleans are quoted as strings."""
        assert dialect.quote_literal(0) == "'0'"
        assert dialect.quote_literal(True) == "'1'"


class TestTableRef:
    """The database (or schema stand-in) qualifies table names."""

    def test_database_wins(self, dialect: MySQLDialect) -> None:
        """A named database qualifies the table."""
        assert dialect.table_ref("shop", "other", "t") == "`shop`.`t`"

    def test_schema_used_when_database_default(self, dialect: MySQLDialect) -> None:
        """The schema stands in for a default database."""
        assert dialect.table_ref("default", "shop", "t") == "`shop`.`t`"

    def test_unqualified_when_both_default(self, dialect: MySQLDialect) -> None:
        """Defaults leave the table unqualified."""
        assert dialect.table_ref("default", "default", "t") == "`t`"


class TestDecodeColumn:
    """DESCRIBE rows become columns."""

    def test_primary_sequence_row(self, dialect: MySQLDialect) -> None:
        """PRI and auto_increment set primary and sequence; NULL default is none."""
        column = dialect.decode_column(
            {
                "field": "Id",
                "type": "int(11)",
                "null": "NO",
                "key": "PRI",
                "default": "NULL",
                "extra": "auto_increment",
            }
        )
        assert column == Column(
            name="Id", type=Integer(), primary=True, sequence=True, nullable=False
        )

    def test_unique_nullable_row(self, dialect: MySQLDialect) -> None:
        """UNI sets unique; YES allows nulls; defaults are kept verbatim."""
        column = dialect.decode_column(
            {
                "field": "Code",
                "type": "char(3)",
                "null": "YES",
                "key": "UNI",
                "default": "",
                "extra": "",
            }
        )
        assert column.unique is True
        assert column.primary is False
        assert column.nullable is True
        assert column.default == ""

    def test_bytes_values_decoded(self, dialect: MySQLDialect) -> None:
        """Catalog values returned as bytes are decoded."""
        column = dialect.decode_column(
            {
                "field": "Name",
                "type": b"varchar(9)",
                "null": "NO",
                "key": "",
                "default": None,
                "extra": "",
            }
        )
        assert column.type == String(length=9)


class TestColumnDefinition:
    """Column fragments in DDL order."""

    def test_primary_key_fragment(self, dialect: MySQLDialect) -> None:
        """The canonical auto-increment key fragment."""
        column = Column(
            name="id", type=Integer(), primary=True, sequence=True, nullable=False
        )
        assert (
            column_definition(dialect, column)
            == "`id` INTEGER PRIMARY KEY AUTO_INCREMENT NOT NULL"
        )

    def test_default_fragment(self, dialect: MySQLDialect) -> None:
        """Defaults are quoted literals at the end."""
        column = Column(name="Name", type=String(length=9), nullable=False, default="")
        assert column_definition(dialect, column) == "`Name` VARCHAR(9) NOT NULL DEFAULT ''"

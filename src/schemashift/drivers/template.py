"""Template report driver.

Write-only driver that renders every configured Jinja2 template for each
table written to it.  Templates receive exactly three variables:
``database``, ``schema`` and ``table`` (a ``Table`` model).

Output paths may contain ``{database}``, ``{schema}`` and ``{table}``
placeholders, so one template can produce one file per table:

    templates = {"docs/{database}/{table}.md": "table.md.j2"}

Usage:
    from schemashift.drivers.template import TemplateDriver

    driver = TemplateDriver({"out/{table}.html": "table.html.j2"}, "templates")
    driver.set_table("shop", "default", table)
"""

import logging
import string
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError

from schemashift.dialects.base import Capability
from schemashift.errors import BackendExecutionError, DriverConfigurationError
from schemashift.schema.ddl import require_types
from schemashift.schema.models import Table

logger = logging.getLogger(__name__)

PATH_PLACEHOLDERS = {"database", "schema", "table"}


class TemplateDriver:
    """Driver that renders tables through Jinja2 templates.

    Args:
        templates: Output path (with optional placeholders) -> template name.
        template_dir: Directory templates are loaded from.
        environment: A preconfigured Jinja2 environment.  Overrides
            *template_dir* when given.
    """

    capabilities = frozenset({Capability.WRITE})

    def __init__(
        self,
        templates: dict[str, str],
        template_dir: str | Path = ".",
        environment: Environment | None = None,
    ) -> None:
        for destination in templates:
            _check_placeholders(destination)
        self._templates = dict(templates)
        self._env = environment or Environment(
            loader=FileSystemLoader(str(template_dir)),
            keep_trailing_newline=True,
        )

    def __enter__(self) -> "TemplateDriver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def set_table(
        self, database: str, schema: str, table: Table, force: bool = False
    ) -> bool:
        """Render every template for *table* and write the results.

        Raises:
            MissingTypeError: A column has no type.
            BackendExecutionError: A template failed to render or an output
                file could not be written.
        """
        require_types(table.columns)
        for destination, template_name in self._templates.items():
            path = Path(
                destination.format(database=database, schema=schema, table=table.name)
            )
            try:
                output = self._env.get_template(template_name).render(
                    database=database, schema=schema, table=table
                )
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(output, encoding="utf-8")
            except (TemplateError, OSError) as e:
                raise BackendExecutionError(
                    f"Failed to render {template_name} to {path}: {e}"
                ) from e
            logger.info("Rendered %s to %s", template_name, path)
        return True

    # Everything else is unsupported for a write-only report target

    def list_databases(self) -> list[str] | None:
        return None

    def list_schemas(self, database: str) -> list[str] | None:
        return None

    def list_tables(self, database: str, schema: str) -> list[str] | None:
        return None

    def get_table(self, database: str, schema: str, table: str) -> Table | None:
        return None

    def create_database(self, database: str) -> bool:
        return False

    def create_schema(self, database: str, schema: str) -> bool:
        return False

    def drop_database(self, database: str) -> bool:
        return False

    def drop_schema(self, database: str, schema: str) -> bool:
        return False

    def drop_table(self, database: str, schema: str, table: str) -> bool:
        return False

    def close(self) -> None:
        pass


def _check_placeholders(destination: str) -> None:
    """Reject output paths that ``str.format`` cannot fill.

    Raises:
        DriverConfigurationError: The path has a malformed brace or a
            placeholder other than ``{database}``, ``{schema}``, ``{table}``.
    """
    try:
        fields = [f for _, f, _, _ in string.Formatter().parse(destination) if f is not None]
    except ValueError as e:
        raise DriverConfigurationError(f"Invalid output path {destination!r}: {e}") from e

    unknown = sorted(set(fields) - PATH_PLACEHOLDERS)
    if unknown:
        raise DriverConfigurationError(
            f"Invalid output path {destination!r}: unknown placeholder(s) "
            f"{', '.join(map(repr, unknown))}. Use {{database}}, {{schema}} or {{table}}"
        )

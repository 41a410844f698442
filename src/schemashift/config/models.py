"""Pydantic models for driver options and TOML profiles."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Driver Options
# ============================================================================


class SQLDriverOptions(BaseModel):
    """Options for the SQL driver."""

    dsn: str
    username: str | None = None
    password: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)  # create_engine kwargs


class JSONDriverOptions(BaseModel):
    """Options for the JSON snapshot driver."""

    filename: str


class TemplateDriverOptions(BaseModel):
    """Options for the template report driver.

    ``templates`` maps an output path to a template name.  Output paths
    may use ``{database}``, ``{schema}`` and ``{table}`` placeholders.
    """

    templates: dict[str, str]
    template_dir: str = "."


# ============================================================================
# Configuration Models
# ============================================================================


class ProfileConfig(BaseModel):
    """A named driver profile from schemashift.toml.

    Keys other than ``driver`` and ``description`` are driver options.
    """

    model_config = ConfigDict(extra="allow")

    driver: str = "sql"
    description: str = ""

    def driver_options(self) -> dict[str, Any]:
        """The profile's driver options (every unrecognized key)."""
        return dict(self.model_extra or {})


class SchemaShiftConfig(BaseModel):
    """Complete configuration from schemashift.toml."""

    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)

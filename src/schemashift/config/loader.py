"""Configuration loading for schemashift."""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from schemashift.config.models import ProfileConfig, SchemaShiftConfig
from schemashift.errors import DriverConfigurationError

CONFIG_FILENAME = "schemashift.toml"

OptionsT = TypeVar("OptionsT", bound=BaseModel)


def load_config(config_path: Path | None = None) -> SchemaShiftConfig:
    """Load profiles from a TOML file.

    Args:
        config_path: Path to schemashift.toml (default: current working
            directory).

    Returns:
        SchemaShiftConfig with all profiles

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config not found: {config_path}\n"
            f"Create {CONFIG_FILENAME} with one [profiles.<name>] table per driver."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = ProfileConfig(**profile_data)

    return SchemaShiftConfig(profiles=profiles)


def parse_driver_options(
    model: type[OptionsT], options: Mapping[str, Any], driver: str
) -> OptionsT:
    """Validate driver options, ignoring unknown keys.

    Raises:
        DriverConfigurationError: A required option is missing or invalid.
    """
    try:
        return model.model_validate(dict(options))
    except ValidationError as e:
        problems = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise DriverConfigurationError(
            f"Invalid options for {driver} driver: {problems}"
        ) from e

"""Configuration file handling for the sproc-gen CLI.

The configuration is a YAML file holding named connections and default
generation options. Options given on the command line take precedence.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

CONFIG_ENV_VAR = "SPROC_GEN_CONFIG"
DEFAULT_CONFIG_NAME = ".sproc-gen.yaml"


class GenerateDefaults(BaseModel):
    """Defaults for the generate command"""

    output: str | None = Field(default=None, description="Output script path (None writes to stdout)")
    param_prefix: str = Field(default="_", description="Prefix added to column names for parameters")
    bind_marker: str = Field(default=":", description="Marker placed before parameter names in clause bodies")
    workers: int = Field(default=4, description="Number of tables processed concurrently")
    continue_on_error: bool = Field(default=False, description="Keep going when a table cannot be read")


class Defaults(BaseModel):
    """Default options per command"""

    generate: GenerateDefaults = Field(default_factory=GenerateDefaults)


class Config(BaseModel):
    """sproc-gen configuration file"""

    version: str = Field(default="1.0", description="Configuration format version")
    connections: dict[str, str] = Field(default_factory=dict, description="Named connection strings")
    defaults: Defaults = Field(default_factory=Defaults)


def get_config_path() -> Path:
    """Return the configuration file path.

    Returns:
        Path from the SPROC_GEN_CONFIG environment variable, or ~/.sproc-gen.yaml
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / DEFAULT_CONFIG_NAME


def load_config() -> Config:
    """Load the configuration file.

    Returns:
        Parsed configuration, or defaults if the file does not exist

    Raises:
        ValueError: If the file is not valid YAML or does not match the schema
    """
    config_path = get_config_path()
    if not config_path.exists():
        return Config()

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid config in {config_path}: expected a mapping")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config in {config_path}: {e}") from e


def save_config(config: Config) -> Path:
    """Write the configuration file.

    Args:
        config: Configuration to save

    Returns:
        Path of the written file
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
    return config_path


def init_config(force: bool = False) -> Path:
    """Create a configuration file with default values.

    Args:
        force: Overwrite an existing file

    Returns:
        Path of the created file

    Raises:
        FileExistsError: If the file exists and force is False
    """
    config_path = get_config_path()
    if config_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {config_path}")
    return save_config(Config())


def get_connection(name: str, config: Config | None = None) -> str:
    """Look up a named connection.

    Raises:
        KeyError: If the connection is not defined
    """
    config = config or load_config()
    if name not in config.connections:
        raise KeyError(f"Connection '{name}' not found in config")
    return config.connections[name]


def resolve_connection(connection: str, config: Config | None = None) -> str:
    """Resolve '@name' references to named connections, pass URLs through."""
    if connection.startswith("@"):
        return get_connection(connection[1:], config)
    return connection


def get_generate_defaults(config: Config | None = None) -> GenerateDefaults:
    """Return the defaults of the generate command."""
    config = config or load_config()
    return config.defaults.generate


def validate_config(config: Config) -> list[str]:
    """Check configuration values beyond their types.

    Returns:
        List of error messages (empty if valid)
    """
    errors: list[str] = []

    for name, connection in config.connections.items():
        if not connection:
            errors.append(f"Connection '{name}' is empty")

    generate = config.defaults.generate
    if not generate.param_prefix:
        errors.append("'defaults.generate.param_prefix' must not be empty")
    if generate.workers < 1:
        errors.append("'defaults.generate.workers' must be at least 1")

    return errors

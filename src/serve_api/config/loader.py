import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = ".serve.yaml"
ENV_PREFIX = "SERVE_"

# Config-file key -> ServeConfig field. File keys match the CLI flag names.
CONFIG_KEYS = {
    "verbose": "verbose",
    "port": "port",
    "ip-address": "bind_address",
    "directory": "directory",
    "database": "database",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ServeConfig(BaseModel):
    """Resolved process configuration consumed by the server."""

    bind_address: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    directory: str = "./"
    verbose: bool = False
    database: str = "sqlite.db"

    @field_validator("verbose", mode="before")
    @classmethod
    def _parse_bool(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"Invalid boolean value: {value!r}")
        return value

    @property
    def listen_address(self) -> str:
        return f"{self.bind_address}:{self.port}"


def default_config_path() -> Path:
    return Path.home() / DEFAULT_CONFIG_NAME


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the YAML config file.

    An explicitly named file must exist. Without one, ``~/.serve.yaml`` is
    read when present and an empty config is returned otherwise.

    Args:
        path: Optional path given with ``--config``

    Returns:
        Dictionary keyed by config-file names (``port``, ``ip-address``, ...)

    Raises:
        FileNotFoundError: If ``path`` is given and doesn't exist
        ValueError: If the file isn't a mapping or has unknown keys
    """
    if path is None:
        cfg_path = default_config_path()
        if not cfg_path.exists():
            return {}
    else:
        cfg_path = path
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config file must be a dictionary")
    unknown = sorted(set(config) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    config["__path__"] = str(cfg_path)
    return config


def config_from_env(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    """Collect ``SERVE_*`` variables (``SERVE_IP_ADDRESS`` -> ``ip-address``)."""
    if environ is None:
        environ = os.environ
    values: Dict[str, Any] = {}
    for key in CONFIG_KEYS:
        env_name = ENV_PREFIX + key.replace("-", "_").upper()
        if env_name in environ:
            values[key] = environ[env_name]
    return values


def resolve_config(
    cli_values: Dict[str, Any],
    file_config: Optional[Dict[str, Any]] = None,
    environ: Mapping[str, str] | None = None,
) -> ServeConfig:
    """
    Merge settings: CLI flag > environment > config file > default.

    Args:
        cli_values: Flags the user actually passed, keyed by config-file name
        file_config: Output of load_config
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated ServeConfig

    Raises:
        pydantic.ValidationError: If a value has the wrong type or range
    """
    merged: Dict[str, Any] = {}
    for source in (file_config or {}, config_from_env(environ), cli_values):
        for key, value in source.items():
            if key in CONFIG_KEYS and value is not None:
                merged[CONFIG_KEYS[key]] = value

    directory = merged.get("directory")
    if directory:
        merged["directory"] = os.path.normpath(str(directory))
    else:
        merged.pop("directory", None)

    return ServeConfig(**merged)

# config/config_loader.py

import logging
import math
import os
from pathlib import Path
from typing import Any

import yaml

from utils.errors import ConfigError

logger = logging.getLogger(__name__)


def _get_project_root() -> Path:
    """Derive project root from this file's location: config/config_loader.py -> project root."""
    return Path(__file__).resolve().parent.parent


def resolve_config_path(config_file: str | None = None) -> str:
    """Resolve config path with priority: explicit arg > env var > default."""
    if config_file:
        return config_file

    env_path = os.environ.get("CONFIG_PATH")
    if env_path:
        logger.info("Config path overridden via CONFIG_PATH env: %s", env_path)
        return env_path

    return str(_get_project_root() / "config" / "config.yaml")


def _lower_keys(mapping: dict[Any, Any]) -> dict[str, Any]:
    """Lower-case mapping keys recursively so lookups are case-insensitive."""
    result: dict[str, Any] = {}
    for key, value in mapping.items():
        if isinstance(value, dict):
            value = _lower_keys(value)
        result[str(key).lower()] = value
    return result


def as_text(value: Any) -> str:
    """
    Coerce a scalar read from YAML into text.

    None becomes an empty string, bytes are decoded as UTF-8 and booleans
    render the way YAML spells them.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_int(value: Any) -> int:
    """Coerce a scalar read from YAML into an int, 0 when it can't be parsed."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return int(value)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        try:
            return int(value.strip(), 0)
        except ValueError:
            return 0
    return 0


class ConfigSource:
    """
    A loaded YAML configuration document with dotted, case-insensitive lookups.

    Observability:
        - Logs INFO on successful load with path
        - Raises ConfigError (never logs) on missing, unreadable or invalid files;
          the caller decides how to degrade
    """

    def __init__(self, data: dict[str, Any] | None = None, path: str | None = None) -> None:
        self._data = _lower_keys(data or {})
        self.path = path

    @classmethod
    def load(cls, config_path: str) -> "ConfigSource":
        """Load a configuration document from a YAML file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            ConfigSource: The loaded document. An empty file loads as an
            empty document.

        Raises:
            ConfigError: If the file is missing, unreadable, not valid YAML
                or does not contain a mapping.
        """
        try:
            with Path(config_path).open(encoding="utf-8") as file:
                data = yaml.safe_load(file)
        except FileNotFoundError as e:
            raise ConfigError(
                f"Configuration file not found at path: {config_path}", config_path
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(
                f"Unable to read configuration at {config_path}: {e}", config_path
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Error parsing configuration YAML at {config_path}: {e}", config_path
            ) from e

        if data is None:
            data = {}

        # Ensure we have a dict to operate on
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration file at {config_path} didn't contain a mapping",
                config_path,
            )

        logger.info("Configuration loaded successfully from %s", config_path)
        return cls(data, config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieves a value from the configuration.

        Args:
            key (str): Dotted key such as ``Emby.url``. Matching ignores case.
            default (Any, optional): The default value if the key is not found.
                Defaults to None.

        Returns:
            Any: The value associated with the key.
        """
        current: Any = self._data
        for part in key.lower().split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def get_string(self, key: str) -> str:
        return as_text(self.get(key))

    def get_int(self, key: str) -> int:
        return as_int(self.get(key))

    def __contains__(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def __repr__(self) -> str:
        return f"ConfigSource(path={self.path!r})"

# config/settings.py

"""
Resolved runtime configuration for the frontend service.

``initialize`` is called once at startup. It either loads the YAML source or,
when that fails, falls back to the built-in defaults, and stores the result in
the process-wide ``ConfigStore``. Everything else reads through the accessors
at the bottom of this module, or takes the returned ``Config`` directly.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from config.config_loader import ConfigSource, as_text, resolve_config_path
from utils.errors import ConfigError
from utils.url import build_full_url

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENCIPHER = "vPQC5LWCN2CW2opz"
DEFAULT_EMBY_URL = "http://127.0.0.1"
DEFAULT_EMBY_PORT = 8096
DEFAULT_PLAY_URL_MAX_ALIVE_TIME = 6 * 60 * 60
DEFAULT_SERVER_PORT = 60002


class StreamSourceType(str, Enum):
    """Where playback is served from."""

    BACKEND = "backend"
    LINK = "link"


_STREAM_SOURCE_TYPES = (StreamSourceType.BACKEND, StreamSourceType.LINK)


def parse_stream_source_type(raw: Any) -> StreamSourceType:
    """
    Parse a stream source type, falling back to ``backend``.

    Matching is exact and case-sensitive. ``None``, empty strings and unknown
    labels yield ``StreamSourceType.BACKEND``. Other scalars are
    compared by their text form, so bytes are decoded first.
    """
    if raw is None:
        return StreamSourceType.BACKEND

    text = as_text(raw)
    if text in _STREAM_SOURCE_TYPES:
        return StreamSourceType(text)

    if text != "":
        logger.warning(
            "Unrecognized StreamSourceType %r; using '%s'",
            raw,
            StreamSourceType.BACKEND.value,
        )
    return StreamSourceType.BACKEND


class SpecialMediaConfig(BaseModel):
    """A curated override pinning a media item to a specific media source."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    key: str = Field(default="", alias="Key")
    name: str = Field(default="", alias="Name")
    media_path: str = Field(default="", alias="MediaPath")
    item_id: str = Field(default="", alias="ItemId")
    media_source_id: str = Field(default="", alias="MediaSourceID")

    @model_validator(mode="before")
    @classmethod
    def _match_keys(cls, data: Any) -> Any:
        # YAML keys match field aliases regardless of case; nulls decode as empty
        # and YAML 1.1 booleans (yes/on) as their text
        if not isinstance(data, dict):
            return data
        aliases = {info.alias.lower(): info.alias for info in cls.model_fields.values()}
        return {
            aliases.get(str(key).lower(), key): as_text(value) if isinstance(value, bool) else value
            for key, value in data.items()
            if value is not None
        }

    def is_valid(self) -> bool:
        """Return True if every field is non-empty."""
        return all(
            (self.key, self.name, self.media_path, self.item_id, self.media_source_id)
        )


_special_medias_adapter = TypeAdapter(list[SpecialMediaConfig])


def load_special_medias(source: ConfigSource) -> tuple[SpecialMediaConfig, ...]:
    """
    Decode the ``SpecialMedias`` section.

    Returns an empty tuple when the section is missing or cannot be decoded.
    Entries are kept in source order and are not filtered by ``is_valid``.
    """
    raw = source.get("SpecialMedias")
    if raw is None:
        return ()

    try:
        return tuple(_special_medias_adapter.validate_python(raw))
    except ValidationError as e:
        logger.warning(
            "SpecialMedias section could not be decoded (%d error(s)); ignoring it",
            e.error_count(),
        )
        return ()


@dataclass(frozen=True)
class Config:
    """All configuration values. Defaults are the built-in fallback set."""

    log_level: str = DEFAULT_LOG_LEVEL
    encipher: str = DEFAULT_ENCIPHER
    stream_source_type: StreamSourceType = StreamSourceType.BACKEND
    emby_url: str = DEFAULT_EMBY_URL
    emby_port: int = DEFAULT_EMBY_PORT
    emby_api_key: str = ""
    frontend_symlink_base_path: str = ""
    backend_url: str = ""
    backend_storage_base_path: str = ""
    play_url_max_alive_time: int = DEFAULT_PLAY_URL_MAX_ALIVE_TIME
    server_port: int = DEFAULT_SERVER_PORT
    special_medias: tuple[SpecialMediaConfig, ...] = field(default_factory=tuple)

    def get_stream_source_type(self) -> StreamSourceType:
        # Re-checked on read; the stored value is not trusted
        value = self.stream_source_type
        if value in _STREAM_SOURCE_TYPES:
            return StreamSourceType(value)
        return StreamSourceType.BACKEND

    def get_full_emby_url(self) -> str:
        return build_full_url(self.emby_url, self.emby_port)

    def get_full_backend_url(self) -> str:
        return build_full_url(self.backend_url, 0)


def default_config(log_level: str | None = None) -> Config:
    """Build the fallback configuration used when no source can be loaded."""
    return Config(log_level=log_level or DEFAULT_LOG_LEVEL)


def config_from_source(source: ConfigSource, log_level: str | None = None) -> Config:
    """Build a configuration from a loaded source. Missing keys read as empty/zero."""
    return Config(
        log_level=log_level or source.get_string("LogLevel"),
        encipher=source.get_string("Encipher"),
        stream_source_type=parse_stream_source_type(source.get_string("StreamSourceType")),
        emby_url=source.get_string("Emby.url"),
        emby_port=source.get_int("Emby.port"),
        emby_api_key=source.get_string("Emby.apiKey"),
        frontend_symlink_base_path=source.get_string("Frontend.symlinkBasePath"),
        backend_url=source.get_string("Backend.url"),
        backend_storage_base_path=source.get_string("Backend.storageBasePath"),
        play_url_max_alive_time=source.get_int("PlayURLMaxAliveTime"),
        server_port=source.get_int("Server.port"),
        special_medias=load_special_medias(source),
    )


class ConfigStore:
    """
    Process-wide holder of the resolved configuration.

    Written once by ``initialize`` and read everywhere else. The lock makes a
    re-initialization swap the whole snapshot; ``Config`` itself is immutable.

    Observability:
        - Tracks config_status for health reporting
    """

    _lock: ClassVar[threading.RLock] = threading.RLock()
    _config: ClassVar[Config] = Config()
    _config_status: ClassVar[str] = "not_loaded"  # "ok", "degraded", "error"
    _config_path: ClassVar[str | None] = None

    @classmethod
    def set(cls, config: Config, status: str, path: str | None) -> None:
        with cls._lock:
            cls._config = config
            cls._config_status = status
            cls._config_path = path

    @classmethod
    def get(cls) -> Config:
        with cls._lock:
            return cls._config

    @classmethod
    def get_config_status(cls) -> dict[str, Any]:
        """Return config health status for observability endpoints.

        Returns:
            Dict with config_status, config_path, and whether config is loaded.
        """
        with cls._lock:
            return {
                "config_status": cls._config_status,
                "config_path": cls._config_path,
                "config_loaded": cls._config_status != "not_loaded",
            }

    @classmethod
    def reset(cls) -> None:
        """Reset the store state (useful for testing)."""
        with cls._lock:
            cls._config = Config()
            cls._config_status = "not_loaded"
            cls._config_path = None


def initialize(config_file: str | None = None, log_level: str | None = None) -> Config:
    """
    Resolve the configuration and store it.

    Args:
        config_file: Path to the YAML file. If not provided, uses the
            CONFIG_PATH env var or defaults to project_root/config/config.yaml.
        log_level: Log level override (e.g. from the command line). Wins over
            the file's LogLevel whenever it is non-empty.

    Returns:
        Config: The resolved configuration, also available via ``get_config``.
        Configuration problems never raise; a source that cannot be loaded
        yields the built-in defaults.
    """
    config_path = resolve_config_path(config_file)

    try:
        source = ConfigSource.load(config_path)
    except ConfigError as e:
        status = "degraded" if isinstance(e.__cause__, FileNotFoundError) else "error"
        logger.warning(
            "%s; using built-in default config (%s mode).",
            e,
            status,
            extra={"config_path": config_path},
        )
        config = default_config(log_level)
    else:
        status = "ok"
        config = config_from_source(source, log_level)

    ConfigStore.set(config, status=status, path=config_path)
    return config


def get_config() -> Config:
    """Return the current configuration snapshot."""
    return ConfigStore.get()


def get_stream_source_type() -> StreamSourceType:
    """Return the configured stream source type, ``backend`` if it is not valid."""
    return ConfigStore.get().get_stream_source_type()


def get_full_emby_url() -> str:
    """Return the Emby URL with the configured port."""
    return ConfigStore.get().get_full_emby_url()


def get_full_backend_url() -> str:
    """Return the backend URL. No port is appended."""
    return ConfigStore.get().get_full_backend_url()

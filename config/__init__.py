from .config_loader import ConfigSource, resolve_config_path
from .settings import (
    Config,
    ConfigStore,
    SpecialMediaConfig,
    StreamSourceType,
    get_config,
    get_full_backend_url,
    get_full_emby_url,
    get_stream_source_type,
    initialize,
    load_special_medias,
    parse_stream_source_type,
)

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigStore",
    "SpecialMediaConfig",
    "StreamSourceType",
    "get_config",
    "get_full_backend_url",
    "get_full_emby_url",
    "get_stream_source_type",
    "initialize",
    "load_special_medias",
    "parse_stream_source_type",
    "resolve_config_path",
]

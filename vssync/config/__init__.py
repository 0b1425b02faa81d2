# VSSYNC Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from vssync.config.defaults import DEFAULT_CONFIG, generate_default_config, get_default_config
from vssync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    resolve_api_key,
    resolve_namespace_key,
    save_config,
    validate_config_file,
)
from vssync.config.schema import (
    ExecutionConfig,
    OutputConfig,
    RemoteConfig,
    SyncConfig,
    VssyncConfig,
)

__all__ = [
    # Schema
    "VssyncConfig",
    "SyncConfig",
    "RemoteConfig",
    "ExecutionConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    "resolve_namespace_key",
    "resolve_api_key",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
    "get_default_config",
]

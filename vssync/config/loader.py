# VSSYNC Configuration Loader
# Load, save and resolve YAML configuration

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from vssync.config.defaults import generate_default_config, get_default_config
from vssync.config.schema import VssyncConfig
from vssync.errors import ConfigurationError
from vssync.git.operations import get_remotes


def get_config_dir() -> Path:
    """Get the VSSYNC configuration directory."""
    return Path.home() / ".config" / "vssync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("VSSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> VssyncConfig:
    """
    Load configuration from YAML file.

    A missing default config file yields the built-in defaults; an explicitly
    requested file must exist.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        VssyncConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist.
        ValidationError: If config file is invalid.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        return VssyncConfig.model_validate(get_default_config())

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return VssyncConfig.model_validate(_merge_with_defaults(data))


def save_config(config: VssyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Never persist a literal token
    data = config.model_dump(exclude_none=True, mode="json")
    data.get("remote", {}).pop("api_key", None)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists() -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without loading it into the system.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    errors: list[str] = []

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration root must be a mapping"]

    try:
        VssyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        return False, errors

    unknown = sorted(set(data) - {"sync", "remote", "execution", "output"})
    if unknown:
        errors.append(f"Unknown sections: {', '.join(unknown)}")

    return len(errors) == 0, errors


def _merge_with_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Merge loaded data with default values for missing keys."""
    result = get_default_config()

    for section, values in data.items():
        if isinstance(values, dict) and isinstance(result.get(section), dict):
            result[section] = {**result[section], **values}
        else:
            result[section] = values

    return result


def resolve_namespace_key(explicit: Optional[str] = None, *, repo_path: Optional[Path] = None) -> str:
    """
    Determine the namespace key for a run.

    Order: explicit value, repository name from GITHUB_REPOSITORY
    ("owner/name"), first configured git remote name.

    Args:
        explicit: Key from CLI option or config file.
        repo_path: Repository used for the git remote fallback.

    Returns:
        Namespace key.

    Raises:
        ConfigurationError: If no key can be derived.
    """
    if explicit:
        return explicit

    repository = os.environ.get("GITHUB_REPOSITORY", "")
    if "/" in repository:
        name = repository.split("/", 1)[1]
        if name:
            return name

    remotes = get_remotes(repo_path)
    if remotes:
        return remotes[0]

    raise ConfigurationError(
        "Cannot determine namespace key. Pass --key, set sync.namespace_key or GITHUB_REPOSITORY."
    )


def resolve_api_key(config: VssyncConfig, explicit: Optional[str] = None) -> str:
    """
    Determine the API token.

    Args:
        config: Loaded configuration.
        explicit: Token from CLI option.

    Returns:
        API token.

    Raises:
        ConfigurationError: If no token is available.
    """
    token = explicit or config.remote.api_key or os.environ.get(config.remote.api_key_env)
    if not token:
        raise ConfigurationError(f"No API token. Pass --token or set {config.remote.api_key_env}.")
    return token

# VSSYNC Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

from vssync.utils.paths import SUPPORTED_EXTENSIONS

DEFAULT_CONFIG: dict[str, Any] = {
    "sync": {
        "pattern": "**/*.md",
        "namespace_key": None,
        "supported_extensions": list(SUPPORTED_EXTENSIONS),
        "hash_algorithm": "md5",
    },
    "remote": {
        "api_key_env": "OPENAI_API_KEY",
        "base_url": None,
        "file_purpose": "assistants",
    },
    "execution": {
        "max_workers": 8,
        "batch_timeout": 600.0,
        "poll_interval": 2.0,
        "fail_on_item_errors": False,
    },
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# VSSYNC - Vector Store Sync Configuration
# Version: 1.0
#
# Local files matching sync.pattern are uploaded under the name
#   {namespace_key}-{content hash}/{relative path}
# and attached to the vector store tagged with metadata key = namespace_key.
# Remote files of the namespace that match no local file are deleted.
#
# namespace_key: null derives the key from GITHUB_REPOSITORY or the first git remote.
# The API token is read from the variable named in remote.api_key_env.

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)

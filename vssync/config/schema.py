# VSSYNC Configuration Schema
# Pydantic models for YAML configuration validation

import hashlib

from pydantic import BaseModel, Field, field_validator

from vssync.utils.paths import SUPPORTED_EXTENSIONS


class SyncConfig(BaseModel):
    """What to synchronize and under which namespace."""

    pattern: str = Field(default="**/*.md", description="Glob pattern selecting local files")
    namespace_key: str | None = Field(
        default=None,
        description="Namespace key. None = repository name from GITHUB_REPOSITORY or first git remote.",
    )
    supported_extensions: list[str] = Field(
        default_factory=lambda: list(SUPPORTED_EXTENSIONS),
        description="Extension allow-list (with leading dot)",
    )
    hash_algorithm: str = Field(default="md5", description="Content fingerprint algorithm")

    @field_validator("supported_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Ensure every extension carries a leading dot."""
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Accept fixed-length hashlib algorithms only."""
        name = v.strip().lower()
        if name not in hashlib.algorithms_available or name.startswith("shake_"):
            raise ValueError(f"Unsupported hash algorithm: {v}")
        return name

    @field_validator("namespace_key")
    @classmethod
    def reject_blank_key(cls, v: str | None) -> str | None:
        """Treat blank keys as unset."""
        if v is not None and not v.strip():
            return None
        return v


class RemoteConfig(BaseModel):
    """Remote API settings."""

    api_key: str | None = Field(default=None, description="API token (prefer the environment variable)")
    api_key_env: str = Field(default="OPENAI_API_KEY", description="Environment variable holding the token")
    base_url: str | None = Field(default=None, description="Override API base URL")
    file_purpose: str = Field(default="assistants", description="Purpose used for uploaded files")


class ExecutionConfig(BaseModel):
    """Plan execution settings."""

    max_workers: int = Field(default=8, ge=1, le=64, description="Concurrent remote calls per phase")
    batch_timeout: float = Field(default=600.0, gt=0, description="Seconds to wait for a link batch")
    poll_interval: float = Field(default=2.0, gt=0, description="Seconds between batch status polls")
    fail_on_item_errors: bool = Field(
        default=False,
        description="Mark the run failed when individual items fail",
    )


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class VssyncConfig(BaseModel):
    """Root configuration model for VSSYNC."""

    sync: SyncConfig = Field(default_factory=SyncConfig, description="Sync settings")
    remote: RemoteConfig = Field(default_factory=RemoteConfig, description="Remote API settings")
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig, description="Execution settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

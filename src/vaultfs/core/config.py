"""
vaultfs Configuration Management

Provides centralized configuration management with validation and environment support.
"""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

KNOWN_BACKENDS = ("gocryptfs", "cryfs")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10_000_000, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class GoCryptFsConfig(BaseModel):
    """gocryptfs backend configuration."""

    command_path: str = Field(default="gocryptfs", description="gocryptfs executable")
    fusermount_path: str = Field(
        default="fusermount", description="FUSE unmount helper executable"
    )


class CryFsConfig(BaseModel):
    """CryFS backend configuration."""

    command_path: str = Field(default="cryfs", description="cryfs executable")
    fusermount_path: str = Field(
        default="fusermount", description="FUSE unmount helper executable"
    )


class VaultFSConfig(BaseSettings):
    """Main vaultfs configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    gocryptfs: GoCryptFsConfig = Field(default_factory=GoCryptFsConfig)
    cryfs: CryFsConfig = Field(default_factory=CryFsConfig)

    # Backend selection
    backend: Optional[str] = Field(
        default=None, description="Force a backend instead of probing"
    )
    backend_order: List[str] = Field(
        default_factory=lambda: list(KNOWN_BACKENDS),
        description="Order in which backends are probed",
    )

    model_config = SettingsConfigDict(
        env_prefix="VAULTFS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
    )

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.lower()
        if v not in KNOWN_BACKENDS:
            raise ValueError(f"Unknown backend: {v}. Must be one of {KNOWN_BACKENDS}")
        return v

    @field_validator("backend_order")
    @classmethod
    def validate_backend_order(cls, v: List[str]) -> List[str]:
        order = [name.lower() for name in v]
        unknown = [name for name in order if name not in KNOWN_BACKENDS]
        if unknown:
            raise ValueError(
                f"Unknown backends in order: {unknown}. Must be among {KNOWN_BACKENDS}"
            )
        if not order:
            raise ValueError("backend_order must name at least one backend")
        return order


# Global configuration instance
_config: Optional[VaultFSConfig] = None


def get_config() -> VaultFSConfig:
    """
    Get the global configuration instance.

    Returns:
        The global VaultFSConfig instance
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def load_config(config_file: Optional[Path] = None) -> VaultFSConfig:
    """
    Load configuration from an env file and environment variables.

    Args:
        config_file: Optional path to a dotenv-style configuration file

    Returns:
        Loaded configuration instance
    """
    if config_file and config_file.exists():
        return VaultFSConfig(_env_file=config_file)

    return VaultFSConfig()


def reload_config(config_file: Optional[Path] = None) -> VaultFSConfig:
    """
    Reload the global configuration.

    Args:
        config_file: Optional path to configuration file

    Returns:
        Reloaded configuration instance
    """
    global _config
    _config = load_config(config_file)
    return _config


def update_config(**kwargs: Any) -> None:
    """
    Update configuration values at runtime.

    Args:
        **kwargs: Configuration values to update

    Raises:
        ValueError: If a key is unknown
        ValidationError: If a value fails validation
    """
    global _config
    if _config is None:
        _config = load_config()

    for key, value in kwargs.items():
        if hasattr(_config, key):
            setattr(_config, key, value)
        else:
            raise ValueError(f"Unknown configuration key: {key}")

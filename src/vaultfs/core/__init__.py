"""vaultfs core components."""

from .config import VaultFSConfig, get_config, load_config
from .exceptions import (
    AbnormalTermination,
    ConfigurationError,
    IoFailure,
    SpawnFailure,
    ToolReportedError,
    UnmountFailure,
    VaultDirectoryError,
    VaultError,
    VaultFSException,
)
from .models import VaultDescriptor

__all__ = [
    "VaultFSConfig",
    "get_config",
    "load_config",
    "VaultFSException",
    "ConfigurationError",
    "VaultError",
    "SpawnFailure",
    "IoFailure",
    "AbnormalTermination",
    "ToolReportedError",
    "UnmountFailure",
    "VaultDirectoryError",
    "VaultDescriptor",
]

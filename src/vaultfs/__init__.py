"""
vaultfs - uniform lifecycle management for encrypted filesystem vaults.

Creates, mounts and unmounts vaults through gocryptfs or CryFS behind a
single backend interface.
"""

__version__ = "0.1.0"

from .backends import Backend, CryFsBackend, GoCryptFsBackend, select_backend
from .core.exceptions import VaultError
from .core.models import VaultDescriptor

__all__ = [
    "Backend",
    "GoCryptFsBackend",
    "CryFsBackend",
    "select_backend",
    "VaultDescriptor",
    "VaultError",
]

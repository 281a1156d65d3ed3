"""
vaultfs Backends

Adapters for the external encrypted filesystem tools.
"""

from .base import Backend
from .cryfs import CryFsBackend
from .gocryptfs import GoCryptFsBackend
from .registry import BACKENDS, available_backends, create_backend, select_backend

__all__ = [
    "Backend",
    "GoCryptFsBackend",
    "CryFsBackend",
    "BACKENDS",
    "create_backend",
    "available_backends",
    "select_backend",
]

"""
Backend Registry

Maps backend names to adapters and picks one according to configuration,
falling back through the configured order by probing ``is_available``.
"""

import logging
from types import MappingProxyType
from typing import List, Optional, Type

from ..core.config import VaultFSConfig, get_config
from ..core.exceptions import ConfigurationError
from .base import Backend
from .cryfs import CryFsBackend
from .gocryptfs import GoCryptFsBackend

logger = logging.getLogger(__name__)

BACKENDS = MappingProxyType(
    {
        GoCryptFsBackend.name: GoCryptFsBackend,
        CryFsBackend.name: CryFsBackend,
    }
)


def create_backend(name: str, config: Optional[VaultFSConfig] = None) -> Backend:
    """
    Instantiate a backend by name.

    Args:
        name: Registry key (``gocryptfs`` or ``cryfs``)
        config: Configuration supplying executable paths (global if None)

    Returns:
        Backend instance

    Raises:
        ConfigurationError: If the name is unknown
    """
    config = config or get_config()
    backend_cls: Optional[Type[Backend]] = BACKENDS.get(name.lower())
    if backend_cls is None:
        raise ConfigurationError(
            f"Unknown backend: {name}", {"known": sorted(BACKENDS)}
        )

    paths = getattr(config, backend_cls.name)
    return backend_cls(
        command_path=paths.command_path, fusermount_path=paths.fusermount_path
    )


def available_backends(config: Optional[VaultFSConfig] = None) -> List[Backend]:
    """Return the configured backends whose tool can be invoked, in probe order."""
    config = config or get_config()
    backends = [create_backend(name, config) for name in config.backend_order]
    return [backend for backend in backends if backend.is_available()]


def select_backend(config: Optional[VaultFSConfig] = None) -> Backend:
    """
    Pick the backend to use.

    A backend forced in the configuration is returned without probing.
    Otherwise the first available backend in ``backend_order`` wins.

    Raises:
        ConfigurationError: If no configured backend is available
    """
    config = config or get_config()

    if config.backend:
        return create_backend(config.backend, config)

    for name in config.backend_order:
        backend = create_backend(name, config)
        if backend.is_available():
            logger.info(f"Using {name} backend")
            return backend
        logger.debug(f"Backend {name} is not available")

    raise ConfigurationError(
        "No encrypted filesystem backend is available",
        {"tried": list(config.backend_order)},
    )

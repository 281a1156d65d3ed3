"""
vaultfs Exception Hierarchy

Defines the exception hierarchy raised by vault backends and the configuration layer.
"""

from typing import Any, Dict, Optional


class VaultFSException(Exception):
    """Base exception for all vaultfs errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationError(VaultFSException):
    """Configuration-related errors (unknown backend, no backend available)."""

    pass


class VaultError(VaultFSException):
    """Base class for failures of a vault lifecycle operation."""

    pass


class SpawnFailure(VaultError):
    """The external executable could not be launched."""

    pass


class IoFailure(VaultError):
    """Writing the password to the process or waiting on it failed."""

    pass


class AbnormalTermination(VaultError):
    """The process ended without an exit code (killed by a signal)."""

    def __init__(
        self,
        signal: int,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.signal = signal
        super().__init__(
            message or f"Process didn't exit properly (signal {signal})", details
        )


class ToolReportedError(VaultError):
    """The encryption tool exited with a non-zero code."""

    def __init__(
        self, code: int, reason: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.code = code
        self.reason = reason
        super().__init__(reason, {"code": code, **(details or {})})


class UnmountFailure(VaultError):
    """The unmount helper exited with a non-zero code."""

    def __init__(
        self,
        code: int,
        details: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> None:
        self.code = code
        super().__init__(message or f"Failed to close vault ({code})", details)


class VaultDirectoryError(VaultError):
    """The vault directory is unsuitable for the requested operation."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(reason, {"vault_dir": path})

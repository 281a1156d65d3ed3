"""
Base Vault Backend

Provides the abstract backend contract and the process helpers shared by the
encryption tool adapters.

Every lifecycle call spawns exactly one external process (plus the unmount
helper where an adapter needs one) and blocks until it exits. The password is
only ever written to the child's standard input; it never appears in the
argument list. Standard output and error are inherited so the tool's own
diagnostics stay visible next to the structured errors raised here.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..core.exceptions import (
    AbnormalTermination,
    IoFailure,
    SpawnFailure,
    ToolReportedError,
    UnmountFailure,
)
from ..core.logging import log_structured
from ..core.models import VaultDescriptor

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
PopenFactory = Callable[..., subprocess.Popen]

UNKNOWN_ERROR = "Unknown error"


class Backend(ABC):
    """
    Abstract base class for encrypted filesystem backends.

    Instances hold only executable paths and are safe to share between
    threads working on different vaults.
    """

    #: Registry key of the backend
    name: str = ""

    #: Exit code -> reason table of the tool; 0 is never listed
    EXIT_CODES: Mapping[int, str] = MappingProxyType({})

    def __init__(
        self,
        command_path: PathLike,
        fusermount_path: PathLike = "fusermount",
        popen: PopenFactory = subprocess.Popen,
    ):
        """
        Initialize backend

        Args:
            command_path: Encryption tool executable, resolved via PATH if bare
            fusermount_path: FUSE unmount helper executable
            popen: Process factory, replaceable in tests
        """
        self.command_path = os.fspath(command_path)
        self.fusermount_path = os.fspath(fusermount_path)
        self._popen = popen

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(command_path={self.command_path!r}, "
            f"fusermount_path={self.fusermount_path!r})"
        )

    # ------------------------------------------------------------------
    # Lifecycle contract
    # ------------------------------------------------------------------

    def is_available(self) -> bool:
        """
        Check whether the tool can be invoked on this system.

        Runs ``<tool> --version`` with its output discarded. Never raises.
        """
        try:
            process = self._popen(
                [self.command_path, "--version"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            return process.wait() == 0
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.debug(f"{self.name} is not available: {e}")
            return False

    @abstractmethod
    def create_vault(self, descriptor: VaultDescriptor, password: str) -> None:
        """
        Initialize a new encrypted store at ``descriptor.vault_dir``.

        The store is left unmounted.

        Raises:
            VaultError: If the tool could not be run or reported a failure
        """
        pass

    @abstractmethod
    def mount_vault(self, descriptor: VaultDescriptor, password: str) -> None:
        """
        Expose the decrypted contents of the vault at ``descriptor.mount_dir``.

        Raises:
            VaultError: If the tool could not be run or reported a failure
        """
        pass

    def close_vault(self, descriptor: VaultDescriptor) -> None:
        """
        Unmount ``descriptor.mount_dir``.

        Raises:
            UnmountFailure: If the unmount helper exited non-zero
            VaultError: If the helper could not be run
        """
        logger.info(f"Closing vault mounted at {descriptor.mount_dir}")
        self._unmount(descriptor.mount_dir)

    # ------------------------------------------------------------------
    # Argument construction
    # ------------------------------------------------------------------

    def build_unmount_args(self, mount_dir: PathLike) -> List[str]:
        """Build the unmount helper invocation for ``mount_dir``."""
        return [self.fusermount_path, "-u", os.fspath(mount_dir)]

    # ------------------------------------------------------------------
    # Exit code translation
    # ------------------------------------------------------------------

    @classmethod
    def code_to_reason(cls, code: int) -> Optional[str]:
        """
        Translate a tool exit code into a failure reason.

        Returns:
            None for 0, the documented reason for known codes,
            ``"Unknown error"`` otherwise
        """
        if code == 0:
            return None
        return cls.EXIT_CODES.get(code, UNKNOWN_ERROR)

    # ------------------------------------------------------------------
    # Process helpers
    # ------------------------------------------------------------------

    def _spawn(
        self, args: List[str], env: Optional[Dict[str, str]] = None, **kwargs: Any
    ) -> subprocess.Popen:
        """Start ``args`` with stdout/stderr inherited."""
        try:
            return self._popen(args, env=env, **kwargs)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to launch {args[0]}: {e}")
            raise SpawnFailure(
                f"Failed to launch {args[0]}: {e}",
                {"tool": self.name, "command": args[0]},
            ) from e

    def _run_with_password(
        self,
        args: List[str],
        password: bytes,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Run the tool, feed ``password`` on stdin and check its exit status.

        Raises:
            SpawnFailure: If the process could not be started
            IoFailure: If writing stdin or waiting failed
            AbnormalTermination: If the process was killed by a signal
            ToolReportedError: If the tool exited non-zero
        """
        process = self._spawn(args, env=env, stdin=subprocess.PIPE)

        try:
            # communicate() writes, closes stdin and waits
            process.communicate(input=password)
        except OSError as e:
            process.kill()
            process.wait()
            logger.error(f"I/O with {args[0]} failed: {e}")
            raise IoFailure(
                f"Failed to pass password to {args[0]}: {e}",
                {"tool": self.name, "command": args[0]},
            ) from e

        self._check_tool_status(process.returncode, args)

    def _check_tool_status(self, returncode: int, args: List[str]) -> None:
        if returncode < 0:
            logger.error(f"{args[0]} was killed by signal {-returncode}")
            raise AbnormalTermination(-returncode, details={"tool": self.name})

        reason = self.code_to_reason(returncode)
        if reason is not None:
            log_structured(
                logger,
                logging.ERROR,
                f"{self.name} failed: {reason}",
                tool=self.name,
                code=returncode,
                command=args[0],
            )
            raise ToolReportedError(returncode, reason, {"tool": self.name})

    def _unmount(self, mount_dir: PathLike) -> None:
        args = self.build_unmount_args(mount_dir)
        process = self._spawn(args, stdin=subprocess.DEVNULL)

        try:
            returncode = process.wait()
        except OSError as e:
            raise IoFailure(
                f"Failed to wait for {args[0]}: {e}",
                {"tool": self.name, "command": args[0]},
            ) from e

        if returncode < 0:
            logger.error(f"{args[0]} was killed by signal {-returncode}")
            raise AbnormalTermination(-returncode, details={"tool": self.name})
        if returncode != 0:
            log_structured(
                logger,
                logging.ERROR,
                "Unmount helper failed",
                tool=self.name,
                code=returncode,
                mount_dir=os.fspath(mount_dir),
            )
            raise UnmountFailure(
                returncode, {"tool": self.name, "mount_dir": os.fspath(mount_dir)}
            )

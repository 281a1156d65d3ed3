"""
gocryptfs Backend

Drives the gocryptfs command line: ``--init`` creates a store, a plain
invocation mounts it, and ``fusermount -u`` closes it.
"""

import logging
import os
import subprocess
from types import MappingProxyType
from typing import List

from ..core.models import VaultDescriptor
from .base import Backend, PathLike, PopenFactory

logger = logging.getLogger(__name__)


class GoCryptFsBackend(Backend):
    """Backend for gocryptfs vaults."""

    name = "gocryptfs"

    EXIT_CODES = MappingProxyType(
        {
            6: "The vault directory is not empty",
            10: "The mount directory is not empty",
            12: "The password is incorrect",
            22: "The password is empty",
            23: "Couldn't read configuration file",
            24: "Couldn't write configuration file",
            26: "Filesystem check reported an error",
        }
    )

    def __init__(
        self,
        command_path: PathLike = "gocryptfs",
        fusermount_path: PathLike = "fusermount",
        popen: PopenFactory = subprocess.Popen,
    ):
        super().__init__(command_path, fusermount_path, popen)

    def build_create_args(self, descriptor: VaultDescriptor) -> List[str]:
        return [
            self.command_path,
            "--init",
            "-q",
            "--",
            os.fspath(descriptor.vault_dir),
        ]

    def build_mount_args(self, descriptor: VaultDescriptor) -> List[str]:
        return [
            self.command_path,
            "-q",
            "--",
            os.fspath(descriptor.vault_dir),
            os.fspath(descriptor.mount_dir),
        ]

    def create_vault(self, descriptor: VaultDescriptor, password: str) -> None:
        logger.info(f"Creating gocryptfs vault in {descriptor.vault_dir}")
        self._run_with_password(
            self.build_create_args(descriptor), password.encode("utf-8")
        )

    def mount_vault(self, descriptor: VaultDescriptor, password: str) -> None:
        logger.info(
            f"Mounting gocryptfs vault {descriptor.vault_dir} at {descriptor.mount_dir}"
        )
        self._run_with_password(
            self.build_mount_args(descriptor), password.encode("utf-8")
        )

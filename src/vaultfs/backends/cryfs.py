"""
CryFS Backend

CryFS has no separate initialization command: mounting an empty base
directory creates a new filesystem there. Vault creation therefore mounts the
new store on a throwaway staging directory and unmounts it again right away.

The tool is run with ``CRYFS_FRONTEND=noninteractive`` so that it reads the
password from standard input and never stops to ask questions. In that mode
it also creates a new filesystem in any base directory lacking a
``cryfs.config``, so mounting checks for the file first and creation refuses
a non-empty directory.
"""

import logging
import os
import subprocess
import tempfile
from types import MappingProxyType
from typing import Dict, List

from ..core.exceptions import UnmountFailure, VaultDirectoryError
from ..core.models import VaultDescriptor
from .base import Backend, PathLike, PopenFactory

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "cryfs.config"

CRYFS_ENVIRONMENT = MappingProxyType(
    {
        "CRYFS_FRONTEND": "noninteractive",
        "CRYFS_NO_UPDATE_CHECK": "true",
    }
)


class CryFsBackend(Backend):
    """Backend for CryFS vaults."""

    name = "cryfs"

    EXIT_CODES = MappingProxyType(
        {
            1: "Unspecified error",
            10: "Invalid arguments",
            11: "The password is incorrect",
            12: "The password is empty",
            13: "The filesystem format is too new",
            14: "The filesystem format is too old",
            15: "The filesystem uses a different cipher",
            16: "The vault directory is inaccessible",
            17: "The mount directory is inaccessible",
            18: "The vault directory is inside the mount directory",
            19: "The vault directory does not contain a valid filesystem",
            20: "The filesystem id changed",
            21: "The encryption key changed",
            22: "The filesystem has a different integrity setup",
            23: "The filesystem is in single-client mode",
            24: "An integrity violation was detected on a previous run",
            25: "An integrity violation was detected",
        }
    )

    def __init__(
        self,
        command_path: PathLike = "cryfs",
        fusermount_path: PathLike = "fusermount",
        popen: PopenFactory = subprocess.Popen,
    ):
        super().__init__(command_path, fusermount_path, popen)

    def build_mount_args(self, descriptor: VaultDescriptor) -> List[str]:
        return [
            self.command_path,
            os.path.abspath(descriptor.vault_dir),
            os.path.abspath(descriptor.mount_dir),
        ]

    def build_create_args(
        self, descriptor: VaultDescriptor, staging_dir: PathLike
    ) -> List[str]:
        return [
            self.command_path,
            os.path.abspath(descriptor.vault_dir),
            os.path.abspath(staging_dir),
        ]

    def _environment(self) -> Dict[str, str]:
        return {**os.environ, **CRYFS_ENVIRONMENT}

    @staticmethod
    def _password_input(password: str) -> bytes:
        # The noninteractive frontend reads a single line
        return (password + "\n").encode("utf-8")

    def create_vault(self, descriptor: VaultDescriptor, password: str) -> None:
        vault_dir = descriptor.vault_dir
        if vault_dir.is_dir() and any(vault_dir.iterdir()):
            logger.error(f"Refusing to create cryfs vault in non-empty {vault_dir}")
            raise VaultDirectoryError(
                os.fspath(vault_dir), "The vault directory is not empty"
            )

        logger.info(f"Creating cryfs vault in {vault_dir}")
        staging_dir = tempfile.mkdtemp(prefix="vaultfs-cryfs-")

        try:
            self._run_with_password(
                self.build_create_args(descriptor, staging_dir),
                self._password_input(password),
                env=self._environment(),
            )
            try:
                self._unmount(staging_dir)
            except UnmountFailure as e:
                raise UnmountFailure(
                    e.code,
                    e.details,
                    message=(
                        f"New vault is still mounted at {staging_dir}: "
                        f"failed to unmount ({e.code})"
                    ),
                ) from e
        finally:
            try:
                os.rmdir(staging_dir)
            except OSError as e:
                logger.warning(f"Could not remove staging directory {staging_dir}: {e}")

    def mount_vault(self, descriptor: VaultDescriptor, password: str) -> None:
        # Without a config file the noninteractive frontend creates a new vault
        if not (descriptor.vault_dir / CONFIG_FILE_NAME).is_file():
            logger.error(f"No cryfs vault found in {descriptor.vault_dir}")
            raise VaultDirectoryError(
                os.fspath(descriptor.vault_dir), self.EXIT_CODES[19]
            )

        logger.info(
            f"Mounting cryfs vault {descriptor.vault_dir} at {descriptor.mount_dir}"
        )
        self._run_with_password(
            self.build_mount_args(descriptor),
            self._password_input(password),
            env=self._environment(),
        )

"""
vaultfs Core Data Models

Defines the data structures passed to vault backends.
"""

from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VaultDescriptor(BaseModel):
    """Identifies an encrypted vault and the directory it is mounted on."""

    model_config = ConfigDict(frozen=True)

    vault_dir: Path = Field(description="Root of the encrypted data store")
    mount_dir: Path = Field(description="Where the decrypted view is exposed")

    @field_validator("vault_dir", "mount_dir", mode="before")
    @classmethod
    def validate_not_empty(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            raise ValueError("Directory path cannot be empty")
        return v

    @classmethod
    def from_paths(
        cls, vault_dir: Union[str, Path], mount_dir: Union[str, Path]
    ) -> "VaultDescriptor":
        """Build a descriptor from user-supplied paths, expanding ``~``."""
        # Path("") collapses to ".", so reject blanks before converting
        for value in (vault_dir, mount_dir):
            if isinstance(value, str) and not value.strip():
                raise ValueError("Directory path cannot be empty")
        return cls(
            vault_dir=Path(vault_dir).expanduser(),
            mount_dir=Path(mount_dir).expanduser(),
        )

"""
Pytest configuration and shared fixtures for vaultfs tests.
"""

import stat
from pathlib import Path
from typing import Callable, Optional

import pytest

from stubs import RecordingPopen
from vaultfs.core import config as config_module
from vaultfs.core.models import VaultDescriptor

STUB_TEMPLATE = """#!/bin/sh
printf '%s\\n' "$@" > "$0.args"
env > "$0.env"
cat > "$0.stdin"
{tail}
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep a stray .env, VAULTFS_* variables and the cached config out of tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("VAULTFS_BACKEND", "VAULTFS_BACKEND_ORDER"):
        monkeypatch.delenv(name, raising=False)
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture
def descriptor(tmp_path: Path) -> VaultDescriptor:
    """Provide a descriptor over fresh, empty vault and mount directories."""
    vault_dir = tmp_path / "vault"
    mount_dir = tmp_path / "mnt"
    vault_dir.mkdir()
    mount_dir.mkdir()
    return VaultDescriptor(vault_dir=vault_dir, mount_dir=mount_dir)


@pytest.fixture
def make_stub(tmp_path: Path) -> Callable[..., Path]:
    """
    Provide a factory for stub executables.

    A stub records its arguments, environment and stdin next to itself and
    then exits with the requested code, or kills itself with ``signal``.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(name: str, exit_code: int = 0, signal: Optional[str] = None) -> Path:
        tail = f"kill -{signal} $$" if signal else f"exit {exit_code}"
        path = bin_dir / name
        path.write_text(STUB_TEMPLATE.format(tail=tail))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def recording_popen() -> RecordingPopen:
    """Provide a process factory that succeeds without spawning anything."""
    return RecordingPopen()

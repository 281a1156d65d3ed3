"""
Tests for backend creation and selection.
"""

from pathlib import Path

import pytest

from vaultfs.backends import (
    BACKENDS,
    CryFsBackend,
    GoCryptFsBackend,
    available_backends,
    create_backend,
    select_backend,
)
from vaultfs.core.config import VaultFSConfig
from vaultfs.core.exceptions import ConfigurationError


def make_config(gocryptfs: Path, cryfs: Path, **kwargs) -> VaultFSConfig:
    return VaultFSConfig(
        gocryptfs={"command_path": str(gocryptfs), "fusermount_path": "fusermount3"},
        cryfs={"command_path": str(cryfs)},
        **kwargs,
    )


class TestCreateBackend:
    """Tests for instantiating backends by name."""

    def test_registry_names(self):
        assert BACKENDS["gocryptfs"] is GoCryptFsBackend
        assert BACKENDS["cryfs"] is CryFsBackend

    def test_paths_come_from_config(self, tmp_path: Path):
        config = make_config(tmp_path / "gocryptfs", tmp_path / "cryfs")

        backend = create_backend("gocryptfs", config)

        assert isinstance(backend, GoCryptFsBackend)
        assert backend.command_path == str(tmp_path / "gocryptfs")
        assert backend.fusermount_path == "fusermount3"

    def test_name_is_case_insensitive(self):
        assert isinstance(create_backend("CryFS", VaultFSConfig()), CryFsBackend)

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError, match="Unknown backend: ecryptfs"):
            create_backend("ecryptfs", VaultFSConfig())


class TestSelectBackend:
    """Tests for choosing a backend by configuration or probing."""

    def test_first_available_in_order(self, tmp_path: Path, make_stub):
        cryfs = make_stub("cryfs", exit_code=0)
        config = make_config(tmp_path / "missing-gocryptfs", cryfs)

        backend = select_backend(config)

        assert isinstance(backend, CryFsBackend)
        assert backend.command_path == str(cryfs)

    def test_order_is_respected(self, make_stub):
        gocryptfs = make_stub("gocryptfs", exit_code=0)
        cryfs = make_stub("cryfs", exit_code=0)

        config = make_config(gocryptfs, cryfs, backend_order=["cryfs", "gocryptfs"])

        assert isinstance(select_backend(config), CryFsBackend)

    def test_forced_backend_is_not_probed(self, tmp_path: Path):
        config = make_config(tmp_path / "nope", tmp_path / "nope", backend="gocryptfs")

        backend = select_backend(config)

        assert isinstance(backend, GoCryptFsBackend)
        assert backend.is_available() is False

    def test_nothing_available(self, tmp_path: Path):
        config = make_config(tmp_path / "a", tmp_path / "b")

        with pytest.raises(ConfigurationError) as excinfo:
            select_backend(config)

        assert excinfo.value.details["tried"] == ["gocryptfs", "cryfs"]

    def test_available_backends(self, tmp_path: Path, make_stub):
        gocryptfs = make_stub("gocryptfs", exit_code=0)
        config = make_config(gocryptfs, tmp_path / "missing-cryfs")

        backends = available_backends(config)

        assert [backend.name for backend in backends] == ["gocryptfs"]

    def test_uses_global_config(self, make_stub, monkeypatch: pytest.MonkeyPatch):
        cryfs = make_stub("cryfs", exit_code=0)
        monkeypatch.setenv("VAULTFS_CRYFS__COMMAND_PATH", str(cryfs))
        monkeypatch.setenv("VAULTFS_BACKEND_ORDER", '["cryfs"]')

        backend = select_backend()

        assert isinstance(backend, CryFsBackend)
        assert backend.command_path == str(cryfs)

"""
Test doubles for the external encryption tools.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


def stub_args(stub: Path) -> List[str]:
    """Arguments a stub was last invoked with."""
    return Path(f"{stub}.args").read_text().splitlines()


def stub_stdin(stub: Path) -> str:
    """Standard input a stub last received."""
    return Path(f"{stub}.stdin").read_text()


def stub_env(stub: Path) -> str:
    """Environment a stub last ran with, as ``env`` prints it."""
    return Path(f"{stub}.env").read_text()


def stub_was_called(stub: Path) -> bool:
    return Path(f"{stub}.args").exists()


class FakeProcess:
    """Stand-in for ``subprocess.Popen`` objects."""

    def __init__(self, returncode: int = 0, communicate_error: Optional[Exception] = None):
        self.returncode = returncode
        self.communicate_error = communicate_error
        self.input: Optional[bytes] = None
        self.killed = False

    def communicate(self, input: Optional[bytes] = None) -> Tuple[None, None]:
        if self.communicate_error is not None:
            raise self.communicate_error
        self.input = input
        return None, None

    def wait(self) -> int:
        return self.returncode

    def kill(self) -> None:
        self.killed = True


class RecordingPopen:
    """Process factory that records every spawn instead of running it."""

    def __init__(self, returncode: int = 0, communicate_error: Optional[Exception] = None):
        self.returncode = returncode
        self.communicate_error = communicate_error
        self.calls: List[Tuple[List[str], Dict[str, Any]]] = []
        self.processes: List[FakeProcess] = []

    def __call__(self, args: List[str], **kwargs: Any) -> FakeProcess:
        self.calls.append((list(args), kwargs))
        process = FakeProcess(self.returncode, self.communicate_error)
        self.processes.append(process)
        return process

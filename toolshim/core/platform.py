"""
Platform backends for shim creation and process replacement.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Mapping, Sequence


logger = logging.getLogger(__name__)


class PlatformBackend:
    """Capability interface for the two platform-dependent primitives."""

    def create_shim(self, src: Path, dst: Path) -> None:
        raise NotImplementedError

    def replace_process(self, argv: Sequence[bytes], env: Mapping[str, str]) -> None:
        """Replace the current process. Never returns on success."""
        raise NotImplementedError


class PosixBackend(PlatformBackend):
    """Symlinks and ``execvpe`` on POSIX systems; bare names are found on the new PATH."""

    def create_shim(self, src: Path, dst: Path) -> None:
        os.symlink(src, dst)

    def replace_process(self, argv: Sequence[bytes], env: Mapping[str, str]) -> None:
        os.execvpe(argv[0], list(argv), dict(env))


class WindowsBackend(PlatformBackend):
    """
    File symlinks and a spawn-and-wait fallback on Windows.

    There is no true process replacement on Windows: the child is spawned,
    waited for, and this process exits with the child's return code. The
    parent stays alive for the lifetime of the child.
    """

    def create_shim(self, src: Path, dst: Path) -> None:
        os.symlink(src, dst, target_is_directory=False)

    def replace_process(self, argv: Sequence[bytes], env: Mapping[str, str]) -> None:
        args: List[str] = [os.fsdecode(arg) for arg in argv]
        logger.debug(f"No exec on Windows, spawning {args[0]} and waiting")
        result = subprocess.run(args, env=dict(env))
        sys.exit(result.returncode)


def get_backend() -> PlatformBackend:
    """Return the backend for the running platform."""
    if os.name == "nt":
        return WindowsBackend()
    return PosixBackend()

"""
Removal of tool environments and their shims.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import List

from ..models.tool import ShimEntry, ToolEnvironment, Verbosity
from .errors import UninstallFailed
from .shims import ShimDirectory


def _ignore_missing(func, path, exc_info):
    exc = exc_info[1] if isinstance(exc_info, tuple) else exc_info
    if isinstance(exc, FileNotFoundError):
        return
    raise exc


def remove_tree(path: Path) -> None:
    """Delete a directory tree, tolerating entries that vanish mid-walk."""
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_ignore_missing)
    else:
        shutil.rmtree(path, onerror=_ignore_missing)


class Uninstaller:
    """Deletes tool environments and reconciles the shim directory."""

    def __init__(self, tools_dir: Path, shims: ShimDirectory):
        self.logger = logging.getLogger(__name__)
        self.tools_dir = Path(tools_dir)
        self.shims = shims

    def remove_environment(self, env_root: Path) -> List[ShimEntry]:
        """
        Remove an environment directory and every shim pointing into it.

        A missing environment is not an error; nothing is removed.

        Args:
            env_root: Root directory of the environment

        Returns:
            The shims that were removed

        Raises:
            UninstallFailed: If deleting the tree or scanning the shims fails
        """
        env_root = Path(env_root)
        if not env_root.is_dir():
            return []

        try:
            remove_tree(env_root)
            removed = self.shims.prune(env_root)
        except OSError as e:
            raise UninstallFailed(env_root) from e

        self.logger.info(f"Removed environment {env_root} and {len(removed)} shim(s)")
        return removed

    def uninstall(self, package: str, verbosity: Verbosity = Verbosity.NORMAL) -> bool:
        """
        Uninstall a tool by package name.

        Returns:
            True if something was removed, False if the package was not installed
        """
        env = ToolEnvironment.for_package(self.tools_dir, package)
        if not env.exists():
            print(f"{package} is not installed", file=sys.stderr)
            return False

        try:
            self.remove_environment(env.root)
        except UninstallFailed as e:
            raise UninstallFailed(package) from e

        if verbosity != Verbosity.QUIET:
            print(f"Uninstalled {package}", file=sys.stderr)
        return True

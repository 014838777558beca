"""
Shim directory management.

The shim directory only ever receives symlinks. Ownership of a shim is
recovered by reading its link target, so there is no index to keep in sync;
``ShimDirectory`` is the only place that knows this.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

from ..models.tool import ShimEntry
from .errors import SymlinkFailed
from .platform import PlatformBackend, get_backend


class ShimDirectory:
    """The shared directory of command shims."""

    def __init__(self, path: Path, backend: Optional[PlatformBackend] = None):
        """
        Initialize the shim directory.

        Args:
            path: Location of the shim directory
            backend: Platform backend used to create symlinks
        """
        self.logger = logging.getLogger(__name__)
        self.path = Path(path)
        self.backend = backend or get_backend()

    def publish(self, target: Path, name: str) -> ShimEntry:
        """
        Create a shim named ``name`` pointing at ``target``.

        Args:
            target: Absolute path of the executable inside a tool environment
            name: Command name relative to the shim directory

        Returns:
            The created shim entry

        Raises:
            SymlinkFailed: If the symlink cannot be created
        """
        shim_path = self.path / name
        try:
            shim_path.parent.mkdir(parents=True, exist_ok=True)
            self.backend.create_shim(Path(target), shim_path)
        except OSError as e:
            raise SymlinkFailed(target) from e

        self.logger.debug(f"Linked {shim_path} -> {target}")
        return ShimEntry(name=name, path=shim_path, target=Path(target))

    def entries(self) -> Iterator[ShimEntry]:
        """Yield every symlink in the shim directory; other entries are skipped."""
        if not self.path.is_dir():
            return
        for entry in self.path.iterdir():
            if not entry.is_symlink():
                continue
            try:
                link = os.readlink(entry)
            except FileNotFoundError:
                continue
            target = Path(os.path.normpath(self.path / link))
            yield ShimEntry(name=entry.name, path=entry, target=target)

    def owned_by(self, env_root: Path) -> List[ShimEntry]:
        """Return the shims whose target lies under ``env_root``."""
        root = Path(os.path.normpath(env_root))
        return [shim for shim in self.entries() if shim.points_under(root)]

    def prune(self, env_root: Path) -> List[ShimEntry]:
        """Remove every shim pointing into ``env_root`` and return them."""
        removed = []
        for shim in self.owned_by(env_root):
            try:
                shim.path.unlink()
            except FileNotFoundError:
                continue
            self.logger.debug(f"Removed shim {shim.path}")
            removed.append(shim)
        return removed

"""
Environment activation and process replacement for project scripts.
"""

import errno
import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from ..models.script import EnvironmentOverlay, ExecutionRequest
from ..utils.logging import flush_handlers
from .errors import ScriptNotFound
from .platform import PlatformBackend, get_backend


logger = logging.getLogger(__name__)


def activation_overlay(venv_path: Path, venv_bin: Path, current_path: Optional[str]) -> EnvironmentOverlay:
    """Build the overlay that activates ``venv_path`` for a child program."""
    if current_path is not None:
        path = f"{venv_bin}{os.pathsep}{current_path}"
    else:
        path = str(venv_bin)
    return EnvironmentOverlay(
        variables={"VIRTUAL_ENV": str(venv_path), "PATH": path},
        removed=["PYTHONHOME"]
    )


def apply_overlay(environ: Mapping[str, str], overlay: EnvironmentOverlay) -> Dict[str, str]:
    """Return a copy of ``environ`` with ``overlay`` applied."""
    env = dict(environ)
    env.update(overlay.variables)
    for name in overlay.removed:
        env.pop(name, None)
    return env


def encode_argv(argv: Sequence[str]) -> List[bytes]:
    """
    Convert arguments to the byte form expected by ``exec``.

    Arguments that cannot be represented are dropped. The program itself is
    never dropped; a failure to encode it propagates.
    """
    program = os.fsencode(argv[0])
    if b"\0" in program:
        raise ValueError(f"embedded null byte in program path: {argv[0]!r}")

    encoded = [program]
    for arg in argv[1:]:
        try:
            raw = os.fsencode(arg)
        except UnicodeEncodeError:
            logger.debug(f"Dropping argument that cannot be encoded: {arg!r}")
            continue
        if b"\0" in raw:
            logger.debug(f"Dropping argument with embedded null byte: {arg!r}")
            continue
        encoded.append(raw)
    return encoded


def _restore_environ(environ: Mapping[str, str]) -> None:
    os.environ.clear()
    os.environ.update(environ)


class ProcessReplacer:
    """Replaces the running process with a resolved script."""

    def __init__(self, backend: Optional[PlatformBackend] = None):
        self.backend = backend or get_backend()

    def replace(self, argv: Sequence[str], overlay: EnvironmentOverlay, short_name: Optional[str] = None) -> None:
        """
        Exec ``argv`` with ``overlay`` applied. Does not return on success;
        on failure ``os.environ`` is restored before the error propagates.

        Raises:
            ScriptNotFound: If ``argv[0]`` does not exist
            OSError: For any other failure of the exec call
        """
        if not argv:
            raise ValueError("cannot replace process with an empty argument vector")
        short_name = short_name or argv[0]
        args = encode_argv(argv)

        previous = dict(os.environ)
        env = apply_overlay(previous, overlay)
        os.environ.clear()
        os.environ.update(env)

        logger.debug(f"Replacing process with {argv[0]}")
        flush_handlers()

        try:
            self.backend.replace_process(args, env)
        except OSError as e:
            _restore_environ(previous)
            if isinstance(e, FileNotFoundError) or e.errno == errno.ENOENT:
                raise ScriptNotFound(short_name) from e
            raise

    def execute(self, request: ExecutionRequest) -> None:
        """Run a resolved request; see ``replace``."""
        self.replace(request.argv, request.overlay, short_name=request.command)

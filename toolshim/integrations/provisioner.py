"""
Python interpreter lookup and environment creation.
"""

import logging
import os
import re
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from ..core.errors import EnvironmentCreationFailed, InterpreterNotFound
from ..models.tool import ToolEnvironment, normalize_package_name


VERSION_REQUEST = re.compile(r"^(?:cpython@|python)?(?P<version>\d+(?:\.\d+){0,2})$")

VERSION_PROBE = "import sys; print('%d.%d.%d' % sys.version_info[:3])"


class InterpreterHandle(BaseModel):
    """A located Python interpreter."""
    executable: Path = Field(..., description="Path to the interpreter")
    version: str = Field(..., description="Full interpreter version, e.g. 3.12.1")

    def satisfies(self, request: str) -> bool:
        """Check a dotted version prefix such as ``3`` or ``3.12``."""
        wanted = request.split(".")
        return self.version.split(".")[:len(wanted)] == wanted


class PythonProvisioner:
    """Finds interpreters on this machine and creates environments from them."""

    def __init__(self, default_python: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.default_python = default_python

    def resolve(self, request: Optional[str] = None) -> InterpreterHandle:
        """
        Find an interpreter matching the request.

        Args:
            request: ``None`` for the running interpreter, a version such as
                ``3.12``, or a path to an interpreter

        Returns:
            Handle of the located interpreter

        Raises:
            InterpreterNotFound: If nothing matches
        """
        request = request or self.default_python
        if not request:
            return self._probe(Path(sys.executable), "current")

        match = VERSION_REQUEST.match(request)
        if match is None:
            candidate = Path(request).expanduser()
            if not candidate.is_file():
                raise InterpreterNotFound(request, "not a version or an interpreter path")
            return self._probe(candidate, request)

        version = match.group("version")
        current = self._probe(Path(sys.executable), request)
        if current.satisfies(version):
            return current

        minor = ".".join(version.split(".")[:2])
        for name in (f"python{minor}", f"python{version}"):
            found = shutil.which(name)
            if found:
                handle = self._probe(Path(found), request)
                if handle.satisfies(version):
                    return handle
        raise InterpreterNotFound(request)

    def create_environment(self, interpreter: InterpreterHandle, target_path: Path) -> ToolEnvironment:
        """
        Create a fresh environment at ``target_path`` without pip.

        Raises:
            EnvironmentCreationFailed: If the venv module fails
        """
        target_path = Path(target_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        cmd = [str(interpreter.executable), "-m", "venv", "--without-pip", str(target_path)]
        self.logger.info(f"Creating environment: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise EnvironmentCreationFailed(target_path) from e
        if result.returncode != 0:
            self.logger.error(f"venv failed with exit code {result.returncode}: {result.stderr.strip()}")
            raise EnvironmentCreationFailed(target_path)

        return ToolEnvironment(name=normalize_package_name(target_path.name), root=target_path)

    def _probe(self, executable: Path, request: str) -> InterpreterHandle:
        try:
            result = subprocess.run(
                [str(executable), "-c", VERSION_PROBE],
                capture_output=True,
                text=True,
                check=True
            )
        except (OSError, subprocess.CalledProcessError) as e:
            raise InterpreterNotFound(request, f"{executable} is not usable") from e

        version = result.stdout.strip()
        self.logger.debug(f"Interpreter {executable} reports version {version}")
        return InterpreterHandle(executable=Path(os.path.abspath(executable)), version=version)

"""
Installation of tools into isolated environments.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from packaging.requirements import Requirement

from ..models.tool import InstallRequest, ShimEntry, ToolEnvironment, Verbosity
from .errors import AlreadyInstalled, InstallFailed, ManifestUnreadable
from .shims import ShimDirectory
from .uninstaller import Uninstaller

if TYPE_CHECKING:
    from ..integrations.provisioner import PythonProvisioner


# Run inside the tool environment; prints every file of the distribution.
FIND_SCRIPT_SCRIPT = """
import os
import sys
from importlib.metadata import distribution

dist = distribution(sys.argv[1])
for file in dist.files:
    print(os.path.normpath(dist.locate_file(file)))
"""


def build_install_command(installer_python: Path,
                          target_python: Path,
                          requirement: str,
                          verbosity: Verbosity) -> List[str]:
    """Build the pip command line installing ``requirement`` into ``target_python``."""
    cmd = [str(installer_python), "-m", "pip", "--python", str(target_python), "install"]
    if verbosity == Verbosity.VERBOSE:
        cmd.append("--verbose")
    elif verbosity == Verbosity.QUIET:
        cmd.append("-q")
    cmd.extend(["--", requirement])
    return cmd


def bin_scripts(manifest: List[Path], bin_path: Path) -> List[str]:
    """Return the manifest entries under ``bin_path`` as relative names."""
    names = []
    for file in manifest:
        try:
            rest = file.relative_to(bin_path)
        except ValueError:
            continue
        names.append(str(rest))
    return names


class ToolInstaller:
    """Installs one package per isolated environment and publishes its scripts."""

    def __init__(self,
                 tools_dir: Path,
                 shims: ShimDirectory,
                 provisioner: "PythonProvisioner",
                 installer_python: Optional[Path] = None,
                 quiet_warnings: bool = True):
        """
        Initialize the installer.

        Args:
            tools_dir: Directory holding one environment per tool
            shims: Shared shim directory
            provisioner: Interpreter and environment provisioner
            installer_python: Interpreter whose pip performs installs
            quiet_warnings: Set PYTHONWARNINGS=ignore for pip unless verbose
        """
        self.logger = logging.getLogger(__name__)
        self.tools_dir = Path(tools_dir)
        self.shims = shims
        self.provisioner = provisioner
        self.installer_python = Path(installer_python or sys.executable)
        self.quiet_warnings = quiet_warnings
        self.uninstaller = Uninstaller(tools_dir=self.tools_dir, shims=shims)

    def install(self, request: InstallRequest) -> List[ShimEntry]:
        """
        Install a tool.

        Args:
            request: What to install and how

        Returns:
            The shims published for the tool's scripts

        Raises:
            AlreadyInstalled: If the tool exists and ``force`` is not set
            InstallFailed: If pip exits non-zero
            ManifestUnreadable: If the installed file list cannot be read
            SymlinkFailed: If a shim cannot be created
        """
        requirement = Requirement(request.requirement)
        env = ToolEnvironment.for_package(self.tools_dir, requirement.name)

        if env.exists() and not request.force:
            raise AlreadyInstalled(requirement.name)

        self.uninstaller.remove_environment(env.root)

        interpreter = self.provisioner.resolve(request.python)
        self.logger.info(f"Using Python {interpreter.version} at {interpreter.executable}")
        env = self.provisioner.create_environment(interpreter, env.root)

        self._run_installer(env, str(requirement), request.verbosity)

        manifest = self.read_manifest(env, requirement.name)
        published = []
        for name in bin_scripts(manifest, env.bin_path):
            shim = self.shims.publish(env.bin_path / name, name)
            published.append(shim)
            if request.verbosity != Verbosity.QUIET:
                print(f"installed script {name}", file=sys.stderr)

        self.logger.info(f"Installed {requirement.name} with {len(published)} script(s)")
        return published

    def read_manifest(self, env: ToolEnvironment, package: str) -> List[Path]:
        """
        List the absolute paths of every file of ``package`` inside ``env``.

        Raises:
            ManifestUnreadable: If the introspection fails or prints non UTF-8 output
        """
        try:
            result = subprocess.run(
                [str(env.python_path), "-c", FIND_SCRIPT_SCRIPT, package],
                stdout=subprocess.PIPE
            )
        except OSError as e:
            raise ManifestUnreadable(package, str(e)) from e

        if result.returncode != 0:
            raise ManifestUnreadable(package, f"introspection exited with {result.returncode}")

        try:
            output = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestUnreadable(package, "non utf-8 package manifest") from e

        return [Path(line) for line in output.splitlines() if line]

    def _run_installer(self, env: ToolEnvironment, requirement: str, verbosity: Verbosity) -> None:
        cmd = build_install_command(self.installer_python, env.python_path, requirement, verbosity)
        self.logger.info(f"Running installer: {' '.join(cmd)}")

        result = subprocess.run(cmd, env=self._installer_env(verbosity))
        if result.returncode != 0:
            self.logger.error(f"Installer exited with {result.returncode}; leaving {env.root} for inspection")
            raise InstallFailed(requirement, result.returncode)

    def _installer_env(self, verbosity: Verbosity) -> Dict[str, str]:
        env = dict(os.environ)
        if self.quiet_warnings and verbosity != Verbosity.VERBOSE:
            env["PYTHONWARNINGS"] = "ignore"
        return env

"""
Exception hierarchy for toolshim operations.

Every error names the step that failed; the underlying cause, when there is
one, is chained with ``raise ... from``.
"""

from pathlib import Path
from typing import Union


class ToolshimError(Exception):
    """Base class for all errors surfaced to the CLI."""


class AlreadyInstalled(ToolshimError):
    def __init__(self, package: str):
        self.package = package
        super().__init__(f"package already installed: {package} (use --force to reinstall)")


class InstallFailed(ToolshimError):
    def __init__(self, package: str, returncode: int):
        self.package = package
        self.returncode = returncode
        super().__init__(f"tool installation failed for {package} (installer exited with {returncode})")


class ManifestUnreadable(ToolshimError):
    def __init__(self, package: str, reason: str):
        self.package = package
        super().__init__(f"unable to dump package manifest from installed package {package}: {reason}")


class SymlinkFailed(ToolshimError):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"unable to symlink tool to {path}")


class UninstallFailed(ToolshimError):
    def __init__(self, name: Union[str, Path]):
        self.name = str(name)
        super().__init__(f"unable to uninstall {name}")


class ScriptNotFound(ToolshimError):
    def __init__(self, short_name: str):
        self.short_name = short_name
        super().__init__(f"No script with name '{short_name}' found in virtualenv")


class InterpreterNotFound(ToolshimError):
    def __init__(self, request: str, reason: str = "no matching interpreter found"):
        self.request = request
        super().__init__(f"unable to find a Python interpreter for '{request}': {reason}")


class EnvironmentCreationFailed(ToolshimError):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"unable to create environment at {path}")


class ProjectNotFound(ToolshimError):
    def __init__(self, start: Union[str, Path]):
        self.start = Path(start)
        super().__init__(f"did not find pyproject.toml in {start} or any parent directory")

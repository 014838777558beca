"""
Tool environment and shim models.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from packaging.utils import canonicalize_name
from pydantic import BaseModel, Field


BIN_DIR_NAME = "Scripts" if os.name == "nt" else "bin"
PYTHON_EXE_NAME = "python.exe" if os.name == "nt" else "python"


def normalize_package_name(name: str) -> str:
    """Return the canonical directory key for a package name."""
    return canonicalize_name(name)


class Verbosity(str, Enum):
    """How chatty a command should be."""
    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class ToolEnvironment(BaseModel):
    """An isolated environment holding one installed tool."""
    name: str = Field(..., description="Normalized package name")
    root: Path = Field(..., description="Environment root directory")

    @classmethod
    def for_package(cls, tools_dir: Path, package: str) -> "ToolEnvironment":
        name = normalize_package_name(package)
        return cls(name=name, root=Path(tools_dir) / name)

    @property
    def bin_path(self) -> Path:
        return self.root / BIN_DIR_NAME

    @property
    def python_path(self) -> Path:
        return self.bin_path / PYTHON_EXE_NAME

    def exists(self) -> bool:
        return self.root.is_dir()


class ShimEntry(BaseModel):
    """A symlink in the shim directory pointing into a tool environment."""
    name: str = Field(..., description="Command name, relative to the shim directory")
    path: Path = Field(..., description="Location of the symlink itself")
    target: Path = Field(..., description="Absolute path the symlink points at")

    def points_under(self, root: Path) -> bool:
        return self.target.is_relative_to(root)


class InstallRequest(BaseModel):
    """A request to install one package as a tool."""
    requirement: str = Field(..., description="PEP 508 requirement string")
    python: Optional[str] = Field(None, description="Requested interpreter version or path")
    force: bool = Field(default=False, description="Replace an existing installation")
    verbosity: Verbosity = Field(default=Verbosity.NORMAL)

    class Config:
        json_schema_extra = {
            "example": {
                "requirement": "black>=24",
                "python": "3.12",
                "force": False,
                "verbosity": "normal"
            }
        }

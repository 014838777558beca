"""
Data models for toolshim.
"""

from .tool import (
    InstallRequest,
    ShimEntry,
    ToolEnvironment,
    Verbosity,
    normalize_package_name,
)
from .script import EnvironmentOverlay, ExecutionRequest, ScriptDefinition, ScriptKind

__all__ = [
    "InstallRequest",
    "ShimEntry",
    "ToolEnvironment",
    "Verbosity",
    "normalize_package_name",
    "EnvironmentOverlay",
    "ExecutionRequest",
    "ScriptDefinition",
    "ScriptKind"
]

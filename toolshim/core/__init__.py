"""
Core modules for toolshim.
"""

from .installer import ToolInstaller
from .uninstaller import Uninstaller
from .shims import ShimDirectory
from .resolver import ScriptResolver
from .process import ProcessReplacer
from .platform import PlatformBackend, get_backend

__all__ = [
    "ToolInstaller",
    "Uninstaller",
    "ShimDirectory",
    "ScriptResolver",
    "ProcessReplacer",
    "PlatformBackend",
    "get_backend"
]

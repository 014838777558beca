"""
Integrations with the Python installation and the project on disk.
"""

from .provisioner import InterpreterHandle, PythonProvisioner
from .pyproject import PyProject

__all__ = ["InterpreterHandle", "PythonProvisioner", "PyProject"]

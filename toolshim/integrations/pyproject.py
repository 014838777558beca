"""
Project discovery and script tables from pyproject.toml.
"""

import logging
import shlex
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.errors import ProjectNotFound
from ..models.script import ScriptDefinition
from ..models.tool import BIN_DIR_NAME


logger = logging.getLogger(__name__)


def _parse_command(name: str, value: Any) -> Optional[ScriptDefinition]:
    if isinstance(value, dict):
        value = value.get("cmd")
    if isinstance(value, str):
        return ScriptDefinition.command(shlex.split(value))
    if isinstance(value, list) and all(isinstance(arg, str) for arg in value):
        return ScriptDefinition.command(value)
    logger.warning(f"Ignoring script {name!r}: expected a string or a list of strings")
    return None


class PyProject:
    """A project rooted at a directory containing pyproject.toml."""

    def __init__(self, root: Path, data: Dict[str, Any],
                 venv_dir_name: str = ".venv",
                 scripts_table: str = "toolshim"):
        self.root = Path(root)
        self.data = data
        self.venv_dir_name = venv_dir_name
        self.scripts_table = scripts_table
        self._scripts = self._load_scripts()

    @classmethod
    def load(cls, path: Path, **kwargs) -> "PyProject":
        path = Path(path)
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return cls(path.parent, data, **kwargs)

    @classmethod
    def discover(cls, start: Optional[Path] = None, **kwargs) -> "PyProject":
        """
        Find the nearest pyproject.toml at or above ``start``.

        Raises:
            ProjectNotFound: If no parent directory holds a pyproject.toml
        """
        start = Path(start or Path.cwd()).resolve()
        for directory in [start, *start.parents]:
            candidate = directory / "pyproject.toml"
            if candidate.is_file():
                logger.debug(f"Using project file {candidate}")
                return cls.load(candidate, **kwargs)
        raise ProjectNotFound(start)

    def venv_path(self) -> Path:
        return self.root / self.venv_dir_name

    def venv_bin_path(self) -> Path:
        return self.venv_path() / BIN_DIR_NAME

    def get_script_cmd(self, name: str) -> Optional[ScriptDefinition]:
        return self._scripts.get(name)

    def list_scripts(self) -> List[str]:
        return list(self._scripts)

    @property
    def scripts(self) -> Dict[str, ScriptDefinition]:
        return dict(self._scripts)

    def _load_scripts(self) -> Dict[str, ScriptDefinition]:
        scripts: Dict[str, ScriptDefinition] = {}

        for name, entry_point in (self.data.get("project", {}).get("scripts") or {}).items():
            scripts[name] = ScriptDefinition.passthrough(str(entry_point))

        tool_table = self.data.get("tool", {}).get(self.scripts_table, {})
        for name, value in (tool_table.get("scripts") or {}).items():
            script = _parse_command(name, value)
            if script is not None:
                scripts[name] = script

        return scripts

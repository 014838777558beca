"""
Resolution of project script names into argument vectors.
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from ..models.script import ScriptDefinition


logger = logging.getLogger(__name__)


def list_scripts(scripts: Mapping[str, ScriptDefinition]) -> List[str]:
    """
    Render the script table for display, sorted case-insensitively.

    Passthrough aliases show their bare name; literal commands show the
    command next to the name, e.g. ``lint (ruff check)``.
    """
    lines = []
    for name, script in sorted(scripts.items(), key=lambda item: item[0].lower()):
        if script.is_passthrough:
            lines.append(name)
        else:
            lines.append(f"{name} ({script})")
    return lines


def resolve_argv(command: str,
                 args: Sequence[str],
                 script: Optional[ScriptDefinition],
                 venv_bin: Path) -> List[str]:
    """
    Compute the argument vector to execute for ``command``.

    Args:
        command: Command name typed by the user
        args: Trailing arguments
        script: The project's definition for ``command``, if any
        venv_bin: Executable directory of the project environment

    Returns:
        The final argv; ``argv[0]`` is either an absolute path into
        ``venv_bin`` or a bare name left to PATH lookup
    """
    if script is not None and not script.is_passthrough and script.args:
        target = Path(venv_bin) / script.args[0]
        if target.is_file():
            return [str(target)] + script.args[1:] + list(args)
        return list(script.args) + list(args)

    if script is not None and script.is_passthrough:
        return [str(Path(venv_bin) / command)] + list(args)

    # empty literal commands fall through here
    return [command] + list(args)


class ScriptResolver:
    """Resolves commands against one project's script table."""

    def __init__(self, scripts: Mapping[str, ScriptDefinition], venv_bin: Path):
        self.scripts = dict(scripts)
        self.venv_bin = Path(venv_bin)

    def listing(self) -> List[str]:
        return list_scripts(self.scripts)

    def resolve(self, command: str, args: Sequence[str] = ()) -> List[str]:
        argv = resolve_argv(command, args, self.scripts.get(command), self.venv_bin)
        logger.debug(f"Resolved {command!r} to {argv}")
        return argv

    def dispatch(self, cmd: Sequence[str], list_only: bool = False) -> Tuple[Optional[List[str]], List[str]]:
        """
        Apply the full run policy to a command line.

        Returns:
            ``(argv, [])`` when a command should be executed, or
            ``(None, lines)`` when the script listing was requested
        """
        if list_only or not cmd:
            return None, self.listing()
        return self.resolve(cmd[0], cmd[1:]), []

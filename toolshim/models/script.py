"""
Project script and execution models.
"""

import shlex
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ScriptKind(str, Enum):
    """How a project script is dispatched."""
    PASSTHROUGH = "passthrough"
    COMMAND = "command"


class ScriptDefinition(BaseModel):
    """A named entry of a project's script table."""
    kind: ScriptKind = Field(..., description="Passthrough alias or literal command")
    args: List[str] = Field(default_factory=list, description="Literal argument sequence")
    entry_point: Optional[str] = Field(None, description="Entry point reference of a passthrough alias")

    @classmethod
    def passthrough(cls, entry_point: Optional[str] = None) -> "ScriptDefinition":
        return cls(kind=ScriptKind.PASSTHROUGH, entry_point=entry_point)

    @classmethod
    def command(cls, args: List[str]) -> "ScriptDefinition":
        return cls(kind=ScriptKind.COMMAND, args=list(args))

    @property
    def is_passthrough(self) -> bool:
        return self.kind == ScriptKind.PASSTHROUGH

    def __str__(self) -> str:
        if self.is_passthrough:
            return self.entry_point or ""
        return shlex.join(self.args)


class EnvironmentOverlay(BaseModel):
    """Environment variables to set and to remove before running a script."""
    variables: Dict[str, str] = Field(default_factory=dict)
    removed: List[str] = Field(default_factory=list)


class ExecutionRequest(BaseModel):
    """A user-issued command together with its resolved argument vector."""
    command: str = Field(..., description="Command name as typed by the user")
    args: List[str] = Field(default_factory=list, description="Trailing arguments")
    argv: List[str] = Field(..., min_length=1, description="Final argument vector")
    overlay: EnvironmentOverlay = Field(default_factory=EnvironmentOverlay)

    class Config:
        json_schema_extra = {
            "example": {
                "command": "lint",
                "args": ["src"],
                "argv": ["/project/.venv/bin/ruff", "check", "src"],
                "overlay": {
                    "variables": {"VIRTUAL_ENV": "/project/.venv"},
                    "removed": ["PYTHONHOME"]
                }
            }
        }

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from toolshim.models import (
    ExecutionRequest,
    ScriptDefinition,
    ShimEntry,
    ToolEnvironment,
    normalize_package_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Black", "black"), ("zope.interface", "zope-interface"), ("Foo__Bar-baz", "foo-bar-baz")],
)
def test_normalize_package_name(raw: str, expected: str) -> None:
    assert normalize_package_name(raw) == expected


def test_tool_environment_is_keyed_by_normalized_name(tmp_path: Path) -> None:
    env = ToolEnvironment.for_package(tmp_path, "Zope.Interface")

    assert env.name == "zope-interface"
    assert env.root == tmp_path / "zope-interface"
    assert env.bin_path.parent == env.root
    assert env.python_path.parent == env.bin_path
    assert env.exists() is False


def test_shim_entry_points_under_is_component_wise() -> None:
    shim = ShimEntry(name="black", path=Path("/s/black"), target=Path("/tools/black/bin/black"))

    assert shim.points_under(Path("/tools/black"))
    assert not shim.points_under(Path("/tools/bla"))


def test_script_definition_rendering() -> None:
    assert str(ScriptDefinition.command(["pytest", "-k", "not slow"])) == "pytest -k 'not slow'"
    assert str(ScriptDefinition.passthrough("pkg.cli:main")) == "pkg.cli:main"
    assert ScriptDefinition.passthrough().is_passthrough


def test_execution_request_requires_a_program() -> None:
    with pytest.raises(ValidationError):
        ExecutionRequest(command="x", argv=[])

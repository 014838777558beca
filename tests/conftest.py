from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

import pytest

from toolshim.core.platform import PosixBackend
from toolshim.core.shims import ShimDirectory
from toolshim.integrations.provisioner import InterpreterHandle
from toolshim.models.tool import BIN_DIR_NAME, PYTHON_EXE_NAME, ToolEnvironment, normalize_package_name


class RecordingBackend(PosixBackend):
    """Creates real symlinks but records process replacement instead of exec'ing."""

    def __init__(self, error: OSError | None = None) -> None:
        self.error = error
        self.calls: list[tuple[list[bytes], dict[str, str]]] = []

    def replace_process(self, argv: Sequence[bytes], env: Mapping[str, str]) -> None:
        self.calls.append((list(argv), dict(env)))
        if self.error is not None:
            raise self.error


class FakeProvisioner:
    """Creates the bare layout of an environment without running Python."""

    def __init__(self) -> None:
        self.requests: list[str | None] = []
        self.created: list[Path] = []

    def resolve(self, request: str | None = None) -> InterpreterHandle:
        self.requests.append(request)
        return InterpreterHandle(executable=Path("/usr/bin/python3"), version="3.12.1")

    def create_environment(self, interpreter: InterpreterHandle, target_path: Path) -> ToolEnvironment:
        del interpreter
        bin_dir = target_path / BIN_DIR_NAME
        bin_dir.mkdir(parents=True)
        (bin_dir / PYTHON_EXE_NAME).write_text("")
        self.created.append(target_path)
        return ToolEnvironment(name=normalize_package_name(target_path.name), root=target_path)


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    path = tmp_path / "app"
    (path / "shims").mkdir(parents=True)
    (path / "tools").mkdir(parents=True)
    return path


@pytest.fixture
def shims(app_dir: Path) -> ShimDirectory:
    return ShimDirectory(app_dir / "shims", backend=RecordingBackend())


@pytest.fixture
def provisioner() -> FakeProvisioner:
    return FakeProvisioner()


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_tool_env(tools_dir: Path, name: str, scripts: Sequence[str] = ()) -> ToolEnvironment:
    env = ToolEnvironment.for_package(tools_dir, name)
    env.bin_path.mkdir(parents=True)
    for script in scripts:
        (env.bin_path / script).write_text("#!/bin/sh\n")
    return env


def completed(argv: Sequence[str], returncode: int = 0, stdout: Any = b"") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(list(argv), returncode, stdout=stdout, stderr=None)


def link(shim_dir: Path, name: str, target: Path) -> Path:
    path = shim_dir / name
    os.symlink(target, path)
    return path

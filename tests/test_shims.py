from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import link, make_tool_env
from toolshim.core.errors import SymlinkFailed
from toolshim.core.shims import ShimDirectory


def test_publish_creates_symlink_pointing_at_target(app_dir: Path, shims: ShimDirectory) -> None:
    env = make_tool_env(app_dir / "tools", "black", scripts=["black"])
    target = env.bin_path / "black"

    shim = shims.publish(target, "black")

    assert shim.path == app_dir / "shims" / "black"
    assert shim.path.is_symlink()
    assert Path(os.readlink(shim.path)) == target
    assert shim.target == target


def test_publish_creates_missing_shim_directory(tmp_path: Path) -> None:
    shims = ShimDirectory(tmp_path / "not-yet" / "shims")
    env = make_tool_env(tmp_path / "tools", "ruff", scripts=["ruff"])

    shims.publish(env.bin_path / "ruff", "ruff")

    assert (tmp_path / "not-yet" / "shims" / "ruff").is_symlink()


def test_publish_name_collision_raises_symlink_failed(app_dir: Path, shims: ShimDirectory) -> None:
    env = make_tool_env(app_dir / "tools", "black", scripts=["black"])
    (app_dir / "shims" / "black").write_text("someone else's file")

    with pytest.raises(SymlinkFailed) as excinfo:
        shims.publish(env.bin_path / "black", "black")

    assert excinfo.value.path == env.bin_path / "black"
    assert isinstance(excinfo.value.__cause__, FileExistsError)


def test_entries_skip_regular_files_and_directories(app_dir: Path, shims: ShimDirectory) -> None:
    env = make_tool_env(app_dir / "tools", "black", scripts=["black"])
    link(app_dir / "shims", "black", env.bin_path / "black")
    (app_dir / "shims" / "foreign").write_text("not ours")
    (app_dir / "shims" / "subdir").mkdir()

    names = [shim.name for shim in shims.entries()]

    assert names == ["black"]


def test_entries_on_missing_directory_is_empty(tmp_path: Path) -> None:
    assert list(ShimDirectory(tmp_path / "missing").entries()) == []


def test_owned_by_resolves_relative_link_targets(app_dir: Path, shims: ShimDirectory) -> None:
    env = make_tool_env(app_dir / "tools", "black", scripts=["black"])
    os.symlink(Path("..") / "tools" / "black" / env.bin_path.name / "black", app_dir / "shims" / "black")

    owned = shims.owned_by(env.root)

    assert [shim.name for shim in owned] == ["black"]
    assert owned[0].target == env.bin_path / "black"


def test_owned_by_does_not_match_sibling_with_common_prefix(app_dir: Path, shims: ShimDirectory) -> None:
    black = make_tool_env(app_dir / "tools", "black", scripts=["black"])
    blacken = make_tool_env(app_dir / "tools", "black-extra", scripts=["black-extra"])
    link(app_dir / "shims", "black", black.bin_path / "black")
    link(app_dir / "shims", "black-extra", blacken.bin_path / "black-extra")

    assert [shim.name for shim in shims.owned_by(black.root)] == ["black"]


def test_prune_removes_only_shims_of_the_environment(app_dir: Path, shims: ShimDirectory) -> None:
    black = make_tool_env(app_dir / "tools", "black", scripts=["black", "blackd"])
    ruff = make_tool_env(app_dir / "tools", "ruff", scripts=["ruff"])
    link(app_dir / "shims", "black", black.bin_path / "black")
    link(app_dir / "shims", "blackd", black.bin_path / "blackd")
    link(app_dir / "shims", "ruff", ruff.bin_path / "ruff")
    link(app_dir / "shims", "system-tool", Path("/usr/bin/env"))

    removed = shims.prune(black.root)

    assert sorted(shim.name for shim in removed) == ["black", "blackd"]
    assert sorted(p.name for p in (app_dir / "shims").iterdir()) == ["ruff", "system-tool"]

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from stencil.core.utils.io import ensure_directory, iter_yaml_files, read_yaml
from stencil.core.utils.paths import (
    PROJECT_ROOT_ENV,
    get_project_config_dir,
    resolve_project_root,
)


# =============================================================================
# io
# =============================================================================


def test_read_yaml_missing_file_returns_default(tmp_path: Path) -> None:
    assert read_yaml(tmp_path / "nope.yaml", default={}) == {}
    with pytest.raises(FileNotFoundError):
        read_yaml(tmp_path / "nope.yaml", raise_on_error=True)


def test_read_yaml_empty_file_returns_default(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert read_yaml(path, default={"x": 1}) == {"x": 1}


def test_read_yaml_invalid(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("a: [1\n", encoding="utf-8")
    assert read_yaml(path, default="fallback") == "fallback"
    with pytest.raises(yaml.YAMLError):
        read_yaml(path, raise_on_error=True)


def test_iter_yaml_files_prefers_yaml_extension(tmp_path: Path) -> None:
    for name in ("b.yml", "a.yaml", "a.yml", "notes.txt"):
        (tmp_path / name).write_text("x: 1\n", encoding="utf-8")
    assert [p.name for p in iter_yaml_files(tmp_path)] == ["a.yaml", "b.yml"]
    assert iter_yaml_files(tmp_path / "missing") == []


def test_ensure_directory_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"
    assert ensure_directory(target) == target
    assert target.is_dir()
    ensure_directory(target)


# =============================================================================
# paths
# =============================================================================


def test_explicit_root_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROJECT_ROOT_ENV, str(tmp_path / "env"))
    assert resolve_project_root(tmp_path) == tmp_path.resolve()


def test_env_root_beats_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROJECT_ROOT_ENV, str(tmp_path / "env"))
    assert resolve_project_root(start=tmp_path) == (tmp_path / "env").resolve()


def test_nearest_marked_ancestor(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    nested = root / "src" / "pkg"
    nested.mkdir(parents=True)
    (root / ".git").mkdir()
    assert resolve_project_root(start=nested) == root.resolve()

    (root / "src" / ".stencil").mkdir()
    assert resolve_project_root(start=nested) == (root / "src").resolve()


def test_project_config_dir(tmp_path: Path) -> None:
    assert get_project_config_dir(tmp_path) == tmp_path / ".stencil"

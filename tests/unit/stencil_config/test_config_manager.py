"""ConfigManager layering, env overrides and schema validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from stencil.core.config import ConfigManager
from stencil.core.exceptions import ConfigError


def test_bundled_defaults(project_root: Path) -> None:
    cfg = ConfigManager(project_root)
    assert cfg.get("logging.level") == "WARNING"
    assert cfg.get("logging.file") is None
    assert cfg.get("render.encoding") == "utf-8"
    assert cfg.get("bench") == {
        "placeholders": 2,
        "iterations": 100000,
        "warmup": 10000,
        "valueLength": 10,
        "seed": None,
    }


def test_missing_key_returns_default(project_root: Path) -> None:
    cfg = ConfigManager(project_root)
    assert cfg.get("bench.nope") is None
    assert cfg.get("render.encoding.deeper", "x") == "x"


def test_project_layer_overrides_defaults(project_root: Path, write_project_config) -> None:
    write_project_config("bench.yaml", "bench:\n  iterations: 50\n")
    cfg = ConfigManager(project_root)
    assert cfg.get("bench.iterations") == 50
    assert cfg.get("bench.warmup") == 10000


def test_project_files_apply_in_alphabetical_order(project_root: Path, write_project_config) -> None:
    write_project_config("a.yaml", "bench:\n  seed: 1\n")
    write_project_config("b.yaml", "bench:\n  seed: 2\n")
    assert ConfigManager(project_root).get("bench.seed") == 2


def test_env_overrides_beat_project_layer(
    project_root: Path, write_project_config, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_project_config("bench.yaml", "bench:\n  iterations: 50\n")
    monkeypatch.setenv("STENCIL_BENCH__ITERATIONS", "7")
    monkeypatch.setenv("STENCIL_BENCH__VALUELENGTH", "3")
    monkeypatch.setenv("STENCIL_LOGGING__FILE", "logs/stencil.log")

    cfg = ConfigManager(project_root)
    assert cfg.get("bench.iterations") == 7
    assert cfg.get("bench.valueLength") == 3
    assert "valuelength" not in cfg.get("bench")
    assert cfg.get("logging.file") == "logs/stencil.log"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("False", False),
        ("null", None),
        ("42", 42),
        ("-1.5", -1.5),
        ('{"a": 1}', {"a": 1}),
        ("[1, 2]", [1, 2]),
        ("[not json", "[not json"),
        ("plain", "plain"),
    ],
)
def test_env_value_coercion(project_root: Path, raw: str, expected) -> None:
    assert ConfigManager(project_root)._coerce_type(raw) == expected


def test_malformed_env_key_raises(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STENCIL_BENCH____SEED", "1")
    with pytest.raises(ConfigError, match="empty segment"):
        ConfigManager(project_root).get_all()


def test_schema_violation_raises(project_root: Path, write_project_config) -> None:
    write_project_config("bench.yaml", "bench:\n  iterations: 0\n")
    with pytest.raises(ConfigError) as exc_info:
        ConfigManager(project_root).get_all()
    assert "bench.iterations" in str(exc_info.value)
    assert exc_info.value.context["path"] == "bench.iterations"


def test_unknown_section_key_is_rejected(project_root: Path, write_project_config) -> None:
    write_project_config("render.yaml", "render:\n  colour: red\n")
    with pytest.raises(ConfigError):
        ConfigManager(project_root).get_all()


def test_validation_can_be_skipped(project_root: Path, write_project_config) -> None:
    write_project_config("bench.yaml", "bench:\n  iterations: 0\n")
    cfg = ConfigManager(project_root).load_config(validate=False)
    assert cfg["bench"]["iterations"] == 0


def test_invalid_yaml_raises_config_error(project_root: Path, write_project_config) -> None:
    path = write_project_config("broken.yaml", "bench: [unclosed\n")
    with pytest.raises(ConfigError) as exc_info:
        ConfigManager(project_root).get_all()
    assert exc_info.value.context["path"] == str(path)


def test_non_mapping_file_raises_config_error(project_root: Path, write_project_config) -> None:
    write_project_config("list.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError, match="must contain a mapping"):
        ConfigManager(project_root).get_all()


def test_env_project_root_selects_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    other = tmp_path / "other"
    (other / ".stencil" / "config").mkdir(parents=True)
    (other / ".stencil" / "config" / "render.yaml").write_text(
        "render:\n  encoding: latin-1\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STENCIL_PROJECT_ROOT", str(other))

    cfg = ConfigManager()
    assert cfg.repo_root == other.resolve()
    assert cfg.get("render.encoding") == "latin-1"


def test_get_all_is_cached(project_root: Path, write_project_config) -> None:
    cfg = ConfigManager(project_root)
    first = cfg.get_all()
    write_project_config("bench.yaml", "bench:\n  iterations: 5\n")
    assert cfg.get_all() is first
    assert ConfigManager(project_root).get("bench.iterations") == 5


def test_unknown_encoding_is_rejected(project_root: Path, write_project_config) -> None:
    write_project_config("render.yaml", "render:\n  encoding: bogus\n")
    with pytest.raises(ConfigError) as exc_info:
        ConfigManager(project_root).get_all()
    assert exc_info.value.context["path"] == "render.encoding"

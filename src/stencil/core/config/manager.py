"""
Stencil configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import codecs
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema
import yaml

from stencil.core.exceptions import ConfigError
from stencil.core.utils.io import iter_yaml_files, read_yaml
from stencil.core.utils.merge import deep_merge
from stencil.core.utils.paths import get_project_config_dir, resolve_project_root
from stencil.core.utils.profiling import span
from stencil.data import get_data_path
from stencil.data import read_yaml as read_bundled_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "STENCIL_"
# Environment variables with this prefix that are not config overrides.
_RESERVED_ENV_KEYS = {"STENCIL_PROJECT_ROOT"}


class ConfigManager:
    """Load, merge, and validate Stencil configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: STENCIL_<SECTION>__<KEY>
    2. Project config: <repo_root>/.stencil/config/*.yaml (alphabetical order)
    3. Bundled defaults: stencil.data/config/*.yaml (alphabetical order)

    The merged result is validated against
    ``stencil.data/schemas/config.schema.yaml``.
    """

    SCHEMA_FILE = "config.schema.yaml"

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = resolve_project_root(repo_root)
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"
        self.schemas_dir = get_data_path("schemas")
        self._cache: Optional[Dict[str, Any]] = None

    # ---------- env overrides ----------

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if low in {"null", "none"}:
            return None
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return s
        return s

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__") if "__" in raw else raw.split("_")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'",
                context={"key": f"{ENV_PREFIX}{raw}"},
            )
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV_KEYS:
                continue
            raw = key[len(ENV_PREFIX) :]
            if not raw:
                continue
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            # Env keys are lowercased; match existing keys case-insensitively.
            key_candidates = {k.lower(): k for k in cur if isinstance(k, str)}
            key = key_candidates.get(part, part)
            nxt = cur.get(key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[key] = nxt
            cur = nxt
        leaf_candidates = {k.lower(): k for k in cur if isinstance(k, str)}
        cur[leaf_candidates.get(path[-1], path[-1])] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            self._set_nested(cfg, path, value)
            logger.debug("Applied env override %s%s", ENV_PREFIX, "__".join(path).upper())
        return cfg

    # ---------- loading ----------

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            try:
                module_cfg = read_yaml(path, default={}, raise_on_error=True) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
            if not isinstance(module_cfg, dict):
                raise ConfigError(
                    f"Config file must contain a mapping: {path}",
                    context={"path": str(path)},
                )
            logger.debug("Loaded config layer %s", path)
            cfg = deep_merge(cfg, module_cfg)
        return cfg

    def load_schema(self) -> Dict[str, Any]:
        return read_bundled_yaml("schemas", self.SCHEMA_FILE)

    def validate(self, cfg: Dict[str, Any]) -> None:
        validator = jsonschema.Draft202012Validator(self.load_schema())
        errors = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
        if errors:
            first = errors[0]
            location = ".".join(str(p) for p in first.path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {location}: {first.message}",
                context={"path": location, "errors": len(errors)},
            )
        encoding = cfg.get("render", {}).get("encoding")
        if encoding:
            try:
                codecs.lookup(encoding)
            except LookupError as exc:
                raise ConfigError(
                    f"Invalid configuration at render.encoding: unknown encoding '{encoding}'",
                    context={"path": "render.encoding"},
                ) from exc

    def load_config(self, *, validate: bool = True) -> Dict[str, Any]:
        """Load the merged configuration.

        Args:
            validate: Validate the merged result against the bundled schema

        Raises:
            ConfigError: On invalid YAML, non-mapping files, malformed env
                keys, or schema violations
        """
        with span("config.load"):
            cfg: Dict[str, Any] = {}
            cfg = self._load_directory(self.core_config_dir, cfg)
            cfg = self._load_directory(self.project_config_dir, cfg)
            cfg = self.apply_env_overrides(cfg)
            if validate:
                self.validate(cfg)
        return cfg

    def get_all(self) -> Dict[str, Any]:
        if self._cache is None:
            self._cache = self.load_config()
        return self._cache

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated path (e.g. ``bench.iterations``)."""
        current: Any = self.get_all()
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current


__all__ = ["ConfigManager", "ENV_PREFIX"]

"""Shared helpers for CLI commands."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from stencil.core.config import ConfigManager
from stencil.core.exceptions import ReplacementError, TemplateSourceError
from stencil.core.template import Template
from stencil.core.utils.paths import resolve_project_root
from stencil.core.utils.profiling import span

logger = logging.getLogger(__name__)


def get_repo_root(args: argparse.Namespace) -> Path:
    raw = getattr(args, "repo_root", None)
    return resolve_project_root(Path(raw) if raw else None)


def get_config(args: argparse.Namespace) -> ConfigManager:
    return ConfigManager(get_repo_root(args))


def read_source_text(source: str, *, encoding: str = "utf-8") -> str:
    """Read template text from a path, or from stdin when ``source`` is '-'."""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise TemplateSourceError(
            f"Cannot read template {path}: {exc}",
            context={"path": str(path)},
        ) from exc


def load_template(args: argparse.Namespace, *, encoding: str = "utf-8") -> Template:
    """Compile the template named by ``args.source`` (honours ``--inline``)."""
    if getattr(args, "inline", False):
        text = args.source
    else:
        text = read_source_text(args.source, encoding=encoding)
    with span("template.compile", chars=len(text)):
        template = Template.from_string(text)
    logger.info("Compiled template from %s", "<inline>" if getattr(args, "inline", False) else args.source)
    return template


def parse_var(entry: str) -> tuple[str, str]:
    """Parse ``KEY=VALUE``. The value may itself contain '='."""
    key, sep, value = entry.partition("=")
    if not sep or not key:
        raise ReplacementError(
            f"Invalid --var '{entry}': expected KEY=VALUE",
            source="--var",
            entry=entry,
        )
    return key, value


def load_vars_file(path: Path) -> Dict[str, Optional[str]]:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise TemplateSourceError(f"Cannot read vars file {path}: {exc}", context={"path": str(path)}) from exc
    except yaml.YAMLError as exc:
        raise ReplacementError(f"Invalid YAML in vars file {path}: {exc}", source=str(path)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ReplacementError(f"Vars file must contain a mapping: {path}", source=str(path))
    return {str(k): (None if v is None else str(v)) for k, v in data.items()}


def collect_replacements(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge ``--vars FILE`` and ``--var KEY=VALUE`` (the latter wins)."""
    replacements: Dict[str, Any] = {}
    vars_file = getattr(args, "vars_file", None)
    if vars_file:
        replacements.update(load_vars_file(Path(vars_file)))
    for entry in getattr(args, "vars", None) or []:
        key, value = parse_var(entry)
        replacements[key] = value
    return replacements


__all__ = [
    "get_repo_root",
    "get_config",
    "read_source_text",
    "load_template",
    "parse_var",
    "load_vars_file",
    "collect_replacements",
]

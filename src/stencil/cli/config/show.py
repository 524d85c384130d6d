"""
Stencil config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, project overrides
(``.stencil/config/*.yaml``) and ``STENCIL_*`` environment variables.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

import yaml

from stencil.cli import OutputFormatter, add_standard_flags, get_config
from stencil.core.exceptions import ConfigError

SUMMARY = "Show current configuration"


def _nest_key(key: str, value: Any) -> Any:
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    out = value
    for part in reversed([p for p in key.split(".") if p]):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'bench.iterations')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format (default: table)",
    )
    add_standard_flags(parser)


def _format_value(value: Any, indent: int = 0) -> str:
    prefix = "  " * indent
    if isinstance(value, dict):
        lines = []
        for k, v in value.items():
            formatted = _format_value(v, indent + 1)
            if "\n" in formatted or isinstance(v, dict):
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted}")
        return "\n".join(lines)
    if isinstance(value, list):
        return f"[{', '.join(str(v) for v in value)}]"
    if value is None:
        return "null"
    return str(value)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        config_manager = get_config(args)
        data = config_manager.get_all()
    except ConfigError as e:
        formatter.error(e, error_code="config_show_error")
        return 1

    output_format = "json" if args.json else args.format
    if args.key:
        _missing = object()
        value = config_manager.get(args.key, _missing)
        if value is _missing:
            formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="config_key_missing")
            return 1
        data = _nest_key(args.key, value)

    if output_format == "json":
        formatter.json_output(data)
    elif output_format == "yaml":
        formatter.text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True).rstrip()
        )
    else:
        formatter.text(_format_value(data))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

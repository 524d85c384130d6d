"""
Stencil inspect command.

SUMMARY: Show the compiled segments and keyword index
"""

from __future__ import annotations

import argparse
import sys

from stencil.cli import OutputFormatter, add_source_arg, add_standard_flags, get_config, load_template
from stencil.core.exceptions import StencilError

SUMMARY = "Show the compiled segments and keyword index"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_source_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        template = load_template(args, encoding=get_config(args).get("render.encoding", "utf-8"))
    except StencilError as e:
        formatter.error(e, error_code="inspect_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(
            {
                "segments": template.describe(),
                "index": {k: list(v) for k, v in template.index.items()},
            }
        )
        return 0

    formatter.text(f"Segments ({len(template)}):")
    for entry in template.describe():
        if entry["kind"] == "literal":
            formatter.text(f"  [{entry['position']}] literal {entry['text']!r}")
        elif entry["default"] is None:
            formatter.text(f"  [{entry['position']}] ${{{entry['keyword']}}} (no default)")
        else:
            formatter.text(f"  [{entry['position']}] ${{{entry['keyword']}}} default {entry['default']!r}")
    formatter.text(f"Keywords ({len(template.index)}):")
    for keyword in template.keywords:
        positions = ", ".join(str(p) for p in template.index[keyword])
        formatter.text_kv(keyword, positions)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

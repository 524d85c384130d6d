"""
Stencil render command.

SUMMARY: Render a template with replacement values

Replacement values come from ``--vars FILE`` (a YAML mapping) and
``--var KEY=VALUE`` entries; ``--var`` wins on conflicts. Placeholders with
no default and no value render as ``null``.
"""

from __future__ import annotations

import argparse
import sys

from stencil.cli import (
    OutputFormatter,
    add_replacement_args,
    add_source_arg,
    add_standard_flags,
    collect_replacements,
    get_config,
    load_template,
)
from stencil.core.exceptions import StencilError
from stencil.core.utils.profiling import span

SUMMARY = "Render a template with replacement values"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_source_arg(parser)
    add_replacement_args(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        encoding = get_config(args).get("render.encoding", "utf-8")
        template = load_template(args, encoding=encoding)
        replacements = collect_replacements(args)
        with span("template.process", keywords=len(replacements)):
            rendered = template.process(replacements)
    except StencilError as e:
        formatter.error(e, error_code="render_error")
        return 1

    unknown = sorted(k for k in replacements if k not in template.index)
    formatter.emit(
        {"rendered": rendered, "keywords": list(template.keywords), "ignored": unknown},
        rendered,
        end="",
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

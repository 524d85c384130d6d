"""
Stencil compose command.

SUMMARY: Concatenate several templates into one

Each source is compiled on its own, then composed in order into a single
builder with ``append_template(Template)``. Keywords shared between sources
are merged into one index entry; each occurrence keeps its own default.
The command fails when a part ending in a lone backslash or an unterminated
``${`` is followed by a part starting with a placeholder.
"""

from __future__ import annotations

import argparse
import logging
import sys

from stencil.cli import OutputFormatter, add_standard_flags, get_config, read_source_text
from stencil.core.exceptions import StencilError
from stencil.core.template import Template

SUMMARY = "Concatenate several templates into one"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("sources", nargs="+", help="Template files, composed in order")
    parser.add_argument(
        "--separator",
        default="",
        help="Literal text inserted between templates (default: none)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        encoding = get_config(args).get("render.encoding", "utf-8")
        parts = [Template.from_string(read_source_text(src, encoding=encoding)) for src in args.sources]
    except StencilError as e:
        formatter.error(e, error_code="compose_error")
        return 1

    builder = Template.builder()
    for i, part in enumerate(parts):
        if i and args.separator:
            builder.append(args.separator)
        builder.append_template(part)
    composed = builder.build()
    conflicts = composed.serialization_conflicts()
    if conflicts:
        error = StencilError(
            "Composed template cannot be written as text: a literal ending in a backslash "
            "or an unterminated '${' is followed by a placeholder",
            context={"positions": list(conflicts)},
        )
        formatter.error(error, error_code="compose_error")
        return 1
    logger.info("Composed %d templates into %d segments", len(parts), len(composed))

    serialized = composed.serialize()
    formatter.emit(
        {"template": serialized, "index": {k: list(v) for k, v in composed.index.items()}},
        serialized,
        end="",
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

"""
Stencil serialize command.

SUMMARY: Print the normalized template text

Compiles the template and writes it back out with ``serialize()``: literal
text that looks like a placeholder is re-escaped, marker content is
normalized, and discarded multi-colon fields disappear.
"""

from __future__ import annotations

import argparse
import sys

from stencil.cli import OutputFormatter, add_source_arg, add_standard_flags, get_config, load_template
from stencil.core.exceptions import StencilError

SUMMARY = "Print the normalized template text"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_source_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        template = load_template(args, encoding=get_config(args).get("render.encoding", "utf-8"))
    except StencilError as e:
        formatter.error(e, error_code="serialize_error")
        return 1

    serialized = template.serialize()
    formatter.emit({"template": serialized}, serialized, end="")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))

"""Common CLI argument registration helpers."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override project root (where .stencil/config lives)",
    )


def add_source_arg(parser: argparse.ArgumentParser) -> None:
    """Add the template SOURCE positional and the --inline switch."""
    parser.add_argument(
        "source",
        help="Template file path ('-' reads stdin)",
    )
    parser.add_argument(
        "--inline",
        action="store_true",
        help="Treat SOURCE as the template text itself",
    )


def add_replacement_args(parser: argparse.ArgumentParser) -> None:
    """Add --var KEY=VALUE (repeatable) and --vars FILE."""
    parser.add_argument(
        "--var",
        dest="vars",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Replacement value (repeatable; overrides --vars)",
    )
    parser.add_argument(
        "--vars",
        dest="vars_file",
        metavar="FILE",
        help="YAML mapping of keyword to replacement value",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_source_arg",
    "add_replacement_args",
    "add_standard_flags",
]

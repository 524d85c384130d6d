"""
Stencil CLI package.

Commands are auto-discovered: root commands live in ``cli/commands/``,
domain commands in ``cli/<domain>/`` (e.g. ``stencil config show``).
Each command module exposes ``SUMMARY``, ``register_args(parser)`` and
``main(args) -> int``.
"""
from ._args import (
    add_json_flag,
    add_replacement_args,
    add_repo_root_flag,
    add_source_arg,
    add_standard_flags,
)
from ._output import OutputFormatter
from ._utils import (
    collect_replacements,
    get_config,
    get_repo_root,
    load_template,
    parse_var,
    read_source_text,
)

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_repo_root_flag",
    "add_source_arg",
    "add_replacement_args",
    "add_standard_flags",
    "get_repo_root",
    "get_config",
    "read_source_text",
    "load_template",
    "parse_var",
    "collect_replacements",
]

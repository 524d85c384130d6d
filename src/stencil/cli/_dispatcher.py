"""
Auto-discovery CLI dispatcher for Stencil.

Scans ``cli/commands/`` for root commands and other ``cli/`` subfolders for
command domains. Adding a command = adding a .py file that defines
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from stencil.core.config import ConfigManager
from stencil.core.exceptions import ConfigError
from stencil.core.stdlib_logging import configure_stdlib_logging, suppress_lastresort_in_json_mode
from stencil.core.utils.profiling import Profiler, enable_profiler, span

logger = logging.getLogger(__name__)

ROOT_COMMANDS_DIR = "commands"


def _load_command(module_name: str, default_summary: str) -> Optional[Dict[str, Any]]:
    try:
        with span("cli.discover.import", module=module_name):
            module = importlib.import_module(module_name)
    except ImportError as e:
        print(f"Warning: Could not import {module_name}: {e}", file=sys.stderr)
        return None
    return {
        "module": module,
        "summary": getattr(module, "SUMMARY", default_summary),
        "register_args": getattr(module, "register_args", None),
        "main": getattr(module, "main", None),
    }


@lru_cache(maxsize=1)
def discover_domains() -> Dict[str, Path]:
    """Map domain name -> directory for every ``cli/<domain>/`` with commands."""
    cli_dir = Path(__file__).parent
    domains = {}
    for item in cli_dir.iterdir():
        if item.name == ROOT_COMMANDS_DIR:
            continue
        if item.is_dir() and not item.name.startswith("_"):
            has_commands = any(
                f.suffix == ".py" and not f.name.startswith("_")
                for f in item.iterdir()
            )
            if has_commands:
                domains[item.name] = item
    return domains


@lru_cache(maxsize=32)
def discover_commands(domain: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Discover command modules in a domain folder, or root commands when ``domain`` is None."""
    folder = domain or ROOT_COMMANDS_DIR
    package = f"stencil.cli.{folder}"
    commands: Dict[str, Dict[str, Any]] = {}
    for item in sorted((Path(__file__).parent / folder).glob("*.py")):
        if item.name.startswith("_"):
            continue
        default_summary = f"{domain} {item.stem}" if domain else item.stem
        info = _load_command(f"{package}.{item.stem}", default_summary)
        if info is not None:
            commands[item.stem] = info
    return commands


def _register(subparsers: Any, name: str, info: Dict[str, Any]) -> None:
    primary_name = name.replace("_", "-")
    aliases = [name] if primary_name != name else []
    cmd_parser = subparsers.add_parser(primary_name, aliases=aliases, help=info["summary"])
    if info["register_args"]:
        info["register_args"](cmd_parser)
    if info["main"]:
        cmd_parser.set_defaults(_func=info["main"])


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered domains and commands."""
    parser = argparse.ArgumentParser(
        prog="stencil",
        description="Stencil - compiled ${keyword:default} placeholder templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Emit profiling spans for config loading, compilation and execution (sent to stderr).",
    )

    subparsers = parser.add_subparsers(
        dest="domain",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_commands().items()):
        _register(subparsers, cmd_name, cmd_info)

    for domain_name in sorted(discover_domains()):
        domain_commands = discover_commands(domain_name)
        if not domain_commands:
            continue
        domain_parser = subparsers.add_parser(
            domain_name,
            help=f"{domain_name.title()} commands",
        )
        cmd_subparsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            description=f"Available {domain_name} commands",
            metavar="<command>",
        )
        for cmd_name, cmd_info in sorted(domain_commands.items()):
            _register(cmd_subparsers, cmd_name, cmd_info)

    return parser


def _get_version() -> str:
    from stencil import __version__

    return __version__


def _configure_logging(args: argparse.Namespace) -> None:
    """Apply ``logging.*`` config; a broken config is reported by the command itself."""
    repo_root = getattr(args, "repo_root", None)
    try:
        cfg = ConfigManager(Path(repo_root) if repo_root else None)
        log_file = cfg.get("logging.file")
        level = cfg.get("logging.level", "WARNING")
    except ConfigError as exc:
        logger.debug("Logging config unavailable: %s", exc)
        return
    if log_file:
        configure_stdlib_logging(log_path=cfg.repo_root / log_file, level=level)
    else:
        logging.getLogger("stencil").setLevel(level.upper())


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Stencil CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.domain:
        parser.print_help()
        return 0

    func = getattr(args, "_func", None)
    if func is None:
        domain_parser = parser._subparsers._group_actions[0].choices.get(args.domain)
        if domain_parser:
            domain_parser.print_help()
        return 0

    if getattr(args, "json", False):
        suppress_lastresort_in_json_mode()
    _configure_logging(args)

    command_name = args.domain
    if getattr(args, "command", None):
        command_name = f"{command_name} {args.command}"
    logger.info("Running command: %s", command_name)

    profiler = Profiler() if args.profile else None
    if profiler is None:
        return int(func(args) or 0)

    with enable_profiler(profiler):
        with span("cli.command", command=command_name):
            result = int(func(args) or 0)
    print(profiler.format_summary(), file=sys.stderr)
    return result


if __name__ == "__main__":
    sys.exit(main())

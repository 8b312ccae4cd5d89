"""
dbmlkeep CLI entry point.

This module builds the argument parser, resolves the workspace
configuration and dispatches to the focused command modules.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dbmlkeep import __version__
from dbmlkeep.config import load_config
from dbmlkeep.errors import ConfigError

from .commands import cmd_blocks, cmd_extract, cmd_merge, cmd_reorder, cmd_restore
from .context import CLIContext
from .errors import CLIConfigError, handle_cli_exception


def _configure_logging(args, default_level: str) -> None:
    """Configure the dbmlkeep logger from CLI arg, environment, or config."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('DBMLKEEP_LOG_LEVEL') or
        default_level
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }
    numeric_level = level_map.get(log_level, logging.INFO)

    package_logger = logging.getLogger('dbmlkeep')
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        package_logger.propagate = False


def build_parser(workspace_root: Path, config_path: Optional[Path]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Preserve comments and table order when DBML schemas are regenerated",
        prog="dbmlkeep"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=str(config_path) if config_path else None,
        help='Path to a dbmlkeep.toml configuration file'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set DBMLKEEP_VERBOSE=1)'
    )
    parser.add_argument(
        '--workspace',
        default=str(workspace_root),
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set DBMLKEEP_LOG_LEVEL)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    extract_parser = subparsers.add_parser(
        'extract',
        help='Capture table order and comments from an original schema'
    )
    extract_parser.add_argument('source', help='Original schema file')
    extract_parser.add_argument(
        '-o', '--output',
        default=None,
        help="Snapshot destination; 'auto' writes it next to the source (default: stdout)"
    )
    extract_parser.add_argument(
        '--format',
        choices=['json', 'table'],
        default='json',
        help='Emit the snapshot as JSON or render it as tables'
    )
    extract_parser.set_defaults(func=cmd_extract)

    blocks_parser = subparsers.add_parser(
        'blocks',
        help='Show the top-level blocks of a schema file'
    )
    blocks_parser.add_argument('file', help='Schema file to partition')
    blocks_parser.add_argument(
        '--include-other',
        action='store_true',
        help="Also list standalone 'other' lines"
    )
    blocks_parser.set_defaults(func=cmd_blocks)

    for name, handler, help_text in (
        ('reorder', cmd_reorder, 'Restore original table order in a regenerated schema'),
        ('merge', cmd_merge, 'Re-inject captured comments into a regenerated schema'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('regenerated', help='Regenerated schema file')
        sub.add_argument('--snapshot', required=True, help="Snapshot written by 'extract'")
        sub.add_argument('-o', '--output', default=None, help='Output file (default: stdout)')
        sub.set_defaults(func=handler)

    restore_parser = subparsers.add_parser(
        'restore',
        help='Reorder and re-comment a regenerated schema from its original'
    )
    restore_parser.add_argument('original', help='Original schema file')
    restore_parser.add_argument('regenerated', help='Regenerated schema file')
    restore_parser.add_argument('-o', '--output', default=None, help='Output file (default: stdout)')
    restore_parser.add_argument(
        '--check',
        action='store_true',
        help='Exit with status 1 if the regenerated file would change'
    )
    restore_parser.set_defaults(func=cmd_restore)

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        Capture a snapshot next to the schema:
        >>> main(['extract', 'schema.dbml', '-o', 'auto'])  # doctest: +SKIP

        Restore comments after regeneration:
        >>> main(['restore', 'schema.dbml', 'generated.dbml', '-o', 'schema.dbml'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pre-parse to get workspace and config before building the full parser
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument('--config')
    pre_parser.add_argument('--workspace')
    pre_parser.add_argument('--verbose', action='store_true')
    pre_args, _ = pre_parser.parse_known_args(argv)

    workspace_root = (
        Path(pre_args.workspace).resolve()
        if pre_args.workspace
        else Path.cwd()
    )
    config_path = (
        Path(pre_args.config).resolve()
        if pre_args.config
        else None
    )
    try:
        config = load_config(workspace_root, config_path)
    except ConfigError as exc:
        handle_cli_exception(
            CLIConfigError(exc.format(), hint=exc.hint or "Fix or remove the configuration file"),
            verbose=pre_args.verbose,
        )
        return

    parser = build_parser(workspace_root, config_path)
    args = parser.parse_args(argv)

    _configure_logging(args, config.defaults.log_level)
    args.cli_context = CLIContext(workspace_root=workspace_root, config=config)

    if not hasattr(args, 'func'):
        parser.print_help()
        return

    args.func(args)

"""
Reconciliation commands.

This module handles the commands that take regenerated schema text and
reapply metadata captured from the original (reorder, merge, restore).
"""

import argparse
import logging

from ...snapshot import SchemaSnapshot
from ..context import get_cli_context
from ..errors import CLIValidationError, handle_cli_exception

logger = logging.getLogger(__name__)


def cmd_reorder(args: argparse.Namespace) -> None:
    """
    Handle the 'reorder' subcommand.

    Args:
        args: Parsed command-line arguments containing:
            - regenerated: Regenerated schema file
            - snapshot: Snapshot produced by 'extract'
            - output: Destination file (stdout when omitted)
    """
    try:
        ctx = get_cli_context(args)
        snapshot = ctx.read_snapshot(args.snapshot)
        regenerated = ctx.read_schema(args.regenerated)
        ctx.write_output(snapshot.reorder(regenerated), args.output)
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def cmd_merge(args: argparse.Namespace) -> None:
    """
    Handle the 'merge' subcommand.

    Args:
        args: Parsed command-line arguments containing:
            - regenerated: Regenerated (usually already reordered) schema file
            - snapshot: Snapshot produced by 'extract'
            - output: Destination file (stdout when omitted)
    """
    try:
        ctx = get_cli_context(args)
        snapshot = ctx.read_snapshot(args.snapshot)
        regenerated = ctx.read_schema(args.regenerated)
        ctx.write_output(snapshot.merge(regenerated), args.output)
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def cmd_restore(args: argparse.Namespace) -> None:
    """
    Handle the 'restore' subcommand: reorder then merge in one step.

    Args:
        args: Parsed command-line arguments containing:
            - original: Hand-written schema file carrying comments
            - regenerated: Regenerated schema file
            - output: Destination file (stdout when omitted)
            - check: Only report whether the regenerated file would change

    Raises:
        SystemExit: In check mode, when the regenerated file would change

    Examples:
        >>> args = argparse.Namespace(original='schema.dbml', regenerated='out.dbml', output=None, check=False)
        >>> cmd_restore(args)  # doctest: +SKIP
    """
    try:
        ctx = get_cli_context(args)
        if args.check and args.output:
            raise CLIValidationError(
                "--check cannot be combined with --output",
                hint="Run without --check to write the restored schema",
            )
        snapshot = SchemaSnapshot.capture(ctx.read_schema(args.original))
        regenerated = ctx.read_schema(args.regenerated)
        restored = snapshot.restore(regenerated)

        if args.check:
            if restored != regenerated:
                print(f"Would restore {args.regenerated}")
                raise SystemExit(1)
            print(f"{args.regenerated} already matches {args.original}")
            return

        logger.debug(
            "Restored %d comments across %d tables",
            len(snapshot.comments),
            len(snapshot.table_order),
        )
        ctx.write_output(restored, args.output)
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))

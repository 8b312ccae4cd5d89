"""
Inspection commands.

This module handles the commands that read an original schema source and
report what the scanners see in it (extract, blocks).
"""

import argparse

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...blocks import partition_blocks
from ...models import BlockKind
from ...snapshot import SchemaSnapshot
from ..context import get_cli_context
from ..errors import handle_cli_exception


def _preview(text: str, limit: int = 60) -> str:
    first = text.split("\n", 1)[0].strip()
    if "\n" in text:
        first += " ..."
    return first if len(first) <= limit else f"{first[:limit - 3]}..."


def _render_snapshot(console: Console, snapshot: SchemaSnapshot) -> None:
    order_table = Table(title="Table order")
    order_table.add_column("#", justify="right", style="dim")
    order_table.add_column("Schema", style="cyan")
    order_table.add_column("Table", style="bold")
    for position, entry in enumerate(snapshot.table_order, start=1):
        order_table.add_row(str(position), entry.schema_name or "", entry.table_name)
    console.print(order_table)

    comment_table = Table(title="Comments")
    comment_table.add_column("Kind", style="magenta")
    comment_table.add_column("Table", style="bold")
    comment_table.add_column("Field", style="cyan")
    comment_table.add_column("Text")
    for record in snapshot.comments:
        comment_table.add_row(
            record.kind.value,
            record.anchor.table_name or "",
            record.anchor.field_name or "",
            escape(_preview(record.text)),
        )
    console.print(comment_table)


def cmd_extract(args: argparse.Namespace) -> None:
    """
    Handle the 'extract' subcommand to capture a snapshot of a schema source.

    Args:
        args: Parsed command-line arguments containing:
            - source: Original schema file
            - output: Snapshot destination ('-' for stdout, 'auto' to place
              it next to the source)
            - format: 'json' or 'table'

    Examples:
        >>> args = argparse.Namespace(source='schema.dbml', output='auto', format='json')
        >>> cmd_extract(args)  # doctest: +SKIP
    """
    try:
        ctx = get_cli_context(args)
        source = ctx.read_schema(args.source)
        snapshot = SchemaSnapshot.capture(source)

        if args.format == "table":
            _render_snapshot(Console(), snapshot)
            return

        output = args.output
        if output == "auto":
            output = str(ctx.config.snapshot_path_for(ctx.resolve(args.source)))
        ctx.write_output(snapshot.to_json() + "\n", output)
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def cmd_blocks(args: argparse.Namespace) -> None:
    """
    Handle the 'blocks' subcommand to show how a schema partitions.

    Args:
        args: Parsed command-line arguments containing:
            - file: Schema file to partition
            - include_other: Also list standalone 'other' blocks
    """
    try:
        ctx = get_cli_context(args)
        source = ctx.read_schema(args.file, strict_suffix=False)
        blocks = partition_blocks(source)

        table = Table(title=f"Blocks in {args.file}")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Kind", style="magenta")
        table.add_column("Name", style="bold")
        table.add_column("Lines", justify="right")
        shown = 0
        for position, block in enumerate(blocks, start=1):
            if block.kind is BlockKind.OTHER and not args.include_other:
                continue
            shown += 1
            table.add_row(
                str(position),
                block.kind.value,
                block.qualified_name,
                str(block.raw_text.count("\n") + 1),
            )
        console = Console()
        console.print(table)
        console.print(f"[dim]{shown} of {len(blocks)} blocks shown[/dim]")
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))

"""Command handlers for the dbmlkeep CLI."""

from .apply import cmd_merge, cmd_reorder, cmd_restore
from .extract import cmd_blocks, cmd_extract

__all__ = [
    "cmd_blocks",
    "cmd_extract",
    "cmd_merge",
    "cmd_reorder",
    "cmd_restore",
]

"""Split DSL text into top-level enum, table, ref and other blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .models import Block, BlockKind
from .tokens import (
    count_braces,
    is_enum_header,
    is_ref_header,
    match_table_header,
    split_lines,
)

logger = logging.getLogger(__name__)


@dataclass
class _OpenBlock:
    kind: BlockKind
    table_name: Optional[str] = None
    schema_name: Optional[str] = None
    lines: List[str] = field(default_factory=list)

    def close(self) -> Block:
        return Block(
            kind=self.kind,
            raw_text="\n".join(self.lines),
            table_name=self.table_name,
            schema_name=self.schema_name,
        )


def _open_block(trimmed: str) -> Optional[_OpenBlock]:
    """Block started by ``trimmed`` at depth zero, if any."""
    header = match_table_header(trimmed)
    if header is not None:
        return _OpenBlock(BlockKind.TABLE, header.table_name, header.schema_name)
    if is_enum_header(trimmed):
        return _OpenBlock(BlockKind.ENUM)
    if is_ref_header(trimmed):
        return _OpenBlock(BlockKind.REF)
    return None


def partition_blocks(source: Optional[str]) -> List[Block]:
    """
    Partition ``source`` into a flat sequence of top-level blocks.

    A header at brace depth zero opens a block that collects every line up
    to the one returning the depth to zero. Lines outside any block become
    single-line ``other`` blocks; blank ones are kept only once something
    has been emitted. A block still open at end of input is emitted as is.
    """
    blocks: List[Block] = []
    current: Optional[_OpenBlock] = None
    depth = 0

    for line in split_lines(source):
        trimmed = line.strip()
        opens, closes = count_braces(line)

        if depth == 0:
            started = _open_block(trimmed)
            if started is not None:
                if current is not None and current.lines:
                    blocks.append(current.close())
                current = started

        if current is not None:
            current.lines.append(line)
        elif trimmed:
            blocks.append(Block(BlockKind.OTHER, line))
        elif blocks:
            blocks.append(Block(BlockKind.OTHER, ""))

        depth += opens - closes
        if current is not None and depth == 0 and closes > 0:
            blocks.append(current.close())
            current = None

    if current is not None and current.lines:
        blocks.append(current.close())

    logger.debug("Partitioned source into %d blocks", len(blocks))
    return blocks


__all__ = ["partition_blocks"]

"""Restore the original table order in regenerated DSL text."""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional, Sequence

from .blocks import partition_blocks
from .models import Block, BlockKind, TableOrderEntry

logger = logging.getLogger(__name__)

_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n")
_TRAILING_BLANKS_RE = re.compile(r"(?:\n[ \t\r]*)+\Z")


def build_order_index(original_order: Sequence[TableOrderEntry]) -> Dict[str, int]:
    """
    Map ``schema.table`` and bare ``table`` keys to first-seen positions.

    Later entries overwrite earlier ones under the same key, so two tables
    sharing a bare name in different schemas collapse to the last position
    for bare-name lookups.
    """
    index: Dict[str, int] = {}
    for position, entry in enumerate(original_order):
        index[entry.qualified_name] = position
        index[entry.table_name] = position
    return index


def _table_rank(block: Block, index: Dict[str, int]) -> float:
    rank: Optional[int] = index.get(block.qualified_name)
    if rank is None:
        rank = index.get(block.table_name or "")
    return math.inf if rank is None else rank


def reorder_schema(regenerated: Optional[str], original_order: Sequence[TableOrderEntry]) -> str:
    """
    Rebuild ``regenerated`` with tables sorted into their original order.

    Output layout is enums, tables, then refs. Tables missing from
    ``original_order`` keep their regenerated relative order after all
    matched tables. Standalone ``other`` blocks are dropped, runs of blank
    lines collapse to one, and the result ends with a single newline.

    Examples:
        >>> order = [TableOrderEntry("users"), TableOrderEntry("orders")]
        >>> reorder_schema("Table orders {\\n}\\nTable users {\\n}", order)
        'Table users {\\n}\\nTable orders {\\n}\\n'
    """
    enum_blocks: List[Block] = []
    table_blocks: List[Block] = []
    ref_blocks: List[Block] = []
    for block in partition_blocks(regenerated):
        if block.kind is BlockKind.ENUM:
            enum_blocks.append(block)
        elif block.kind is BlockKind.TABLE:
            table_blocks.append(block)
        elif block.kind is BlockKind.REF:
            ref_blocks.append(block)

    index = build_order_index(original_order)
    sorted_tables = sorted(table_blocks, key=lambda block: _table_rank(block, index))
    unmatched = sum(1 for block in table_blocks if _table_rank(block, index) == math.inf)
    if unmatched:
        logger.debug("Appending %d tables without an original position", unmatched)

    parts: List[str] = [block.raw_text for block in enum_blocks]
    if enum_blocks and sorted_tables:
        parts.append("")
    parts.extend(block.raw_text for block in sorted_tables)
    if ref_blocks:
        parts.append("")
        parts.extend(block.raw_text for block in ref_blocks)

    result = _BLANK_RUN_RE.sub("\n\n", "\n".join(parts))
    return _TRAILING_BLANKS_RE.sub("", result) + "\n"


__all__ = ["build_order_index", "reorder_schema"]

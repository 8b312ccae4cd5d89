"""Capture the first-seen order of ``Table`` blocks in DSL source."""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import TableOrderEntry
from .tokens import match_table_header, split_lines

logger = logging.getLogger(__name__)


def extract_table_order(source: Optional[str]) -> List[TableOrderEntry]:
    """
    Return one entry per ``Table`` header line, in source order.

    Non-matching lines are ignored and duplicate names are kept, so the
    result can be longer than the set of distinct tables.

    Examples:
        >>> extract_table_order('Table users {\\n}\\nTable "crm"."orders" {\\n}')
        [TableOrderEntry(table_name='users', schema_name=None), TableOrderEntry(table_name='orders', schema_name='crm')]
    """
    order: List[TableOrderEntry] = []
    for line in split_lines(source):
        header = match_table_header(line.strip())
        if header is not None:
            order.append(TableOrderEntry(header.table_name, header.schema_name))
    logger.debug("Extracted table order with %d entries", len(order))
    return order


__all__ = ["extract_table_order"]

"""
Line tokenizer shared by every scanner.

The DSL grammar is not modelled. Each helper classifies a single physical
line (or its trimmed form) so that the order extractor, the comment
extractor, the comment merger and the block partitioner recognise exactly
the same constructs.

**Usage:**
    from dbmlkeep.tokens import match_table_header, count_braces

    header = match_table_header(line.strip())
    if header is not None:
        print(header.schema_name, header.table_name)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple


# ============================================================================
# Block headers
# ============================================================================

_TABLE_HEADER_RE = re.compile(
    r'^Table\s+'
    r'(?:(?:"(?P<quoted_schema>[^"]+)"|(?P<bare_schema>\w+))\.)?'
    r'(?:"(?P<quoted_name>[^"]+)"|(?P<bare_name>\w+))',
    re.IGNORECASE | re.ASCII,
)
_ENUM_HEADER_RE = re.compile(r"^Enum\s+", re.IGNORECASE)
_REF_HEADER_RE = re.compile(r"^Ref\s*[:{]", re.IGNORECASE)

# ============================================================================
# Fields and comments
# ============================================================================

_FIELD_NAME_RE = re.compile(r'^"([^"]+)"')
_INLINE_COMMENT_RE = re.compile(r"^(.+?)(//.*)$")

LINE_COMMENT = "//"
BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"


@dataclass(frozen=True)
class TableHeader:
    """Names parsed from a ``Table`` header line."""
    table_name: str
    schema_name: Optional[str] = None


def match_table_header(trimmed: str) -> Optional[TableHeader]:
    """
    Parse a trimmed line as a ``Table`` header.

    Accepts ``Table users``, ``Table "users"``, ``Table "public"."users"``
    and ``Table public.users``; quoted tokens win over bare ones.

    Returns:
        The parsed header, or None when the line is not a table header.
    """
    match = _TABLE_HEADER_RE.match(trimmed)
    if match is None:
        return None
    schema = match.group("quoted_schema") or match.group("bare_schema")
    name = match.group("quoted_name") or match.group("bare_name") or ""
    return TableHeader(table_name=name, schema_name=schema)


def is_enum_header(trimmed: str) -> bool:
    return _ENUM_HEADER_RE.match(trimmed) is not None


def is_ref_header(trimmed: str) -> bool:
    """``Ref:`` and ``Ref {`` forms only; named refs are not block starts."""
    return _REF_HEADER_RE.match(trimmed) is not None


def is_line_comment(trimmed: str) -> bool:
    return trimmed.startswith(LINE_COMMENT)


def split_inline_comment(line: str) -> Optional[Tuple[str, str]]:
    """
    Split a raw line at its first ``//`` that follows other content.

    Returns:
        ``(code, comment)`` where ``comment`` starts at the ``//`` delimiter,
        or None when the line carries no trailing comment.
    """
    match = _INLINE_COMMENT_RE.match(line)
    if match is None:
        return None
    return match.group(1), match.group(2)


def field_name(code: str) -> Optional[str]:
    """Leading double-quoted token of a trimmed field declaration."""
    match = _FIELD_NAME_RE.match(code)
    return match.group(1) if match else None


def starts_block_comment(trimmed: str) -> bool:
    return trimmed.startswith(BLOCK_COMMENT_OPEN)


def ends_block_comment(line: str) -> bool:
    return BLOCK_COMMENT_CLOSE in line


def count_braces(line: str) -> Tuple[int, int]:
    """Lexical ``{``/``}`` counts; braces inside quotes are counted too."""
    return line.count("{"), line.count("}")


def split_lines(text: Optional[str]) -> List[str]:
    """Split on ``\\n`` only, so carriage returns survive verbatim."""
    return (text or "").split("\n")


__all__ = [
    "TableHeader",
    "match_table_header",
    "is_enum_header",
    "is_ref_header",
    "is_line_comment",
    "split_inline_comment",
    "field_name",
    "starts_block_comment",
    "ends_block_comment",
    "count_braces",
    "split_lines",
]

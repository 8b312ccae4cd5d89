"""
Comment extraction and re-injection for DSL source text.

Comments are classified while walking the original text line by line:

* ``header`` - comments before the first ``Table`` or ``Enum`` definition
* ``table`` - comments between definitions, attached to the next table
* ``field`` - full-line comments inside a table body
* ``inline`` - trailing comments on a quoted field declaration
* ``footer`` - comments left over after the last definition

:func:`merge_comments` walks regenerated text with the same table tracking
and puts every record back at its anchor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .models import CommentKind, CommentRecord
from .scanner import TableScanState
from .tokens import (
    count_braces,
    ends_block_comment,
    field_name,
    is_enum_header,
    is_line_comment,
    match_table_header,
    split_inline_comment,
    split_lines,
    starts_block_comment,
)

logger = logging.getLogger(__name__)


@dataclass
class _ExtractionState:
    """Per-call state of :func:`extract_comments`."""

    scan: TableScanState = field(default_factory=TableScanState)
    seen_definition: bool = False
    pending: List[str] = field(default_factory=list)
    records: List[CommentRecord] = field(default_factory=list)

    def flush_pending(self, kind: CommentKind, table_name: Optional[str] = None) -> None:
        if not self.pending:
            return
        text = "\n".join(self.pending)
        if kind is CommentKind.TABLE:
            self.records.append(CommentRecord.table(text, table_name))
        else:
            self.records.append(CommentRecord(kind, text))
        self.pending = []

    def capture_standalone(self, text: str) -> None:
        """Route a full-line or block comment by where the scan currently is."""
        if not self.seen_definition:
            self.pending.append(text)
        elif self.scan.in_table_body:
            self.records.append(CommentRecord.field_level(text, self.scan.table_name))
        else:
            self.pending.append(text)


def extract_comments(source: Optional[str]) -> List[CommentRecord]:
    """
    Classify every comment of ``source`` against its semantic anchor.

    Records are returned in source order; the merger replays comments for
    one anchor in that order.

    Args:
        source: Original DSL text. ``None`` is treated as empty.

    Returns:
        Ordered list of comment records. Empty when the text has no comments.
    """
    lines = split_lines(source)
    state = _ExtractionState()
    scan = state.scan

    index = 0
    while index < len(lines):
        line = lines[index]
        trimmed = line.strip()
        opens, closes = count_braces(line)

        header = match_table_header(trimmed)
        if header is not None:
            state.flush_pending(
                CommentKind.TABLE if state.seen_definition else CommentKind.HEADER,
                header.table_name,
            )
            scan.enter_table(header.table_name)
            state.seen_definition = True

        if is_enum_header(trimmed):
            state.seen_definition = True
            if scan.table_name is None:
                state.flush_pending(CommentKind.HEADER)

        if is_line_comment(trimmed):
            state.capture_standalone(line)
        elif starts_block_comment(trimmed):
            end = index
            while end < len(lines) and not ends_block_comment(lines[end]):
                end += 1
            state.capture_standalone("\n".join(lines[index:end + 1]))
            index = end
        else:
            inline = split_inline_comment(line)
            if inline is not None and scan.in_table:
                code, comment = inline
                name = field_name(code.strip())
                if name is not None:
                    state.records.append(CommentRecord.inline(comment, scan.table_name, name))

        scan.finish_line(opens, closes)
        index += 1

    state.flush_pending(CommentKind.FOOTER if state.seen_definition else CommentKind.HEADER)
    logger.debug("Extracted %d comment records", len(state.records))
    return state.records


@dataclass
class _CommentBuckets:
    headers: List[str] = field(default_factory=list)
    footers: List[str] = field(default_factory=list)
    tables: Dict[str, List[str]] = field(default_factory=dict)
    fields: Dict[str, List[str]] = field(default_factory=dict)
    inline: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Sequence[CommentRecord]) -> "_CommentBuckets":
        buckets = cls()
        for record in records:
            table = record.anchor.table_name
            if record.kind is CommentKind.HEADER:
                buckets.headers.append(record.text)
            elif record.kind is CommentKind.FOOTER:
                buckets.footers.append(record.text)
            elif record.kind is CommentKind.TABLE and table:
                buckets.tables.setdefault(table, []).append(record.text)
            elif record.kind is CommentKind.FIELD and table:
                buckets.fields.setdefault(table, []).append(record.text)
            elif record.kind is CommentKind.INLINE and record.anchor.inline_key:
                # last one wins for a repeated field
                buckets.inline[record.anchor.inline_key] = record.text
        return buckets


def merge_comments(regenerated: Optional[str], comments: Sequence[CommentRecord]) -> str:
    """
    Re-inject extracted comments into regenerated DSL text.

    Header comments open the output, followed by a blank line. Table
    comments precede their table header, field comments open the table
    body once per table occurrence, inline comments are appended to field
    lines that carry no ``//`` yet, and footer comments close the output
    after a blank line.

    With no comments the input is returned untouched.
    """
    if not comments:
        return regenerated or ""

    buckets = _CommentBuckets.from_records(comments)
    result: List[str] = list(buckets.headers)
    if buckets.headers:
        result.append("")

    scan = TableScanState()
    fields_injected = False
    for line in split_lines(regenerated):
        trimmed = line.strip()
        opens, closes = count_braces(line)

        header = match_table_header(trimmed)
        if header is not None:
            scan.enter_table(header.table_name)
            fields_injected = False
            result.extend(buckets.tables.get(header.table_name, ()))

        if scan.in_table_body and not fields_injected and scan.table_name:
            result.extend(buckets.fields.get(scan.table_name, ()))
            fields_injected = True

        result.append(_with_inline_comment(line, trimmed, scan, buckets.inline))
        scan.finish_line(opens, closes)

    if buckets.footers:
        result.append("")
        result.extend(buckets.footers)

    logger.debug(
        "Merged %d comment records (%d header, %d footer)",
        len(comments),
        len(buckets.headers),
        len(buckets.footers),
    )
    return "\n".join(result)


def _with_inline_comment(
    line: str,
    trimmed: str,
    scan: TableScanState,
    inline: Dict[str, str],
) -> str:
    if not scan.in_table or not scan.table_name:
        return line
    name = field_name(trimmed)
    if name is None or "//" in line:
        return line
    comment = inline.get(f"{scan.table_name}.{name}")
    if comment is None:
        return line
    if not line.endswith("\r"):
        return f"{line} {comment}"
    # the comment goes before the carriage return; one captured from a CRLF line already ends in one
    ending = "" if comment.endswith("\r") else "\r"
    return f"{line[:-1]} {comment}{ending}"


__all__ = ["extract_comments", "merge_comments"]

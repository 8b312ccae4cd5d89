"""Value records produced and consumed by the round-trip scanners."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CommentKind(Enum):
    """Semantic anchor class of an extracted comment."""
    HEADER = "header"
    TABLE = "table"
    FIELD = "field"
    FOOTER = "footer"
    INLINE = "inline"


@dataclass(frozen=True)
class CommentAnchor:
    """Table (and for inline comments, field) a comment is attached to."""
    table_name: Optional[str] = None
    field_name: Optional[str] = None

    @property
    def inline_key(self) -> Optional[str]:
        if self.table_name is None or self.field_name is None:
            return None
        return f"{self.table_name}.{self.field_name}"


@dataclass(frozen=True)
class CommentRecord:
    """
    A comment captured verbatim from the original source.

    ``text`` keeps the comment delimiters and, for full-line comments, the
    original indentation of the first captured line. Multi-line block
    comments keep their internal newlines.
    """
    kind: CommentKind
    text: str
    anchor: CommentAnchor = field(default_factory=CommentAnchor)

    @classmethod
    def header(cls, text: str) -> "CommentRecord":
        return cls(CommentKind.HEADER, text)

    @classmethod
    def footer(cls, text: str) -> "CommentRecord":
        return cls(CommentKind.FOOTER, text)

    @classmethod
    def table(cls, text: str, table_name: Optional[str]) -> "CommentRecord":
        return cls(CommentKind.TABLE, text, CommentAnchor(table_name=table_name))

    @classmethod
    def field_level(cls, text: str, table_name: Optional[str]) -> "CommentRecord":
        return cls(CommentKind.FIELD, text, CommentAnchor(table_name=table_name))

    @classmethod
    def inline(cls, text: str, table_name: Optional[str], field_name: str) -> "CommentRecord":
        return cls(
            CommentKind.INLINE,
            text,
            CommentAnchor(table_name=table_name, field_name=field_name),
        )


@dataclass(frozen=True)
class TableOrderEntry:
    """Position marker for one ``Table`` header of the original source."""
    table_name: str
    schema_name: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        if self.schema_name:
            return f"{self.schema_name}.{self.table_name}"
        return self.table_name


class BlockKind(Enum):
    """Top-level block classes recognised by the partitioner."""
    ENUM = "enum"
    TABLE = "table"
    REF = "ref"
    OTHER = "other"


@dataclass(frozen=True)
class Block:
    """A top-level unit of DSL text, kept as its joined raw lines."""
    kind: BlockKind
    raw_text: str
    table_name: Optional[str] = None
    schema_name: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        if self.schema_name:
            return f"{self.schema_name}.{self.table_name or ''}"
        return self.table_name or ""


__all__ = [
    "CommentKind",
    "CommentAnchor",
    "CommentRecord",
    "TableOrderEntry",
    "BlockKind",
    "Block",
]

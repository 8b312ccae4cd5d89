"""
Snapshot of the metadata captured from an original DSL source.

The caller keeps order and comment metadata while the schema text is
regenerated elsewhere. A :class:`SchemaSnapshot` bundles both and knows how
to serialize itself in the wire shape the diagramming host stores::

    {
      "version": 1,
      "tableOrder": [{"tableName": "users", "schemaName": null}],
      "comments": [
        {"type": "inline", "text": "// pk", "context": {"tableName": "users", "fieldName": "id"}}
      ]
    }

Payloads are validated with Pydantic v2 before being turned back into value
records.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .comments import extract_comments, merge_comments
from .errors import SnapshotError
from .models import CommentAnchor, CommentKind, CommentRecord, TableOrderEntry
from .order import extract_table_order
from .reorder import reorder_schema

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class CommentContextPayload(_WireModel):
    table_name: Optional[str] = Field(None, alias="tableName")
    field_name: Optional[str] = Field(None, alias="fieldName")


class CommentPayload(_WireModel):
    type: CommentKind
    text: str
    context: Optional[CommentContextPayload] = None

    @model_validator(mode="after")
    def check_anchor(self) -> "CommentPayload":
        context = self.context or CommentContextPayload()
        has_table = context.table_name is not None
        has_field = context.field_name is not None
        if self.type is CommentKind.INLINE:
            if not (has_table and has_field):
                raise ValueError("inline comments need both tableName and fieldName")
        elif self.type in (CommentKind.TABLE, CommentKind.FIELD):
            if not has_table or has_field:
                raise ValueError(f"{self.type.value} comments need tableName only")
        elif has_table or has_field:
            raise ValueError(f"{self.type.value} comments take no context")
        return self


class TableOrderPayload(_WireModel):
    table_name: str = Field(..., alias="tableName")
    schema_name: Optional[str] = Field(None, alias="schemaName")


class SnapshotPayload(_WireModel):
    version: int = Field(SNAPSHOT_VERSION, ge=1, le=SNAPSHOT_VERSION)
    table_order: List[TableOrderPayload] = Field(default_factory=list, alias="tableOrder")
    comments: List[CommentPayload] = Field(default_factory=list)


@dataclass(frozen=True)
class SchemaSnapshot:
    """Order and comment metadata of one original source text."""

    table_order: Tuple[TableOrderEntry, ...] = field(default_factory=tuple)
    comments: Tuple[CommentRecord, ...] = field(default_factory=tuple)

    @classmethod
    def capture(cls, source: Optional[str]) -> "SchemaSnapshot":
        return cls(
            table_order=tuple(extract_table_order(source)),
            comments=tuple(extract_comments(source)),
        )

    def is_empty(self) -> bool:
        return not self.table_order and not self.comments

    def reorder(self, regenerated: Optional[str]) -> str:
        return reorder_schema(regenerated, self.table_order)

    def merge(self, regenerated: Optional[str]) -> str:
        return merge_comments(regenerated, self.comments)

    def restore(self, regenerated: Optional[str]) -> str:
        """Reorder tables, then re-inject comments."""
        return self.merge(self.reorder(regenerated))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        comments: List[Dict[str, Any]] = []
        for record in self.comments:
            entry: Dict[str, Any] = {"type": record.kind.value, "text": record.text}
            context: Dict[str, str] = {}
            if record.anchor.table_name is not None:
                context["tableName"] = record.anchor.table_name
            if record.anchor.field_name is not None:
                context["fieldName"] = record.anchor.field_name
            if context:
                entry["context"] = context
            comments.append(entry)
        return {
            "version": SNAPSHOT_VERSION,
            "tableOrder": [
                {"tableName": entry.table_name, "schemaName": entry.schema_name}
                for entry in self.table_order
            ],
            "comments": comments,
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Any, *, path: Optional[str] = None) -> "SchemaSnapshot":
        try:
            payload = SnapshotPayload.model_validate(data)
        except ValidationError as exc:
            first = exc.errors()[0] if exc.errors() else {}
            where = ".".join(str(part) for part in first.get("loc", ()))
            raise SnapshotError(
                f"Invalid snapshot payload: {first.get('msg', exc)}" + (f" at '{where}'" if where else ""),
                path=path,
                hint="Regenerate the snapshot with 'dbmlkeep extract'",
            ) from exc

        order = tuple(
            TableOrderEntry(item.table_name, item.schema_name) for item in payload.table_order
        )
        records = tuple(_record_from_payload(item) for item in payload.comments)
        logger.debug("Loaded snapshot with %d tables and %d comments", len(order), len(records))
        return cls(table_order=order, comments=records)

    @classmethod
    def from_json(cls, text: str, *, path: Optional[str] = None) -> "SchemaSnapshot":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotError(
                f"Snapshot is not valid JSON: {exc.msg}",
                path=path,
                line=exc.lineno,
                column=exc.colno,
            ) from exc
        return cls.from_dict(data, path=path)


def _record_from_payload(item: CommentPayload) -> CommentRecord:
    context = item.context or CommentContextPayload()
    anchor = CommentAnchor(table_name=context.table_name, field_name=context.field_name)
    return CommentRecord(kind=item.type, text=item.text, anchor=anchor)


def preserve(original: Optional[str], regenerated: Optional[str]) -> str:
    """Carry comments and table order of ``original`` over to ``regenerated``."""
    return SchemaSnapshot.capture(original).restore(regenerated)


__all__ = [
    "SNAPSHOT_VERSION",
    "SchemaSnapshot",
    "SnapshotPayload",
    "preserve",
]

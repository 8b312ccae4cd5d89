"""
Round-trip preservation of comments and table order for DBML schema text.

A schema-diagramming application regenerates its DBML source from an
internal model. Regeneration drops every human-authored comment and emits
tables in model order. This package recovers both:

* ``order`` - :func:`extract_table_order` records the first-seen order of
  ``Table`` blocks in the original text.
* ``comments`` - :func:`extract_comments` classifies each comment against
  its anchor (header, table, field, inline, footer) and
  :func:`merge_comments` puts them back into regenerated text.
* ``blocks`` - :func:`partition_blocks` splits text into top-level enum,
  table, ref and other blocks.
* ``reorder`` - :func:`reorder_schema` sorts regenerated tables back into
  their original order.
* ``snapshot`` - :class:`SchemaSnapshot` bundles the captured metadata and
  serializes it for storage between extraction and merge.
* ``cli`` - the ``dbmlkeep`` command line front end.

Every scanning operation is a pure function of its inputs. Malformed DSL
text degrades to fewer records instead of raising.
"""

from importlib import metadata as _metadata

from .blocks import partition_blocks
from .comments import extract_comments, merge_comments
from .models import (
    Block,
    BlockKind,
    CommentAnchor,
    CommentKind,
    CommentRecord,
    TableOrderEntry,
)
from .order import extract_table_order
from .reorder import reorder_schema
from .snapshot import SchemaSnapshot, preserve


try:  # pragma: no cover - metadata is missing when run from a source tree
    __version__ = _metadata.version("dbmlkeep")
except _metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    "Block",
    "BlockKind",
    "CommentAnchor",
    "CommentKind",
    "CommentRecord",
    "TableOrderEntry",
    "SchemaSnapshot",
    "extract_comments",
    "extract_table_order",
    "merge_comments",
    "partition_blocks",
    "preserve",
    "reorder_schema",
]

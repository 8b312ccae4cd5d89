"""Error model for dbmlkeep.

DSL text never produces an error: the scanners degrade silently on malformed
input. Errors only arise from caller-supplied metadata and configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> Optional[str]:
        """Render as ``path:line:column``, or None when no path is known."""
        if not self.path:
            return None
        if self.line is None:
            return self.path
        if self.column is None:
            return f"{self.path}:{self.line}"
        return f"{self.path}:{self.line}:{self.column}"


class KeepError(Exception):
    """Base class for errors surfaced to library callers."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line, column=column)
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        meta = [part for part in (self.location.describe(), self.code) if part]
        text = f"{self.message} ({'; '.join(meta)})" if meta else self.message
        return f"{text} Hint: {self.hint}" if self.hint else text


class SnapshotError(KeepError):
    """Raised when a serialized snapshot cannot be decoded."""

    code = "SNAPSHOT_INVALID"


class ConfigError(KeepError):
    """Raised when a workspace configuration file is unreadable or malformed."""

    code = "CONFIG_INVALID"


__all__ = [
    "KeepError",
    "SnapshotError",
    "ConfigError",
    "ErrorLocation",
]

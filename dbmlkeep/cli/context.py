"""
CLI context and file handling shared by command handlers.

This module provides the CLIContext dataclass plus helpers that read schema
sources and snapshots and write command output according to the workspace
configuration.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import KeepConfig
from ..errors import SnapshotError
from ..snapshot import SchemaSnapshot
from .errors import CLIConfigError, CLIFileNotFoundError, CLIRuntimeError, CLIValidationError, wrap_exception

logger = logging.getLogger(__name__)


@dataclass
class CLIContext:
    """
    Shared context resolved from workspace configuration.

    Attributes:
        workspace_root: Root directory of the workspace
        config: Parsed workspace configuration
    """

    workspace_root: Path
    config: KeepConfig

    @property
    def encoding(self) -> str:
        return self.config.defaults.encoding

    def read_schema(self, raw_path: str, *, strict_suffix: bool = True) -> str:
        """Read a schema source, resolving relative paths against the workspace."""
        path = self.resolve(raw_path)
        if not path.is_file():
            raise CLIFileNotFoundError(
                f"Schema file not found: {path}",
                context={"path": str(path)},
            )
        if strict_suffix and not self.config.accepts(path):
            raise CLIValidationError(
                f"Unsupported schema file: {path.name}",
                hint=f"Accepted suffixes: {', '.join(self.config.defaults.suffixes)}",
            )
        return self._read_text(path)

    def read_snapshot(self, raw_path: str) -> SchemaSnapshot:
        path = self.resolve(raw_path)
        if not path.is_file():
            raise CLIFileNotFoundError(
                f"Snapshot file not found: {path}",
                hint="Create one with 'dbmlkeep extract SOURCE -o auto'",
            )
        try:
            return SchemaSnapshot.from_json(self._read_text(path), path=str(path))
        except SnapshotError as exc:
            raise CLIRuntimeError(exc.format(), code="CLI_SNAPSHOT_INVALID", hint=exc.hint) from exc

    def write_output(self, text: str, output: Optional[str]) -> None:
        """Write ``text`` to ``output`` or to stdout when no path is given."""
        if not output or output == "-":
            sys.stdout.write(text)
            return
        path = self.resolve(output)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding=self.encoding, newline="")
        except OSError as exc:
            raise wrap_exception(exc, message=f"Could not write {path}") from exc
        logger.debug("Wrote %s", path)

    def resolve(self, raw_path: str) -> Path:
        path = Path(raw_path)
        if not path.is_absolute():
            path = self.workspace_root / path
        return path

    def _read_text(self, path: Path) -> str:
        try:
            # newline="" keeps carriage returns for the line scanners
            with path.open("r", encoding=self.encoding, newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise wrap_exception(exc, message=f"Could not read {path}") from exc


def get_cli_context(args: argparse.Namespace) -> CLIContext:
    """
    Retrieve CLIContext from parsed arguments.

    Raises:
        CLIConfigError: If context was not initialized
    """
    ctx = getattr(args, "cli_context", None)
    if ctx is None:
        raise CLIConfigError(
            "CLI context was not initialized before command execution",
            hint="This is an internal error - please report it",
            code="CLI_CONTEXT_NOT_INITIALIZED"
        )
    return ctx

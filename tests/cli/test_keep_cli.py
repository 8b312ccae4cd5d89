"""
End-to-end tests for the dbmlkeep command line interface.

Each test runs main() against files in a temporary workspace.
"""

import json

import pytest

from dbmlkeep import __version__, preserve
from dbmlkeep.cli import main

pytestmark = pytest.mark.cli


ORIGINAL = '''// Schema header

// People
Table users {
  "id" int [pk] // primary key
  "name" varchar
}

Table orders {
  "id" int [pk]
}
'''

REGENERATED = '''Table "orders" {
  "id" int [pk]
}

Table "users" {
  "id" int [pk]
  "name" varchar
}
'''


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DBMLKEEP_RERAISE", "DBMLKEEP_DEBUG", "DBMLKEEP_VERBOSE", "DBMLKEEP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "schema.dbml").write_text(ORIGINAL, encoding="utf-8")
    (tmp_path / "generated.dbml").write_text(REGENERATED, encoding="utf-8")
    return tmp_path


def run(workspace, *argv):
    main(["--workspace", str(workspace), "--log-level", "error", *argv])


class TestExtract:
    """Test the 'extract' command."""

    def test_json_to_stdout(self, workspace, capsys):
        run(workspace, "extract", "schema.dbml")
        payload = json.loads(capsys.readouterr().out)
        assert payload["tableOrder"] == [
            {"tableName": "users", "schemaName": None},
            {"tableName": "orders", "schemaName": None},
        ]
        assert [comment["type"] for comment in payload["comments"]] == ["header", "inline"]

    def test_auto_output_next_to_source(self, workspace):
        run(workspace, "extract", "schema.dbml", "-o", "auto")
        snapshot_file = workspace / "schema.dbml.keep.json"
        assert snapshot_file.exists()
        assert json.loads(snapshot_file.read_text(encoding="utf-8"))["version"] == 1

    def test_table_format(self, workspace, capsys):
        run(workspace, "extract", "schema.dbml", "--format", "table")
        out = capsys.readouterr().out
        assert "Table order" in out
        assert "users" in out
        assert "inline" in out

    def test_missing_source(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(workspace, "extract", "nope.dbml")
        assert exc_info.value.code == 1
        assert "CLI_FILE_NOT_FOUND" in capsys.readouterr().err

    def test_rejects_unknown_suffix(self, workspace, capsys):
        (workspace / "schema.sql").write_text(ORIGINAL, encoding="utf-8")
        with pytest.raises(SystemExit):
            run(workspace, "extract", "schema.sql")
        assert "CLI_VALIDATION_ERROR" in capsys.readouterr().err


class TestApply:
    """Test the 'reorder', 'merge' and 'restore' commands."""

    def test_reorder_then_merge(self, workspace):
        run(workspace, "extract", "schema.dbml", "-o", "schema.keep.json")
        run(workspace, "reorder", "generated.dbml", "--snapshot", "schema.keep.json", "-o", "reordered.dbml")
        run(workspace, "merge", "reordered.dbml", "--snapshot", "schema.keep.json", "-o", "final.dbml")
        final = (workspace / "final.dbml").read_text(encoding="utf-8")
        assert final == preserve(ORIGINAL, REGENERATED)
        assert final.index('Table "users"') < final.index('Table "orders"')
        assert '"id" int [pk] // primary key' in final

    def test_restore_to_stdout(self, workspace, capsys):
        run(workspace, "restore", "schema.dbml", "generated.dbml")
        assert capsys.readouterr().out == preserve(ORIGINAL, REGENERATED)

    def test_restore_keeps_crlf_line_endings(self, workspace):
        (workspace / "crlf.dbml").write_bytes(b'Table a {\r\n  "id" int // pk\r\n}\r\n')
        (workspace / "crlf_gen.dbml").write_bytes(b'Table a {\r\n  "id" int\r\n}\r\n')
        run(workspace, "restore", "crlf.dbml", "crlf_gen.dbml", "-o", "out.dbml")
        assert (workspace / "out.dbml").read_bytes() == b'Table a {\r\n  "id" int // pk\r\n}\r\n'

    def test_restore_check_reports_changes(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(workspace, "restore", "schema.dbml", "generated.dbml", "--check")
        assert exc_info.value.code == 1
        assert "Would restore generated.dbml" in capsys.readouterr().out

    def test_restore_check_when_up_to_date(self, workspace, capsys):
        (workspace / "final.dbml").write_text(preserve(ORIGINAL, REGENERATED), encoding="utf-8")
        run(workspace, "restore", "final.dbml", "final.dbml", "--check")
        assert "already matches" in capsys.readouterr().out

    def test_check_and_output_conflict(self, workspace, capsys):
        with pytest.raises(SystemExit):
            run(workspace, "restore", "schema.dbml", "generated.dbml", "--check", "-o", "x.dbml")
        assert "CLI_VALIDATION_ERROR" in capsys.readouterr().err

    def test_invalid_snapshot(self, workspace, capsys):
        (workspace / "bad.json").write_text('{"comments": [{"type": "aside"}]}', encoding="utf-8")
        with pytest.raises(SystemExit):
            run(workspace, "merge", "generated.dbml", "--snapshot", "bad.json")
        assert "CLI_SNAPSHOT_INVALID" in capsys.readouterr().err

    def test_missing_snapshot(self, workspace, capsys):
        with pytest.raises(SystemExit):
            run(workspace, "reorder", "generated.dbml", "--snapshot", "missing.json")
        assert "Snapshot file not found" in capsys.readouterr().err


class TestBlocksAndConfig:
    """Test the 'blocks' command and configuration handling."""

    def test_blocks(self, workspace, capsys):
        run(workspace, "blocks", "generated.dbml")
        out = capsys.readouterr().out
        assert "orders" in out
        assert "2 of 4 blocks shown" in out

    def test_config_suffixes(self, workspace, capsys):
        (workspace / "dbmlkeep.toml").write_text('[defaults]\nsuffixes = [".schema"]\n', encoding="utf-8")
        (workspace / "model.schema").write_text(ORIGINAL, encoding="utf-8")
        run(workspace, "extract", "model.schema")
        assert json.loads(capsys.readouterr().out)["tableOrder"][0]["tableName"] == "users"

    def test_broken_config(self, workspace, capsys):
        (workspace / "dbmlkeep.toml").write_text("[defaults\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            run(workspace, "extract", "schema.dbml")
        assert "CLI_CONFIG_ERROR" in capsys.readouterr().err

    def test_config_not_valid_utf8(self, workspace, capsys):
        (workspace / "dbmlkeep.toml").write_bytes(b'[defaults]\nencoding = "\xff"\n')
        with pytest.raises(SystemExit):
            run(workspace, "extract", "schema.dbml")
        assert "CLI_CONFIG_ERROR" in capsys.readouterr().err

    def test_version_flag(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(workspace, "--version")
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"dbmlkeep {__version__}"

    def test_no_command_prints_help(self, workspace, capsys):
        run(workspace)
        assert "usage: dbmlkeep" in capsys.readouterr().out

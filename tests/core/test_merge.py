"""Tests for re-injecting comments into regenerated text."""

import pytest

from dbmlkeep import CommentRecord, extract_comments, merge_comments


class TestMergeComments:
    """Test comment placement in regenerated schema text."""

    @pytest.mark.parametrize(
        "text",
        ["", "Table a {\n}\n", "Table a {\r\n  \"id\" int\r\n}\r\n", "\n\n\n", "no schema here"],
    )
    def test_no_comments_is_passthrough(self, text):
        assert merge_comments(text, []) == text

    def test_full_schema(self, reordered_schema, restored_schema):
        comments = [
            CommentRecord.header("// Project schema\n// maintained by hand"),
            CommentRecord.table("// Users of the app", "users"),
            CommentRecord.field_level("  // identity columns", "users"),
            CommentRecord.inline("// primary key", "users", "id"),
            CommentRecord.table("/* Orders placed\n   by users */", "orders"),
            CommentRecord.inline("// owner", "orders", "user_id"),
            CommentRecord.footer("// end of schema"),
        ]
        assert merge_comments(reordered_schema, comments) == restored_schema

    def test_headers_then_blank_line(self):
        comments = [CommentRecord.header("// one"), CommentRecord.header("/* two\n */")]
        assert merge_comments("Table a {\n}", comments) == "// one\n/* two\n */\n\nTable a {\n}"

    def test_footer_after_blank_line(self):
        comments = [CommentRecord.footer("// bye")]
        assert merge_comments("Table a {\n}", comments) == "Table a {\n}\n\n// bye"

    def test_table_comments_in_bucket_order(self):
        comments = [
            CommentRecord.table("// first", "a"),
            CommentRecord.table("// unrelated", "b"),
            CommentRecord.table("// second", "a"),
        ]
        assert merge_comments("Table a {\n}", comments) == "// first\n// second\nTable a {\n}"

    def test_field_comments_open_table_body(self):
        comments = [CommentRecord.field_level("  // keys", "a")]
        merged = merge_comments('Table a {\n  "id" int\n  "name" varchar\n}', comments)
        assert merged == 'Table a {\n  // keys\n  "id" int\n  "name" varchar\n}'

    def test_field_comments_once_per_table_occurrence(self):
        comments = [CommentRecord.field_level("  // note", "a")]
        merged = merge_comments('Table a {\n  "x" int\n}\nTable a {\n  "y" int\n}', comments)
        assert merged.count("// note") == 2
        assert merged == 'Table a {\n  // note\n  "x" int\n}\nTable a {\n  // note\n  "y" int\n}'

    def test_field_comments_with_brace_on_next_line(self):
        comments = [CommentRecord.field_level("  // keys", "a")]
        merged = merge_comments('Table a\n{\n  "id" int\n}', comments)
        assert merged == 'Table a\n{\n  // keys\n  "id" int\n}'

    def test_inline_comment_appended(self):
        comments = [CommentRecord.inline("// pk", "a", "id")]
        assert merge_comments('Table a {\n  "id" int\n}', comments) == 'Table a {\n  "id" int // pk\n}'

    def test_inline_skipped_when_line_has_comment(self):
        comments = [CommentRecord.inline("// pk", "a", "id")]
        text = 'Table a {\n  "id" int // generated\n}'
        assert merge_comments(text, comments) == text

    def test_last_inline_comment_wins(self):
        comments = [
            CommentRecord.inline("// old", "a", "id"),
            CommentRecord.inline("// new", "a", "id"),
        ]
        assert merge_comments('Table a {\n  "id" int\n}', comments) == 'Table a {\n  "id" int // new\n}'

    def test_inline_matches_table_and_field(self):
        comments = [CommentRecord.inline("// only in b", "b", "id")]
        merged = merge_comments('Table a {\n  "id" int\n}\nTable b {\n  "id" int\n}', comments)
        assert merged == 'Table a {\n  "id" int\n}\nTable b {\n  "id" int // only in b\n}'

    def test_comments_for_missing_tables_are_dropped(self):
        comments = [
            CommentRecord.table("// gone", "legacy"),
            CommentRecord.field_level("  // gone too", "legacy"),
            CommentRecord.inline("// gone as well", "legacy", "id"),
        ]
        assert merge_comments('Table a {\n  "id" int\n}', comments) == 'Table a {\n  "id" int\n}'

    def test_inline_not_applied_outside_tables(self):
        comments = [CommentRecord.inline("// pk", "a", "id")]
        text = 'Enum a {\n  "id"\n}'
        assert merge_comments(text, comments) == text


class TestRoundTrip:
    """Test extraction followed by merge on unchanged text."""

    def test_comment_content_survives(self, original_schema, regenerated_schema):
        records = extract_comments(original_schema)
        merged = merge_comments(regenerated_schema, records)
        for record in records:
            assert record.text in merged

    def test_merge_into_stripped_source_restores_anchors(self):
        original = '// top\nTable a {\n  // inner\n  "id" int // pk\n}\n// tail'
        stripped = 'Table a {\n  "id" int\n}'
        merged = merge_comments(stripped, extract_comments(original))
        assert merged == '// top\n\nTable a {\n  // inner\n  "id" int // pk\n}\n\n// tail'

    def test_crlf_round_trip(self):
        original = 'Table a {\r\n  "id" int // pk\r\n}\r\n'
        stripped = 'Table a {\r\n  "id" int\r\n}\r\n'
        assert merge_comments(stripped, extract_comments(original)) == original

    def test_inline_goes_before_carriage_return(self):
        comments = [CommentRecord.inline("// pk", "a", "id")]
        merged = merge_comments('Table a {\r\n  "id" int\r\n}\r\n', comments)
        assert merged == 'Table a {\r\n  "id" int // pk\r\n}\r\n'

"""
Tests for Front-matter — recorded source revision of localized documents

Tests verify:
- Splitting the YAML block from the body
- Dotted lookup of the metadata field
- Malformed YAML reads as "no metadata", not as unreadable
- Unreadable files produce an unreadable record instead of raising
"""

from l10n_audit.core.frontmatter import (
    split_front_matter, lookup_field, parse_front_matter, read_localization,
    DEFAULT_METADATA_FIELD,
)
from tests.factories import translation_text


# =============================================================================
# split_front_matter
# =============================================================================

class TestSplitFrontMatter:

    def test_block_and_body(self):
        block, body = split_front_matter("---\ntitle: X\n---\n# Body\n")
        assert block == "title: X\n"
        assert body == "# Body\n"

    def test_no_block(self):
        content = "# Just a heading\n"
        assert split_front_matter(content) == (None, content)

    def test_unclosed_block_is_body(self):
        content = "---\ntitle: X\n# Body\n"
        assert split_front_matter(content) == (None, content)

    def test_fence_must_be_first_line(self):
        content = "\n---\ntitle: X\n---\n"
        assert split_front_matter(content)[0] is None

    def test_crlf_fences(self):
        block, body = split_front_matter("---\r\ntitle: X\r\n---\r\nBody\r\n")
        assert block == "title: X\r\n"
        assert body == "Body\r\n"

    def test_leading_byte_order_mark(self):
        block, body = split_front_matter("\ufeff---\ntitle: X\n---\nBody\n")
        assert block == "title: X\n"
        assert body == "Body\n"


# =============================================================================
# lookup_field
# =============================================================================

class TestLookupField:

    def test_nested(self):
        data = {"l10n": {"sourceCommit": "abc123"}}
        assert lookup_field(data, "l10n.sourceCommit") == "abc123"

    def test_top_level(self):
        assert lookup_field({"sourceCommit": "abc"}, "sourceCommit") == "abc"

    def test_missing_key(self):
        assert lookup_field({"l10n": {}}, "l10n.sourceCommit") is None

    def test_intermediate_not_mapping(self):
        assert lookup_field({"l10n": "text"}, "l10n.sourceCommit") is None

    def test_non_scalar_value(self):
        assert lookup_field({"l10n": {"sourceCommit": ["a"]}}, "l10n.sourceCommit") is None

    def test_blank_value(self):
        assert lookup_field({"l10n": {"sourceCommit": "  "}}, "l10n.sourceCommit") is None

    def test_null_value(self):
        assert lookup_field({"l10n": {"sourceCommit": None}}, "l10n.sourceCommit") is None


# =============================================================================
# parse_front_matter
# =============================================================================

class TestParseFrontMatter:

    def test_valid(self):
        data, error = parse_front_matter(translation_text("Body", source_commit="abc"))
        assert error is None
        assert data["l10n"]["sourceCommit"] == "abc"

    def test_malformed_yaml(self):
        data, error = parse_front_matter("---\ntitle: [unclosed\n---\nBody\n")
        assert data == {}
        assert error.startswith("Malformed front-matter")

    def test_scalar_block(self):
        assert parse_front_matter("---\njust text\n---\n") == ({}, None)

    def test_empty_block(self):
        assert parse_front_matter("---\n---\nBody\n") == ({}, None)


# =============================================================================
# read_localization
# =============================================================================

class TestReadLocalization:

    def test_recorded_revision(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_text(translation_text("內容", source_commit="abc123"), encoding="utf-8")

        record = read_localization(path, "doc.md")

        assert record.readable
        assert record.recorded_source_revision == "abc123"
        assert "內容" in record.raw_content
        assert record.error is None

    def test_without_metadata(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_text(translation_text("Body"), encoding="utf-8")

        record = read_localization(path, "doc.md")

        assert record.readable
        assert record.recorded_source_revision is None

    def test_custom_field(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_text("---\nsourceCommit: def456\n---\n", encoding="utf-8")

        assert read_localization(path, "doc.md").recorded_source_revision is None
        assert read_localization(path, "doc.md", metadata_field="sourceCommit").recorded_source_revision == "def456"

    def test_malformed_yaml_is_readable(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_text("---\nl10n: [oops\n---\nBody\n", encoding="utf-8")

        record = read_localization(path, "doc.md")

        assert record.readable
        assert record.recorded_source_revision is None
        assert record.error is not None

    def test_byte_order_mark_before_fence(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_bytes(
            b"\xef\xbb\xbf---\ntitle: A\nl10n:\n  sourceCommit: abc123\n---\nbody\n"
        )

        record = read_localization(path, "doc.md")

        assert record.readable
        assert record.recorded_source_revision == "abc123"

    def test_missing_file(self, tmp_path):
        record = read_localization(tmp_path / "absent.md", "absent.md")

        assert not record.readable
        assert record.raw_content is None
        assert record.error

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_bytes(b"\xff\xfe\x00bad")

        assert not read_localization(path, "doc.md").readable

    def test_default_field(self):
        assert DEFAULT_METADATA_FIELD == "l10n.sourceCommit"

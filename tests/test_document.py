"""Tests for vue_type_check.document module."""

from __future__ import annotations

from pathlib import Path

import pytest

from vue_type_check.diagnostics import Position
from vue_type_check.document import TextDocument


class TestTextDocument:
    """Tests for the TextDocument dataclass."""

    def test_create(self) -> None:
        """Test create keeps all fields and version 0."""
        doc = TextDocument.create("file:///a.vue", "vue", 0, "<template></template>")
        assert doc.uri == "file:///a.vue"
        assert doc.language_id == "vue"
        assert doc.version == 0
        assert doc.text == "<template></template>"

    def test_from_path_builds_file_uri(self, tmp_path: Path) -> None:
        """Test from_path produces an absolute file:// URI."""
        path = tmp_path / "App.vue"
        doc = TextDocument.from_path(path, "vue", "")
        assert doc.uri.startswith("file://")
        assert doc.uri.endswith("/App.vue")
        assert doc.version == 0

    def test_line_count(self) -> None:
        """Test a trailing newline starts a final empty line."""
        assert TextDocument.create("u", "vue", 0, "").line_count == 1
        assert TextDocument.create("u", "vue", 0, "a\nb").line_count == 2
        assert TextDocument.create("u", "vue", 0, "a\nb\n").line_count == 3

    def test_get_line_strips_terminators(self) -> None:
        """Test get_line drops \\n and \\r\\n."""
        doc = TextDocument.create("u", "vue", 0, "first\r\nsecond\nthird")
        assert doc.get_line(0) == "first"
        assert doc.get_line(1) == "second"
        assert doc.get_line(2) == "third"

    def test_get_line_out_of_range(self) -> None:
        """Test get_line rejects lines outside the document."""
        doc = TextDocument.create("u", "vue", 0, "only")
        with pytest.raises(IndexError):
            doc.get_line(1)
        with pytest.raises(IndexError):
            doc.get_line(-1)

    def test_offset_at(self) -> None:
        """Test offset_at counts from the start of the position's line."""
        doc = TextDocument.create("u", "vue", 0, "ab\ncde\nf")
        assert doc.offset_at(Position(0, 0)) == 0
        assert doc.offset_at(Position(1, 2)) == 5
        assert doc.offset_at(Position(2, 1)) == len(doc.text)

    def test_offset_at_clamps(self) -> None:
        """Test offset_at clamps characters past the line and lines past the end."""
        doc = TextDocument.create("u", "vue", 0, "ab\ncd")
        assert doc.offset_at(Position(0, 99)) == 3
        assert doc.offset_at(Position(9, 0)) == len(doc.text)
        assert doc.offset_at(Position(-1, 0)) == 0

    def test_documents_are_immutable(self) -> None:
        """Test documents cannot be modified."""
        doc = TextDocument.create("u", "vue", 0, "x")
        with pytest.raises(AttributeError):
            doc.text = "y"  # type: ignore[misc]

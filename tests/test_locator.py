import logging
from pathlib import Path

import pytest

from api_annotations.source.locator import (
    detect_comment_style,
    find_comment_blocks,
    iter_source_files,
    scan_file,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestDetectCommentStyle:
    def test_go(self):
        assert detect_comment_style(Path("handlers.go")) == "//"

    def test_python(self):
        assert detect_comment_style(Path("views.PY")) == "#"

    def test_unsupported(self):
        with pytest.raises(ValueError):
            detect_comment_style(Path("notes.txt"))


class TestFindCommentBlocks:
    def test_block_attached_to_declaration(self):
        text = "package x\n\n// @router /a [get]\n// @Title a\nfunc A() {}\n"
        blocks = find_comment_blocks(text, "//")
        assert len(blocks) == 1
        assert blocks[0].lines == ["// @router /a [get]", "// @Title a"]
        assert blocks[0].line_number == 3
        assert blocks[0].declaration == "func A() {}"

    def test_blank_line_detaches_block(self):
        text = "// @router /a [get]\n\nfunc A() {}\n"
        assert find_comment_blocks(text, "//") == []

    def test_trailing_comment_without_declaration(self):
        assert find_comment_blocks("func A() {}\n// @router /a [get]\n", "//") == []


class TestScanFile:
    def test_only_routed_blocks(self):
        blocks = scan_file(FIXTURES / "wishlist.go")
        assert [b.line_number for b in blocks] == [7, 17]
        assert all(b.has_router for b in blocks)

    def test_warns_about_unrouted_annotations(self, caplog):
        with caplog.at_level(logging.WARNING, logger="api_annotations.source.locator"):
            assert scan_file(FIXTURES / "unrouted.go") == []
        assert "annotations without @router" in caplog.text

    def test_python_source(self):
        blocks = scan_file(FIXTURES / "handlers.py")
        assert len(blocks) == 1
        assert blocks[0].declaration == "def create_order(request):"


class TestIterSourceFiles:
    def test_expands_directory(self, tmp_path):
        (tmp_path / "a.go").write_text("")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.py").write_text("")
        (tmp_path / "readme.txt").write_text("")
        files = iter_source_files([tmp_path])
        assert sorted(f.name for f in files) == ["a.go", "b.py"]

    def test_files_passed_through(self):
        assert iter_source_files([FIXTURES / "wishlist.go"]) == [FIXTURES / "wishlist.go"]

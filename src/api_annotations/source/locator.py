"""Locate annotation comment blocks in source files.

A comment block is a run of consecutive line comments directly followed by
the declaration it documents (a blank line detaches it).
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

from api_annotations.parser.comment import clean_comment_line

logger = logging.getLogger(__name__)

COMMENT_STYLES = {
    ".go": "//",
    ".js": "//",
    ".ts": "//",
    ".java": "//",
    ".rs": "//",
    ".c": "//",
    ".cpp": "//",
    ".php": "//",
    ".swift": "//",
    ".kt": "//",
    ".py": "#",
    ".rb": "#",
    ".sh": "#",
}


class CommentBlock(BaseModel):
    """Comment lines attached to one declaration."""

    lines: list[str]
    line_number: int  # 1-based line of the first comment
    declaration: str

    @property
    def has_router(self) -> bool:
        return any(clean_comment_line(line).startswith("@router") for line in self.lines)

    @property
    def has_tags(self) -> bool:
        return any(clean_comment_line(line).startswith("@") for line in self.lines)


def detect_comment_style(file_path: Path) -> str:
    """Return the line-comment marker for a source file, based on its suffix."""
    marker = COMMENT_STYLES.get(file_path.suffix.lower())
    if marker is None:
        raise ValueError(f"Unsupported source file type: {file_path.name}")
    return marker


def find_comment_blocks(text: str, marker: str) -> list[CommentBlock]:
    """Split source text into the comment blocks that precede declarations."""
    blocks: list[CommentBlock] = []
    current: list[str] = []
    start = 0

    for number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if stripped.startswith(marker):
            if not current:
                start = number
            current.append(stripped)
            continue
        if current and stripped:
            blocks.append(CommentBlock(lines=current, line_number=start, declaration=stripped))
        current = []

    return blocks


def scan_file(file_path: Path) -> list[CommentBlock]:
    """Return the blocks of a source file that document a route."""
    marker = detect_comment_style(file_path)
    text = file_path.read_text(encoding="utf-8")

    annotated = []
    for block in find_comment_blocks(text, marker):
        if block.has_router:
            annotated.append(block)
        elif block.has_tags:
            logger.warning(
                "%s:%d: annotations without @router are ignored", file_path, block.line_number
            )
    return annotated


def iter_source_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into the supported source files they contain."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in COMMENT_STYLES)
            )
        else:
            files.append(path)
    return files

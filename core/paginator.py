"""
Book pagination.

Splits chapter markdown into page strings for the two-column reading view,
and tracks the reader's position across pages and chapters.

Images are atomic: a markdown image token (optionally followed by an HTML
comment carrying its metadata) always gets a page of its own. Text is packed
paragraph by paragraph until the estimated line count would overflow the
page.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Literal

from .artifacts.book import to_array_index
from .constants import DEFAULT_CHARS_PER_LINE, DEFAULT_LINES_PER_PAGE
from .exceptions import InvalidOperationError
from .models import Chapter

logger = logging.getLogger(__name__)

IMAGE_TOKEN_PATTERN = re.compile(
    r"!\[[^\]]*\]\([^)\s]+(?:\s+\"[^\"]*\")?\)(?:[ \t]*\n?[ \t]*<!--.*?-->)?",
    re.DOTALL,
)
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class Segment:
    type: Literal["text", "image"]
    content: str


def split_segments(content: str) -> list[Segment]:
    """Split content into ordered text and image segments. Blank text is dropped."""
    segments: list[Segment] = []
    position = 0
    for match in IMAGE_TOKEN_PATTERN.finditer(content):
        text = content[position:match.start()]
        if text.strip():
            segments.append(Segment("text", text))
        segments.append(Segment("image", match.group(0)))
        position = match.end()
    tail = content[position:]
    if tail.strip():
        segments.append(Segment("text", tail))
    return segments


def estimate_lines(paragraph: str, chars_per_line: int = DEFAULT_CHARS_PER_LINE) -> int:
    """Rendered height of a paragraph: its wrapped lines plus the gap after it."""
    return math.ceil(len(paragraph) / chars_per_line) + 1


def _pack_paragraphs(text: str, lines_per_page: int, chars_per_line: int) -> list[str]:
    pages = []
    current: list[str] = []
    used = 0
    for paragraph in _PARAGRAPH_BREAK.split(text):
        paragraph = paragraph.strip()
        if not paragraph:
            continue
        lines = estimate_lines(paragraph, chars_per_line)
        if current and used + lines > lines_per_page:
            pages.append("\n\n".join(current))
            current, used = [], 0
        current.append(paragraph)
        used += lines
    if current:
        pages.append("\n\n".join(current))
    return pages


def paginate(
    content: str,
    lines_per_page: int = DEFAULT_LINES_PER_PAGE,
    chars_per_line: int = DEFAULT_CHARS_PER_LINE,
) -> list[str]:
    """
    Split chapter content into pages.

    Args:
        content: Chapter markdown
        lines_per_page: Estimated lines that fit on one page
        chars_per_line: Characters that fit on one rendered line

    Returns:
        Page strings in reading order. Never empty: blank content yields
        a single empty page.
    """
    if lines_per_page < 1 or chars_per_line < 1:
        raise ValueError("lines_per_page and chars_per_line must be positive")

    pages: list[str] = []
    for segment in split_segments(content):
        if segment.type == "image":
            pages.append(segment.content.strip())
        else:
            pages.extend(_pack_paragraphs(segment.content, lines_per_page, chars_per_line))
    return pages or [""]


def is_image_only_page(page: str) -> bool:
    """True when the page is exactly one image token."""
    return IMAGE_TOKEN_PATTERN.fullmatch(page.strip()) is not None


ViewMode = Literal["two-column", "single"]


@dataclass(frozen=True)
class Spread:
    chapter_number: int
    index: int
    left: str
    right: str | None
    left_page_number: int
    total_pages: int


class SpreadNavigator:
    """
    Reader position within a book.

    In two-column mode the position is a spread index (two pages per step);
    in single mode it is a page index. Stepping past either end of a chapter
    moves into the neighbouring chapter, whose page count is computed fresh
    since chapters differ in length. Stepping before chapter 1's first
    spread or after the last chapter's last spread does nothing.
    """

    def __init__(
        self,
        chapters: list[Chapter],
        chapter_number: int = 1,
        view_mode: ViewMode = "two-column",
        lines_per_page: int = DEFAULT_LINES_PER_PAGE,
        chars_per_line: int = DEFAULT_CHARS_PER_LINE,
    ) -> None:
        if not chapters:
            raise InvalidOperationError("Cannot navigate a book with no chapters")
        self._chapters = chapters
        self._lines_per_page = lines_per_page
        self._chars_per_line = chars_per_line
        self._pages: dict[int, list[str]] = {}
        self.view_mode: ViewMode = view_mode
        self.chapter_number = 1
        self.index = 0
        self.go_to_chapter(chapter_number)

    @property
    def chapter_count(self) -> int:
        return len(self._chapters)

    @property
    def pages_per_step(self) -> int:
        return 2 if self.view_mode == "two-column" else 1

    def pages(self, chapter_number: int) -> list[str]:
        """Pages of a chapter, computed on first use."""
        if chapter_number not in self._pages:
            chapter = self._chapters[to_array_index(chapter_number)]
            self._pages[chapter_number] = paginate(
                chapter.content, self._lines_per_page, self._chars_per_line
            )
        return self._pages[chapter_number]

    def step_count(self, chapter_number: int) -> int:
        """Number of spreads (or pages, in single mode) in a chapter."""
        return math.ceil(len(self.pages(chapter_number)) / self.pages_per_step)

    def invalidate(self, chapter_number: int | None = None) -> None:
        """Drop cached pages after chapter content changed."""
        if chapter_number is None:
            self._pages.clear()
        else:
            self._pages.pop(chapter_number, None)
        last = self.step_count(self.chapter_number) - 1
        self.index = min(self.index, last)

    def go_to_chapter(self, chapter_number: int) -> None:
        if not 1 <= chapter_number <= self.chapter_count:
            raise InvalidOperationError(
                f"Chapter {chapter_number} does not exist (book has {self.chapter_count})"
            )
        self.chapter_number = chapter_number
        self.index = 0

    def set_view_mode(self, view_mode: ViewMode) -> None:
        """Switch view modes, keeping the first visible page in view."""
        if view_mode == self.view_mode:
            return
        first_page = self.index * self.pages_per_step
        self.view_mode = view_mode
        self.index = first_page // self.pages_per_step

    def next(self) -> bool:
        """Step forward. Returns False when already at the end of the book."""
        if self.index < self.step_count(self.chapter_number) - 1:
            self.index += 1
            return True
        if self.chapter_number < self.chapter_count:
            self.chapter_number += 1
            self.index = 0
            return True
        return False

    def previous(self) -> bool:
        """Step back. Returns False when already at the start of the book."""
        if self.index > 0:
            self.index -= 1
            return True
        if self.chapter_number > 1:
            self.chapter_number -= 1
            self.index = self.step_count(self.chapter_number) - 1
            logger.debug(
                "Moved back to chapter %d, step %d", self.chapter_number, self.index
            )
            return True
        return False

    def current(self) -> Spread:
        pages = self.pages(self.chapter_number)
        left_index = self.index * self.pages_per_step
        right = None
        if self.view_mode == "two-column" and left_index + 1 < len(pages):
            right = pages[left_index + 1]
        return Spread(
            chapter_number=self.chapter_number,
            index=self.index,
            left=pages[left_index],
            right=right,
            left_page_number=left_index + 1,
            total_pages=len(pages),
        )

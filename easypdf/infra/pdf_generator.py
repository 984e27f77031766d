import io
import json
import logging
import math
import unicodedata
from textwrap import TextWrapper
from typing import Iterable, List, Optional, Tuple

from reportlab.lib.pagesizes import A4, LETTER
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from easypdf.config import settings


logger = logging.getLogger(__name__)

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}

# Prefix of the keywords entry that records how paragraphs were laid out.
LAYOUT_PREFIX = "easypdf-layout:"


class UnsupportedTextError(ValueError):
    """The active font cannot draw a character of the text."""


def rows_per_page(page_height: float, margin: float, line_height: float) -> int:
    """Number of text rows whose baseline stays above the bottom margin."""

    rows = math.ceil((page_height - 2 * margin) / line_height)
    if rows < 1:
        raise ValueError("page is too small for the configured margin and line height")
    return rows


class RowCursor:
    """Hands out (page, row) slots in reading order.

    Rows are numbered from the top margin down, ``line_height`` apart.
    ``skip`` leaves a row empty without starting a new page, so a skipped row
    at the bottom of a page is simply dropped.
    """

    def __init__(self, rows: int) -> None:
        self._rows = rows
        self.page = 0
        self.row = 0

    def skip(self) -> None:
        self.row += 1

    def place(self) -> Tuple[int, int]:
        if self.row >= self._rows:
            self.page += 1
            self.row = 0
        slot = (self.page, self.row)
        self.row += 1
        return slot


class PDFGenerator:
    """Plain-text PDF renderer.

    Takes paragraph texts and lays them out in a single column, top to bottom.
    Each paragraph is split on ``"\\n"`` and every line is wrapped at
    ``max_chars_per_line`` characters without dropping any character;
    paragraphs are separated by one empty row. The number of rows used by each
    line is stored in the document keywords so PDFParser can tell soft wraps
    from hard line breaks.
    """

    def __init__(
        self,
        *,
        page_size: Optional[str] = None,
        margin: Optional[float] = None,
        font_name: Optional[str] = None,
        font_path: Optional[str] = None,
        font_size: Optional[float] = None,
        line_height: Optional[float] = None,
        max_chars_per_line: Optional[int] = None,
        invariant: Optional[bool] = None,
    ) -> None:
        size_name = (page_size or settings.page_size).upper()
        if size_name not in PAGE_SIZES:
            raise ValueError(f"unsupported page size: {size_name!r}")
        self._pagesize = PAGE_SIZES[size_name]
        self._margin = settings.margin if margin is None else margin
        self._font_name = font_name or settings.font_name
        self._font_size = font_size or settings.font_size
        self._line_height = line_height or settings.line_height
        self._invariant = settings.invariant if invariant is None else invariant
        self._rows = rows_per_page(self._pagesize[1], self._margin, self._line_height)
        self._wrapper = TextWrapper(
            width=max_chars_per_line or settings.max_chars_per_line,
            expand_tabs=False,
            replace_whitespace=False,
            drop_whitespace=False,
            break_long_words=True,
            break_on_hyphens=False,
        )

        font_path = font_path or settings.font_path
        if font_path:
            if self._font_name in pdfmetrics.standardFonts:
                raise ValueError(
                    f"font_path needs its own font_name; {self._font_name!r} is a built-in font"
                )
            pdfmetrics.registerFont(TTFont(self._font_name, font_path))
        self._font = pdfmetrics.getFont(self._font_name)

    @property
    def line_height(self) -> float:
        return self._line_height

    def generate(self, paragraphs: Iterable[str]) -> bytes:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=self._pagesize, invariant=int(self._invariant))
        top = self._pagesize[1] - self._margin
        c.setFont(self._font_name, self._font_size)

        cursor = RowCursor(self._rows)
        current_page = 0
        layout: List[List[int]] = []
        for index, para in enumerate(paragraphs):
            if index:
                cursor.skip()
            line_rows: List[int] = []
            for line in (para or "").split("\n"):
                self._check_drawable(line)
                chunks = self._wrapper.wrap(line) or [""]
                line_rows.append(len(chunks))
                for chunk in chunks:
                    page, row = cursor.place()
                    if page != current_page:
                        c.showPage()
                        c.setFont(self._font_name, self._font_size)
                        current_page = page
                    if chunk:
                        c.drawString(self._margin, top - row * self._line_height, chunk)
            layout.append(line_rows)

        c.setKeywords(LAYOUT_PREFIX + json.dumps(
            {"margin": self._margin, "line_height": self._line_height, "rows": layout},
            separators=(",", ":"),
        ))
        # Closes the last page, and guarantees one page for an empty document.
        c.showPage()
        c.save()

        logger.debug("rendered %d paragraph(s) on %d page(s)", len(layout), current_page + 1)
        return buffer.getvalue()

    def _check_drawable(self, line: str) -> None:
        for ch in line:
            if unicodedata.category(ch) == "Cc":
                raise UnsupportedTextError(f"control character {ch!r} cannot be drawn")

        if isinstance(self._font, TTFont):
            missing = [ch for ch in line if ord(ch) not in self._font.face.charToGlyph]
        else:
            # Built-in Type 1 fonts are drawn with WinAnsiEncoding.
            missing = [ch for ch in line if not _in_cp1252(ch)]
        if missing:
            raise UnsupportedTextError(
                f"font {self._font_name!r} has no glyph for {''.join(dict.fromkeys(missing))!r}"
            )


def _in_cp1252(ch: str) -> bool:
    try:
        ch.encode("cp1252")
    except UnicodeEncodeError:
        return False
    return True

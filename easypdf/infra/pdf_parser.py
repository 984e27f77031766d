import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import fitz  # PyMuPDF

from easypdf.config import settings
from easypdf.infra.pdf_generator import LAYOUT_PREFIX, RowCursor, rows_per_page


# Keep spaces as drawn and never invent spaces between glyphs.
TEXT_FLAGS = (
    fitz.TEXT_PRESERVE_WHITESPACE
    | fitz.TEXT_PRESERVE_LIGATURES
    | fitz.TEXT_INHIBIT_SPACES
    | fitz.TEXT_MEDIABOX_CLIP
)


class PDFParser:
    """Reads PDFs back into text.

    For documents written by PDFGenerator the layout record in the keywords
    says how many rows every source line occupied, so paragraphs come back
    exactly: wrapped rows are concatenated, hard line breaks are restored as
    ``"\\n"`` and whitespace is kept. Other PDFs are split into paragraphs by
    vertical spacing: a gap wider than 1.5 x ``line_height`` starts a new
    paragraph, each page starts a new paragraph and lines are joined with a
    space.
    """

    def __init__(self, line_height: Optional[float] = None) -> None:
        self._line_height = line_height or settings.line_height

    def get_page_count(self, pdf_path: Path | str) -> int:
        doc = fitz.open(Path(pdf_path))
        try:
            return doc.page_count
        finally:
            doc.close()

    def extract_pages(self, pdf_path: Path | str) -> List[str]:
        """Text of every page that has any, one line per drawn row."""

        doc = fitz.open(Path(pdf_path))
        try:
            pages = ["\n".join(text for _, text in self._page_lines(page)) for page in doc]
        finally:
            doc.close()
        return [text for text in pages if text]

    def extract_paragraphs(self, pdf_path: Path | str) -> List[str]:
        doc = fitz.open(Path(pdf_path))
        try:
            layout = self._read_layout(doc)
            if layout is None:
                return self._paragraphs_by_spacing(doc)
            return self._paragraphs_from_layout(doc, layout)
        finally:
            doc.close()

    @staticmethod
    def _read_layout(doc) -> Optional[dict]:
        keywords = (doc.metadata or {}).get("keywords") or ""
        if not keywords.startswith(LAYOUT_PREFIX):
            return None
        return json.loads(keywords[len(LAYOUT_PREFIX):])

    def _paragraphs_from_layout(self, doc, layout: dict) -> List[str]:
        margin = layout["margin"]
        line_height = layout["line_height"]
        if doc.page_count == 0:
            return []

        pages = [self._page_rows(page, margin, line_height) for page in doc]
        cursor = RowCursor(rows_per_page(doc[0].rect.height, margin, line_height))

        paragraphs: List[str] = []
        for index, line_rows in enumerate(layout["rows"]):
            if index:
                cursor.skip()
            lines = []
            for count in line_rows:
                parts = []
                for _ in range(count):
                    page, row = cursor.place()
                    if page < len(pages):
                        parts.append(pages[page].get(row, ""))
                lines.append("".join(parts))
            paragraphs.append("\n".join(lines))
        return paragraphs

    def _paragraphs_by_spacing(self, doc) -> List[str]:
        paragraphs: List[List[str]] = []
        threshold = self._line_height * 1.5

        for page in doc:
            previous_top: Optional[float] = None
            for top, text in self._page_lines(page):
                if previous_top is None or top - previous_top > threshold:
                    paragraphs.append([])
                paragraphs[-1].append(text.strip())
                previous_top = top

        return [" ".join(lines) for lines in paragraphs]

    @staticmethod
    def _page_rows(page, margin: float, line_height: float) -> Dict[int, str]:
        """Map of row number to the characters drawn on that row's baseline."""

        chars: Dict[int, List[Tuple[float, str]]] = {}
        for block in page.get_text("rawdict", flags=TEXT_FLAGS)["blocks"]:
            if block.get("type") != 0:
                continue
            for line in block["lines"]:
                for span in line["spans"]:
                    for char in span["chars"]:
                        x, y = char["origin"]
                        row = round((y - margin) / line_height)
                        chars.setdefault(row, []).append((x, char["c"]))
        return {row: "".join(c for _, c in sorted(items)) for row, items in chars.items()}

    @staticmethod
    def _page_lines(page) -> List[Tuple[float, str]]:
        lines: List[Tuple[float, str]] = []
        for block in page.get_text("dict", flags=TEXT_FLAGS)["blocks"]:
            if block.get("type") != 0:
                continue
            for line in block["lines"]:
                text = "".join(span["text"] for span in line["spans"])
                if text.strip():
                    lines.append((line["bbox"][1], text))
        lines.sort(key=lambda item: item[0])
        return lines

import logging
from pathlib import Path
from typing import Optional

from easypdf.infra.pdf_generator import PDFGenerator
from easypdf.infra.storage import Storage, get_storage
from easypdf.models import Document, Paragraph


logger = logging.getLogger(__name__)


class DocumentService:
    """Document -> PDF -> file pipeline.

    Write failures (missing directory, permission denied, full disk) surface
    as ``OSError`` from the storage and are not handled here.
    """

    def __init__(
        self,
        generator: Optional[PDFGenerator] = None,
        storage: Optional[Storage] = None,
    ) -> None:
        self._generator = generator or PDFGenerator()
        self._storage = storage or get_storage()

    def create_document(self) -> Document:
        return Document()

    def append_paragraph(self, doc: Document, text: str) -> None:
        doc.add(Paragraph(text))

    def render(self, doc: Document) -> bytes:
        return self._generator.generate(doc.texts())

    def write_to_file(self, doc: Document, path: Path | str) -> Path:
        """Render ``doc`` and write it at ``path``, replacing any existing file."""

        data = self.render(doc)
        written = self._storage.save(path, data)
        logger.info("document with %d block(s) written to %s", len(doc), written)
        return Path(written)


class PdfBuilder(Document):
    """Collects content blocks for a PdfWrapper to render."""


class PdfWrapper:
    """Renders a builder's blocks to PDF.

    The wrapper reads the builder only while rendering and keeps no copy of
    its blocks, so later ``add`` calls show up in the next render.
    """

    def __init__(self, builder: Document, service: Optional[DocumentService] = None) -> None:
        self._builder = builder
        self._service = service or DocumentService()

    def to_bytes(self) -> bytes:
        return self._service.render(self._builder)

    def to_file(self, path: Path | str) -> Path:
        return self._service.write_to_file(self._builder, path)

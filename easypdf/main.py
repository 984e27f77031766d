import logging

from easypdf.config import settings
from easypdf.models import Paragraph
from easypdf.services.document_service import PdfBuilder, PdfWrapper


def main() -> None:
    """Write a one-paragraph "Hello world" PDF to ``settings.output_path``."""

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    builder = PdfBuilder()

    paragraph = Paragraph("Hello world")

    builder.add(paragraph)

    wrapper = PdfWrapper(builder)
    wrapper.to_file(settings.output_path)


if __name__ == "__main__":
    main()

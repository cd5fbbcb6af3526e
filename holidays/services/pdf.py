"""
PDF text extraction for downloaded calendars.
"""

import io
import logging

from pypdf import PdfReader

logger = logging.getLogger(__name__)


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """
    Concatenate the text of every page.

    Raises:
        ValueError: if the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
    except Exception as e:
        raise ValueError(f"Could not read PDF: {e}") from e

    pages = []
    for page_num, page in enumerate(reader.pages, start=1):
        try:
            pages.append(page.extract_text() or "")
        except Exception as e:
            logger.warning("Error extracting text from page %s: %s", page_num, e)
            pages.append("")

    text = "\n\n".join(pages)
    logger.info("Extracted %s characters from %s pages", len(text), len(pages))
    return text

"""
Text Extractor - read the text layer of a PDF with pdfplumber
"""

import io
from dataclasses import dataclass

import pdfplumber

from .errors import PDFExtractionError
from .logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExtractedText:
    text: str
    page_count: int


class PDFTextExtractor:
    """Extract text from text-based PDFs"""

    def extract(self, data: bytes) -> ExtractedText:
        """
        Extract the text of every page, pages joined by newlines.

        Raises:
            PDFExtractionError: The bytes are not a readable PDF
        """
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                page_texts = []
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        page_texts.append(page_text)
                page_count = len(pdf.pages)
        except Exception as e:
            raise PDFExtractionError(f"Failed to parse PDF file: {e}") from e

        text = '\n'.join(page_texts)
        logger.info("Extracted %d characters from %d pages", len(text), page_count)
        return ExtractedText(text=text, page_count=page_count)

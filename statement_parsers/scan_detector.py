"""
Scanned-Document Detector - decide whether a PDF needs OCR
"""

import re

from .config import (
    SCANNED_CHARS_PER_PAGE,
    SCANNED_MIN_ALNUM_RATIO,
    SCANNED_MIN_TEXT_RATIO,
)
from .logging_setup import get_logger

logger = get_logger(__name__)

ALNUM_PATTERN = re.compile(r'[A-Za-z0-9]')


def is_likely_scanned(text: str, page_count: int) -> bool:
    """
    Return True when extracted text suggests an image-based document.

    Heuristics:
    - very little text relative to the page count
    - text that is mostly non-alphanumeric noise (garbled image layer)
    """
    text_length = len(text.strip()) if text else 0

    if page_count <= 0 or text_length == 0:
        logger.info("[SCAN] No text extracted (%d chars, %d pages)", text_length, page_count)
        return True

    expected_length = page_count * SCANNED_CHARS_PER_PAGE
    if text_length < expected_length * SCANNED_MIN_TEXT_RATIO:
        logger.info("[SCAN] Text too short: %d chars for %d pages (expected ~%d)",
                    text_length, page_count, expected_length)
        return True

    alnum_ratio = len(ALNUM_PATTERN.findall(text)) / text_length
    if alnum_ratio < SCANNED_MIN_ALNUM_RATIO:
        logger.info("[SCAN] Too much gibberish: only %.1f%% alphanumeric", alnum_ratio * 100)
        return True

    return False

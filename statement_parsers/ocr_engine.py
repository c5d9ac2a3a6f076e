"""
OCR Engine - Tesseract recognition behind a fixed-size worker pool

Each page of a document is one job on a shared ThreadPoolExecutor. The
calling thread blocks until every page is done. The pool is created on first
use and drained on interpreter exit.
"""

import atexit
import io
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pytesseract
from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
from PIL import Image, ImageSequence

from .config import (
    OCR_DPI,
    OCR_LANGUAGE,
    OCR_TESSERACT_CONFIG,
    OCR_WORKERS,
    POPPLER_PATH,
    TESSERACT_CMD,
)
from .errors import OCRError
from .logging_setup import get_logger

logger = get_logger(__name__)

PDF_MAGIC = b'%PDF'


@dataclass(frozen=True)
class OCRResult:
    text: str
    confidence: float       # mean word confidence, 0 to 100


def words_to_text(data: Dict[str, List]) -> Tuple[str, List[float]]:
    """
    Rebuild page text from pytesseract.image_to_data output.

    Returns:
        Tuple of (text with one line per Tesseract line, word confidences)
    """
    lines = []
    current_key = None
    current_words: List[str] = []
    confidences = []

    for i, word in enumerate(data.get('text', [])):
        conf = float(data['conf'][i])
        word = (word or '').strip()
        if conf < 0 or not word:
            continue

        confidences.append(conf)
        key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
        if key != current_key and current_words:
            lines.append(' '.join(current_words))
            current_words = []
        current_key = key
        current_words.append(word)

    if current_words:
        lines.append(' '.join(current_words))
    return '\n'.join(lines), confidences


class TesseractOCREngine:
    """Recognize text in scanned PDFs and images"""

    def __init__(self, workers: int = OCR_WORKERS, dpi: int = OCR_DPI,
                 language: str = OCR_LANGUAGE, tesseract_config: str = OCR_TESSERACT_CONFIG,
                 tesseract_cmd: Optional[str] = TESSERACT_CMD,
                 poppler_path: Optional[str] = POPPLER_PATH):
        self.workers = max(1, workers)
        self.dpi = dpi
        self.language = language
        self.tesseract_config = tesseract_config
        self.poppler_path = poppler_path

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        self._closed = False

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._closed:
                raise OCRError("OCR engine has been shut down")
            if self._executor is None:
                logger.info("Initializing OCR pool with %d workers...", self.workers)
                self._executor = ThreadPoolExecutor(max_workers=self.workers,
                                                    thread_name_prefix='ocr')
            return self._executor

    def recognize(self, data: bytes) -> OCRResult:
        """
        Run OCR over every page of a PDF or image.

        Raises:
            OCRError: Rasterising or recognition failed
        """
        start = time.time()
        images = self._load_images(data)
        logger.info("Running OCR on %d pages...", len(images))

        executor = self._get_executor()
        try:
            futures = [executor.submit(self._recognize_page, image, page_number)
                       for page_number, image in enumerate(images, 1)]
        except RuntimeError as e:
            # close() ran between _get_executor and submit
            raise OCRError(f"OCR engine has been shut down: {e}") from e
        pages = [future.result() for future in futures]

        text = '\n'.join(page_text for page_text, _ in pages if page_text)
        confidences = [conf for _, page_confidences in pages for conf in page_confidences]
        confidence = round(sum(confidences) / len(confidences), 2) if confidences else 0.0

        logger.info("OCR completed in %.2fs (%d characters, confidence %.1f)",
                    time.time() - start, len(text), confidence)
        return OCRResult(text=text, confidence=confidence)

    def _load_images(self, data: bytes) -> List[Image.Image]:
        if data[:len(PDF_MAGIC)] == PDF_MAGIC:
            logger.info("Converting PDF to images...")
            try:
                return convert_from_bytes(data, dpi=self.dpi, poppler_path=self.poppler_path)
            except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as e:
                raise OCRError(f"Could not rasterise PDF: {e}") from e

        try:
            image = Image.open(io.BytesIO(data))
            return [frame.copy() for frame in ImageSequence.Iterator(image)]
        except OSError as e:
            raise OCRError(f"Could not open image: {e}") from e

    def _recognize_page(self, image: Image.Image, page_number: int) -> Tuple[str, List[float]]:
        logger.debug("OCR processing page %d...", page_number)
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                config=self.tesseract_config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise OCRError(f"OCR failed on page {page_number}: {e}") from e
        return words_to_text(data)

    def close(self) -> None:
        """Wait for in-flight pages, then release the workers"""
        with self._lock:
            executor, self._executor = self._executor, None
            self._closed = True
        if executor is not None:
            logger.info("Shutting down OCR pool...")
            executor.shutdown(wait=True)


_engine: Optional[TesseractOCREngine] = None
_engine_lock = threading.Lock()


def get_ocr_engine() -> TesseractOCREngine:
    """Process-wide OCR engine, created on first use"""
    global _engine
    with _engine_lock:
        if _engine is None:
            _engine = TesseractOCREngine()
            atexit.register(shutdown_ocr_engine)
        return _engine


def shutdown_ocr_engine() -> None:
    global _engine
    with _engine_lock:
        engine, _engine = _engine, None
    if engine is not None:
        engine.close()

"""
Statement Pipeline - route a statement through extraction, OCR and parsing

PDF flow:
    extract text -> scanned? -> classify -> parse -> validate
                       |                       |
                       +-- yes -----+   zero transactions
                                    v          |
                       OCR -> repair -> classify -> parse -> validate

The OCR branch runs at most once per document. A statement that still has
no transactions is returned as an error result carrying a raw text excerpt.
"""

import os
from typing import List, Optional, Tuple

from .config import (
    FALLBACK_STATEMENT_YEAR,
    GENERIC_DEBIT_THRESHOLD,
    OCR_ENABLED,
    RAW_EXCERPT_LENGTH,
    SUPPORTED_CSV_EXTENSIONS,
    SUPPORTED_IMAGE_EXTENSIONS,
    SUPPORTED_PDF_EXTENSIONS,
)
from .bank_detector import classify, get_parser
from .banks.base import BankStatementParser
from .csv_parser import CSVParser
from .errors import UnsupportedFileError
from .logging_setup import get_logger
from .metadata import extract_metadata
from .models import STATUS_ERROR, StatementMetadata, StatementResult, Transaction
from .ocr_engine import get_ocr_engine
from .ocr_repair import repair_ocr_text
from .scan_detector import is_likely_scanned
from .text_extractor import PDFTextExtractor

logger = get_logger(__name__)

NO_TRANSACTIONS_MESSAGE = (
    "No transactions found in the file. Please check the file format or try a "
    "different statement."
)
EMPTY_PERIOD_MESSAGE = (
    "This statement has no transactions. The statement period shows '£0.00 Total "
    "deposits' and '£0.00 Total outgoings'. Please upload a statement with transactions."
)
EMPTY_PERIOD_PHRASE = 'there were no transactions during this period'


def validate_transactions(transactions: List[Transaction]) -> List[Transaction]:
    """
    Drop records that break the transaction invariants.

    Only one opening balance is kept and only as the first record; credit
    and debit records need a date, a description and a positive amount.
    """
    valid = []
    for txn in transactions:
        if not txn.date:
            logger.debug("[REJECTED] no date: %s", txn.description[:30])
            continue

        if txn.is_opening_balance:
            if valid or txn.amount != 0:
                logger.debug("[REJECTED] opening balance after transactions on %s", txn.date)
                continue
        elif txn.amount <= 0 or not txn.description:
            logger.debug("[REJECTED] %s - amount %s", txn.description[:30], txn.amount)
            continue

        valid.append(txn)
    return valid


class StatementPipeline:
    """Convert statement files into transactions"""

    def __init__(self, text_extractor=None, ocr_engine=None, use_ocr: bool = OCR_ENABLED,
                 fallback_year: str = FALLBACK_STATEMENT_YEAR,
                 debit_threshold: float = GENERIC_DEBIT_THRESHOLD):
        """
        Args:
            text_extractor: Object with extract(bytes) -> ExtractedText
            ocr_engine: Object with recognize(bytes) -> OCRResult; the shared
                Tesseract pool is used when omitted and use_ocr is True
            use_ocr: Allow the OCR fallback
            fallback_year: Year for statements whose header carries none
            debit_threshold: Generic parser magnitude threshold
        """
        self.text_extractor = text_extractor or PDFTextExtractor()
        self._ocr_engine = ocr_engine
        self.use_ocr = use_ocr
        self.parser_options = {
            'fallback_year': fallback_year,
            'debit_threshold': debit_threshold,
        }
        self.csv_parser = CSVParser()

    @property
    def ocr_engine(self):
        if not self.use_ocr:
            return None
        if self._ocr_engine is None:
            self._ocr_engine = get_ocr_engine()
        return self._ocr_engine

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def process_file(self, file_path: str) -> StatementResult:
        """Auto-detect the file type from its extension and process it"""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        ext = os.path.splitext(file_path)[1].lower()
        supported = SUPPORTED_PDF_EXTENSIONS + SUPPORTED_CSV_EXTENSIONS + SUPPORTED_IMAGE_EXTENSIONS
        if ext not in supported:
            raise UnsupportedFileError(f"Unsupported file format: {ext}. Supported: {supported}")

        logger.info("Processing %s", file_path)
        with open(file_path, 'rb') as f:
            data = f.read()

        if ext in SUPPORTED_PDF_EXTENSIONS:
            return self.process_pdf(data)
        if ext in SUPPORTED_CSV_EXTENSIONS:
            return self.process_csv(data)
        return self.process_image(data)

    def process_pdf(self, data: bytes) -> StatementResult:
        """
        Parse a PDF statement, falling back to OCR when needed.

        Raises:
            PDFExtractionError: The PDF cannot be opened
            OCRError: The OCR fallback failed
        """
        logger.info("Attempting standard PDF text extraction...")
        extracted = self.text_extractor.extract(data)
        text = extracted.text

        if is_likely_scanned(text, extracted.page_count):
            logger.info("PDF appears to be scanned/image-based")
        else:
            parser, transactions = self._parse_text(text)
            if transactions:
                return self._success(transactions, text, parser)
            logger.warning("No transactions found in extracted text, trying OCR fallback")

        if self.ocr_engine is None:
            logger.warning("OCR is disabled, cannot recover transactions")
            return self._empty(text, needs_ocr=True)

        return self._process_with_ocr(data)

    def process_image(self, data: bytes) -> StatementResult:
        """Images have no text layer; go straight to OCR"""
        if self.ocr_engine is None:
            logger.warning("OCR is disabled, cannot read image statements")
            return self._empty('', needs_ocr=True)
        return self._process_with_ocr(data)

    def process_csv(self, data: bytes) -> StatementResult:
        transactions = validate_transactions(self.csv_parser.parse_bytes(data))
        raw_text = data.decode('utf-8', errors='replace')
        if not transactions:
            return self._empty(raw_text)

        return StatementResult(
            transactions=transactions,
            metadata=StatementMetadata(),
            raw_text=raw_text,
            excerpt_length=RAW_EXCERPT_LENGTH,
        )

    # =========================================================================
    # STEPS
    # =========================================================================

    def _parse_text(self, text: str) -> Tuple[BankStatementParser, List[Transaction]]:
        parser = get_parser(classify(text), **self.parser_options)
        transactions = validate_transactions(parser.parse(text))
        logger.info("Total valid transactions: %d", len(transactions))
        return parser, transactions

    def _process_with_ocr(self, data: bytes) -> StatementResult:
        logger.info("Running OCR fallback...")
        ocr = self.ocr_engine.recognize(data)
        text = repair_ocr_text(ocr.text)

        parser, transactions = self._parse_text(text)
        if transactions:
            return self._success(transactions, text, parser, used_ocr=True,
                                 confidence=ocr.confidence)
        return self._empty(text, used_ocr=True, confidence=ocr.confidence)

    def _success(self, transactions: List[Transaction], text: str,
                 parser: BankStatementParser, used_ocr: bool = False,
                 confidence: Optional[float] = None) -> StatementResult:
        return StatementResult(
            transactions=transactions,
            metadata=extract_metadata(text, parser),
            used_ocr=used_ocr,
            confidence=confidence,
            raw_text=text,
            excerpt_length=RAW_EXCERPT_LENGTH,
        )

    def _empty(self, text: str, used_ocr: bool = False, confidence: Optional[float] = None,
               needs_ocr: bool = False) -> StatementResult:
        """Reported failure: nothing found after every tier"""
        if EMPTY_PERIOD_PHRASE in text.lower():
            message = EMPTY_PERIOD_MESSAGE
        else:
            message = NO_TRANSACTIONS_MESSAGE
        logger.error("No transactions found: %s", message)

        return StatementResult(
            transactions=[],
            metadata=extract_metadata(text),
            used_ocr=used_ocr,
            confidence=confidence,
            raw_text=text,
            needs_ocr=needs_ocr,
            status=STATUS_ERROR,
            error=message,
            excerpt_length=RAW_EXCERPT_LENGTH,
        )


def convert_statement(file_path: str, use_ocr: bool = OCR_ENABLED) -> StatementResult:
    """
    Convenience function to convert a bank statement file

    Args:
        file_path: Path to a PDF, CSV or image statement
        use_ocr: Allow the OCR fallback

    Returns:
        StatementResult
    """
    return StatementPipeline(use_ocr=use_ocr).process_file(file_path)

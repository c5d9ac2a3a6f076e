"""
Bank statement parsing engine

Turns PDF, scanned and CSV bank statements into normalized transactions.
"""

from .bank_detector import classify, detect_parser, get_parser
from .csv_parser import CSVParser
from .errors import (
    CSVParseError,
    OCRError,
    PDFExtractionError,
    StatementError,
    UnsupportedFileError,
)
from .generic_parser import GenericParser
from .logging_setup import configure_logging
from .models import (
    BROUGHT_FORWARD,
    CREDIT,
    DEBIT,
    StatementMetadata,
    StatementResult,
    Transaction,
)
from .ocr_engine import OCRResult, TesseractOCREngine, get_ocr_engine, shutdown_ocr_engine
from .ocr_repair import repair_ocr_text
from .scan_detector import is_likely_scanned
from .statement_pipeline import StatementPipeline, convert_statement
from .text_extractor import ExtractedText, PDFTextExtractor

__all__ = [
    'BROUGHT_FORWARD',
    'CREDIT',
    'DEBIT',
    'CSVParseError',
    'CSVParser',
    'ExtractedText',
    'GenericParser',
    'OCRError',
    'OCRResult',
    'PDFExtractionError',
    'PDFTextExtractor',
    'StatementError',
    'StatementMetadata',
    'StatementPipeline',
    'StatementResult',
    'TesseractOCREngine',
    'Transaction',
    'UnsupportedFileError',
    'classify',
    'configure_logging',
    'convert_statement',
    'detect_parser',
    'get_ocr_engine',
    'get_parser',
    'is_likely_scanned',
    'repair_ocr_text',
    'shutdown_ocr_engine',
]

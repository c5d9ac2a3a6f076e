"""
Bank Statement Converter - Configuration

Tunable constants for the statement parsing engine. Every value can be
overridden through the environment.
"""

import os

# Supported file extensions
SUPPORTED_PDF_EXTENSIONS = ['.pdf']
SUPPORTED_CSV_EXTENSIONS = ['.csv']
SUPPORTED_IMAGE_EXTENSIONS = ['.png', '.jpg', '.jpeg', '.tif', '.tiff']

# Scanned-document detection
# Average characters per page for a text-based statement
SCANNED_CHARS_PER_PAGE = int(os.environ.get('SCANNED_CHARS_PER_PAGE', 1000))
# Less than this share of the expected text means the PDF is an image
SCANNED_MIN_TEXT_RATIO = float(os.environ.get('SCANNED_MIN_TEXT_RATIO', 0.2))
# Less than this share of [A-Za-z0-9] characters means garbled text layer
SCANNED_MIN_ALNUM_RATIO = float(os.environ.get('SCANNED_MIN_ALNUM_RATIO', 0.5))

# Generic parser: with no keyword or sign, amounts below this are debits
GENERIC_DEBIT_THRESHOLD = float(os.environ.get('GENERIC_DEBIT_THRESHOLD', 1000))

# Year used when a statement header carries none
FALLBACK_STATEMENT_YEAR = os.environ.get('STATEMENT_FALLBACK_YEAR', '2025')

# OCR settings
OCR_ENABLED = os.environ.get('OCR_ENABLED', 'True').lower() == 'true'
TESSERACT_CMD = os.environ.get('TESSERACT_CMD')  # None -> tesseract on PATH
POPPLER_PATH = os.environ.get('POPPLER_PATH')    # None -> poppler on PATH
OCR_DPI = int(os.environ.get('OCR_DPI', 300))
OCR_WORKERS = int(os.environ.get('OCR_WORKERS', 2))
OCR_LANGUAGE = os.environ.get('OCR_LANGUAGE', 'eng')
OCR_TESSERACT_CONFIG = os.environ.get('OCR_TESSERACT_CONFIG', r'--oem 3 --psm 6')

# Characters of raw text returned with an empty result for debugging
RAW_EXCERPT_LENGTH = int(os.environ.get('RAW_EXCERPT_LENGTH', 500))

# Logging settings
LOG_LEVEL = os.environ.get('STATEMENT_PARSERS_LOG_LEVEL', 'INFO')

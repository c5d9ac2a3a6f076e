"""
Errors raised by the statement parsing engine.

Only adapter failures and unreadable inputs are exceptions. A statement in
which no transactions are found is reported through ``StatementResult``.
"""


class StatementError(Exception):
    """Base class for statement conversion errors"""


class PDFExtractionError(StatementError):
    """The PDF could not be opened or its text layer read"""


class OCRError(StatementError):
    """The recognition engine failed on a document"""


class CSVParseError(StatementError):
    """CSV bytes could not be decoded into rows"""


class UnsupportedFileError(StatementError, ValueError):
    """File type the converter does not handle"""

"""Shared fixtures: statement texts and fake extraction/OCR collaborators.

The pipeline takes its text extractor and OCR engine as constructor
arguments, so tests swap in the fakes below and never touch pdfplumber or
Tesseract.
"""

import textwrap

import pytest

from statement_parsers.ocr_engine import OCRResult
from statement_parsers.text_extractor import ExtractedText


def dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


class FakeExtractor:
    """Returns fixed text; records the bytes it was given"""

    def __init__(self, text: str, page_count: int = 1, error: Exception = None):
        self.text = text
        self.page_count = page_count
        self.error = error
        self.calls = []

    def extract(self, data: bytes) -> ExtractedText:
        self.calls.append(data)
        if self.error is not None:
            raise self.error
        return ExtractedText(text=self.text, page_count=self.page_count)


class FakeOCREngine:
    def __init__(self, text: str, confidence: float = 87.5, error: Exception = None):
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls = []

    def recognize(self, data: bytes) -> OCRResult:
        self.calls.append(data)
        if self.error is not None:
            raise self.error
        return OCRResult(text=self.text, confidence=self.confidence)


@pytest.fixture
def natwest_text() -> str:
    return dedent(
        """
        National Westminster Bank Plc
        Account Name MR J SMITH
        Period Covered 08 SEP 2024 to 07 OCT 2024
        Date Description Paid In(£) Withdrawn(£) Balance(£)
        08 SEP BROUGHT FORWARD 597.83
        10 SEP Card Transaction TESCO STORES 3245
        LONDON 12.00 585.83
        Direct Debit BLACK HORSE 226.47 359.36
        11 SEP Automated Credit ACME LTD SALARY 1,500.00 1,859.36
        1 of 2
        12 SEP OnLine Transaction FROM J SMITH 50.00 0.00 1,909.36
        Interest Rate 33.75%
        """
    )


@pytest.fixture
def nationwide_text() -> str:
    return dedent(
        """
        Nationwide Building Society
        FlexDirect
        Statement 12 March 2025
        £ Out £ In £ Balance
        2025Balance from statement 47 dated 05/02/2025313.41
        07Feb Contactless Payment
        TESCO STORES 12.50 300.91
        Bank credit JOHN SMITH 100.00 400.91
        10 Feb Direct debit EE LIMITED JT bal VW 20.00 0.00 380.91
        2025
        11 Feb 380.91
        """
    )


@pytest.fixture
def santander_text() -> str:
    return dedent(
        """
        Santander UK plc
        Your account summary for 16th Sep 2025 to 15th Oct 2025
        Date Description Money in Money out Balance
        16th Sep Balance brought forward from 15th Sep Statement£128.19
        17th Sep DIRECT DEBIT PAYMENT TO EE MANDATE NO 00262.97125.22
        18th Sep FASTER PAYMENTS RECEIPT REF ABC123 FROM J SMITH
        100.00225.22
        19th Sep CARD PAYMENT TO TESCO ON 18-09-2025 10.00 215.22
        Balance carried forward 215.22
        """
    )


@pytest.fixture
def monzo_text() -> str:
    return dedent(
        """
        Monzo Bank Limited
        Date Description (GBP) Amount (GBP) Balance
        12/01/2025PUMPGYMS GBR-20.9950.01
        13/01/2025 Transfer from
        J SMITH +100.00 150.01
        Monzo Bank Limited, Registered Office Broadwalk House
        Date Description (GBP) Amount (GBP) Balance
        14/01/2025 Coffee Shop -3.50 146.51
        """
    )


@pytest.fixture
def make_extractor():
    return FakeExtractor


@pytest.fixture
def make_ocr_engine():
    return FakeOCREngine

"""
Base Statement Parser - shared scanning toolkit for the bank variants

A variant declares its markers, noise, year pattern and credit phrases as
class attributes and implements ``_scan``. Everything else (noise filtering,
year carry-forward, column layouts and description cleanup) lives here.
"""

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from ..config import FALLBACK_STATEMENT_YEAR, GENERIC_DEBIT_THRESHOLD
from ..line_scanner import Lines, collapse_whitespace, split_lines
from ..logging_setup import get_logger
from ..models import CREDIT, DEBIT, Transaction

logger = get_logger(__name__)

# Column order of a 3-number row
IN_OUT_BALANCE = ('in', 'out')
OUT_IN_BALANCE = ('out', 'in')


class BankStatementParser:
    """Parse the text of one statement into transactions"""

    parser_id = 'base'
    bank_name: Optional[str] = None

    # Case-sensitive substrings that identify the institution
    MARKERS: Tuple[str, ...] = ()

    # Lines containing any of these (or matching a pattern) are boilerplate
    NOISE_MARKERS: Tuple[str, ...] = ()
    NOISE_PATTERNS: Tuple[Pattern, ...] = ()

    # Removed from descriptions before emission
    DESCRIPTION_NOISE: Tuple[Pattern, ...] = ()

    # Lower-case phrases marking a 2-number row as money in
    CREDIT_PHRASES: Tuple[str, ...] = ()

    YEAR_PATTERN: Optional[Pattern] = None
    COLUMN_ORDER: Tuple[str, str] = IN_OUT_BALANCE

    def __init__(self, fallback_year: Optional[str] = None,
                 debit_threshold: Optional[float] = None):
        self.fallback_year = str(fallback_year or FALLBACK_STATEMENT_YEAR)
        self.debit_threshold = (GENERIC_DEBIT_THRESHOLD if debit_threshold is None
                                else float(debit_threshold))

    @classmethod
    def matches(cls, text: str) -> bool:
        """True when any institution marker occurs in the text"""
        return any(marker in text for marker in cls.MARKERS)

    def parse(self, text: str) -> List[Transaction]:
        """Main entry point: statement text -> transactions in document order"""
        if not text:
            return []

        lines = split_lines(text)
        year = self.find_year(text)
        logger.info("[%s] Parsing %d lines, statement year %s",
                    self.bank_name or self.parser_id, len(lines), year)

        transactions = self._scan(lines, year)
        logger.info("[%s] Found %d transactions",
                    self.bank_name or self.parser_id, len(transactions))
        return transactions

    def _scan(self, lines: Lines, year: str) -> List[Transaction]:
        raise NotImplementedError

    # =========================================================================
    # SHARED HELPERS
    # =========================================================================

    def find_year(self, text: str) -> str:
        """Statement year from the header, else the configured fallback"""
        if self.YEAR_PATTERN is not None:
            match = self.YEAR_PATTERN.search(text)
            if match:
                return match.group(1)
        return self.fallback_year

    def is_noise(self, line: str) -> bool:
        if any(marker in line for marker in self.NOISE_MARKERS):
            return True
        return any(pattern.search(line) for pattern in self.NOISE_PATTERNS)

    def is_credit(self, text: str, phrases: Optional[Sequence[str]] = None) -> bool:
        lowered = text.lower()
        return any(phrase in lowered for phrase in (phrases or self.CREDIT_PHRASES))

    def clean_description(self, description: str) -> str:
        for pattern in self.DESCRIPTION_NOISE:
            description = pattern.sub(' ', description)
        return collapse_whitespace(description)

    def build_transaction(self, date: str, description: str, amounts: List[float],
                          credit_text: Optional[str] = None) -> Optional[Transaction]:
        """
        Turn the money columns of a row into a transaction.

        2 numbers: amount and balance, direction from the credit phrases.
        3 numbers: the two money columns in COLUMN_ORDER, then the balance;
        when both columns hold a value, money in wins.
        Any other count is ambiguous and yields None.
        """
        amount = 0.0
        balance = None
        txn_type = DEBIT

        if len(amounts) == 2:
            amount, balance = amounts
            if self.is_credit(credit_text if credit_text is not None else description):
                txn_type = CREDIT
        elif len(amounts) == 3:
            columns = dict(zip(self.COLUMN_ORDER, amounts[:2]))
            balance = amounts[2]
            if columns['in'] > 0:
                amount, txn_type = columns['in'], CREDIT
            elif columns['out'] > 0:
                amount, txn_type = columns['out'], DEBIT
        else:
            return None

        description = self.clean_description(description)
        if amount <= 0 or not description:
            logger.debug("Skipping row without amount or description: %r", description)
            return None

        return Transaction(
            date=date,
            description=description,
            amount=amount,
            balance=balance,
            type=txn_type,
        )


def compile_all(patterns: Sequence[str], flags: int = 0) -> Tuple[Pattern, ...]:
    return tuple(re.compile(pattern, flags) for pattern in patterns)

"""
NatWest Statement Parser

Transaction lines start with "DD MON" (no year); the year comes from the
"Period Covered" header. Several transactions on the same day are printed
without a date prefix, and long descriptions wrap onto following lines.
Columns are Paid In, Withdrawn, Balance.
"""

import re
from typing import List, Optional, Tuple

from ..line_scanner import DECIMAL_NUMBER, Lines, find_amounts
from ..logging_setup import get_logger
from ..models import Transaction
from .base import BankStatementParser, compile_all

logger = get_logger(__name__)

MONTHS_UPPER = 'JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC'

DATE_PATTERN = re.compile(rf'^(\d{{1,2}}\s+(?:{MONTHS_UPPER}))\s+(.+)', re.IGNORECASE)
BROUGHT_FORWARD_PATTERN = re.compile(
    rf'(\d{{1,2}}\s+(?:{MONTHS_UPPER}))\s+.*?BROUGHT FORWARD.*?([\d,]+\.?\d{{0,2}})',
    re.IGNORECASE)
PAGE_COUNTER = re.compile(r'^\d+ of \d+$')

# A wrapped line starting with one of these is a new same-day transaction
TRANSACTION_KEYWORDS = re.compile(
    r'^(Card Transaction|Direct Debit|OnLine Transaction|Standing Order|'
    r'Cash Withdrawal|Automated Credit|Charges)', re.IGNORECASE)


class NatWestParser(BankStatementParser):
    """Parser for National Westminster Bank current account statements"""

    parser_id = 'natwest'
    bank_name = 'NatWest'

    MARKERS = ('National Westminster Bank', 'NATWEST', 'NatWest')

    NOISE_MARKERS = (
        'National Westminster Bank', 'Account Name', 'Date Description Paid In',
        'RETSTMT', 'Sort Code', 'Statement Date', 'Period Covered',
        'Previous Balance', 'Paid In(£)', 'Withdrawn(£)', 'New Balance',
        'BIC NWBKGB', 'IBAN GB', 'Overdraft Limit', 'Overdraft Rate',
        'Debit interest details', 'Credit interest details', 'Interest Rate',
        'Welcome to your', 'www.natwest.com', 'Over £',
    )
    NOISE_PATTERNS = compile_all([
        r'\bAER\b',
        r'^\d+ of \d+$',
        r'(?i)^Page No$',
        r'^\d{6,}\s+\d{2}-\d{2}-\d{2}',     # "62089331 60-02-13"
        r'\d+\.\d+%$',                      # rate lines "33.75%"
    ])

    DESCRIPTION_NOISE = compile_all([
        r'FP\s+\d{2}/\d{2}/\d{2}\s+\d+\s+\w+',
        r'\b\d{10,}\b',
    ])

    CREDIT_PHRASES = ('automated credit', 'online transaction from', 'paid in')

    YEAR_PATTERN = re.compile(r'Period Covered.*?(\d{4})', re.IGNORECASE)

    def _scan(self, lines: Lines, year: str) -> List[Transaction]:
        transactions = []
        current_date = ''
        index = 0

        while index < len(lines):
            line = lines[index]

            if not line or self.is_noise(line):
                index += 1
                continue

            if 'BROUGHT FORWARD' in line:
                opening = self._read_brought_forward(line, year)
                if opening:
                    transactions.append(opening)
                    current_date = opening.date
                index += 1
                continue

            date_match = DATE_PATTERN.match(line)
            if date_match:
                current_date = self._format_date(date_match.group(1), year)
                record, index = self._read_transaction(
                    lines, index, current_date, date_match.group(2).strip(), min_numbers=1)
            elif current_date:
                # Same-day transaction printed without its date
                record, index = self._read_transaction(
                    lines, index, current_date, line, min_numbers=2)
            else:
                index += 1
                continue

            if record:
                transactions.append(record)

        return transactions

    def _format_date(self, day_month: str, year: str) -> str:
        return f"{' '.join(day_month.split())} {year}"

    def _read_brought_forward(self, line: str, year: str) -> Optional[Transaction]:
        match = BROUGHT_FORWARD_PATTERN.search(line)
        if not match:
            return None

        balance = float(match.group(2).replace(',', ''))
        date = self._format_date(match.group(1), year)
        logger.debug("%s | BROUGHT FORWARD | Opening Balance: £%s", date, balance)
        return Transaction.opening_balance(date, balance)

    def _ends_transaction(self, line: str) -> bool:
        return (not line
                or bool(DATE_PATTERN.match(line))
                or 'National Westminster Bank' in line
                or 'Account Name' in line
                or bool(PAGE_COUNTER.match(line))
                or bool(TRANSACTION_KEYWORDS.match(line))
                or self.is_noise(line))

    def _ends_row(self, text: str, line: str) -> bool:
        # A complete row (amount and balance) is followed by another same-day row
        return (self._ends_transaction(line)
                or (len(find_amounts(text)) >= 2 and len(find_amounts(line)) >= 2))

    def _read_transaction(self, lines: Lines, index: int, date: str, first_text: str,
                          min_numbers: int) -> Tuple[Optional[Transaction], int]:
        full_text = first_text
        next_index = index + 1
        while next_index < len(lines) and not self._ends_row(full_text, lines[next_index]):
            full_text = f"{full_text} {lines[next_index]}"
            next_index += 1

        amounts = find_amounts(full_text)
        if len(amounts) < min_numbers:
            return None, next_index

        description = full_text[:DECIMAL_NUMBER.search(full_text).start()]
        record = self.build_transaction(date, description, amounts)
        if record:
            logger.debug("%s | %s | %s £%s | Bal: £%s", record.date, record.description[:30],
                         record.type, record.amount, record.balance)
        return record, next_index

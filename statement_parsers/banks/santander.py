"""
Santander Statement Parser

Dates carry an ordinal ("16th Sep"); the year comes from the "Your account
summary for ..." header. Columns are Money in, Money out, Balance. The text
layer glues neighbouring numbers together ("MANDATE NO 00262.97125.22" is
mandate 0026, amount 2.97, balance 125.22), so rows are cleaned before the
numbers are counted.
"""

import re
from typing import List, Optional, Tuple

from ..line_scanner import DECIMAL_NUMBER, MONTHS, Lines, collect_continuation, find_amounts
from ..logging_setup import get_logger
from ..models import CREDIT, DEBIT, Transaction
from .base import BankStatementParser, compile_all

logger = get_logger(__name__)

DATE_PATTERN = re.compile(rf'^(\d{{1,2}})(?:st|nd|rd|th)\s*({MONTHS})(.+)', re.IGNORECASE)
LEADING_DATE = re.compile(rf'^(\d{{1,2}})(?:st|nd|rd|th)\s+({MONTHS})', re.IGNORECASE)
FROM_DATE = re.compile(rf'from\s+(\d{{1,2}})(?:st|nd|rd|th)\s+({MONTHS})', re.IGNORECASE)
# "16th Sep 2025 to 15th Oct 2025"
PERIOD_HEADER = re.compile(rf'\bto\s+\d{{1,2}}(?:st|nd|rd|th)\s*(?:{MONTHS})\b', re.IGNORECASE)
TRAILING_BALANCE = re.compile(r'£?([\d,]+\.?\d{0,2})$')

# "2.97125.22" -> "2.97 125.22"
GLUED_DECIMALS = re.compile(r'(\.\d{2})(\d{1,4}\.\d{2})')
RAW_DECIMAL = re.compile(r'\d+\.\d{2}')

# Removed before counting numbers; the mandate number stops short of a glued amount
ROW_CODES = compile_all([
    r'(?i)ON\s+\d{2}-\d{2}-\d{4}',
    r'(?i)MANDATE NO\s+\d+(?!\.\d)',
    r'(?i)REF\s+[A-Z0-9]+',
    r'\d{2}-\d{2}-\d{4}',
])
RAW_ROW_CODES = compile_all([
    r'(?i)MANDATE NO\s+\d+',
    r'(?i)REF\s+[A-Z0-9]+',
])

RAW_CREDIT_PHRASES = ('faster payments receipt', 'receipt', 'credit')


class SantanderParser(BankStatementParser):
    """Parser for Santander UK current account statements"""

    parser_id = 'santander'
    bank_name = 'Santander'

    MARKERS = ('Santander', 'ABBYGB2L')

    NOISE_MARKERS = (
        'Santander UK plc', 'Santander Banking', 'Everyday Current Account',
        'Telephone Banking', 'www.santander.co.uk', 'Your account summary for',
        'Account name', 'Account number', 'Sort Code', 'Statement number',
        'BIC:', 'IBAN:', 'ABBY', 'Total money in', 'Total money out',
        'Your balance at close', 'Credit interest rate',
        'Online, Mobile and Telephone', 'News and information',
        'Keeping your money safe', 'Interest and refunds', 'Important messages',
        'compensation arrangements', 'Financial Services Compensation',
        'Financial Ombudsman', 'Prudential Regulation', 'Financial Conduct',
        'Registered Office', 'Registered Number', 'flame logo', 'gross rate',
        'Average balance', 'Money in Money out', 'Date Description Money',
        'Your transactions', 'Continued on reverse', 'Why we are paying you',
    )
    NOISE_PATTERNS = compile_all([
        r'\bAER\b',
        r'\bEAR\b',
        r'Money in.*Money out|Money out.*Money in',
        r'(?i)^Page number',
        r'^\d{15,}$',
        r'^BX\d+',              # document ids
        r'^%%SSC',
    ])

    DESCRIPTION_NOISE = compile_all([
        r'(?i)MANDATE NO\s*\d*',
        r'(?i)REF\s+[A-Z0-9]+',
    ])

    CREDIT_PHRASES = ('faster payments receipt', 'credit', 'payment receipt', 'receipt ref')

    YEAR_PATTERN = re.compile(r'Your account summary for.*?(\d{4})', re.IGNORECASE)

    def _scan(self, lines: Lines, year: str) -> List[Transaction]:
        transactions = []
        index = 0

        while index < len(lines):
            line = lines[index]

            if not line or self.is_noise(line):
                index += 1
                continue

            if 'Balance brought forward' in line:
                opening = self._read_brought_forward(line, year)
                if opening:
                    transactions.append(opening)
                index += 1
                continue

            if 'Balance carried forward' in line:
                index += 1
                continue

            date_match = DATE_PATTERN.match(line)
            if not date_match:
                index += 1
                continue

            if PERIOD_HEADER.search(line):
                logger.debug("Skipping date range header: %s", line)
                index += 1
                continue

            day, month, rest = date_match.groups()
            record, index = self._read_transaction(lines, index, f"{day} {month} {year}", rest.strip())
            if record:
                transactions.append(record)

        return transactions

    def _read_brought_forward(self, line: str, year: str) -> Optional[Transaction]:
        balance_match = TRAILING_BALANCE.search(line)
        if not balance_match:
            return None
        balance = float(balance_match.group(1).replace(',', ''))

        date_match = LEADING_DATE.match(line) or FROM_DATE.search(line)
        date = f"{date_match.group(1)} {date_match.group(2)} {year}" if date_match else year

        logger.debug("Opening Balance: £%s on %s", balance, date)
        return Transaction.opening_balance(date, balance)

    def _ends_transaction(self, line: str) -> bool:
        return (not line
                or bool(DATE_PATTERN.match(line))
                or 'Balance carried forward' in line
                or 'Average balance' in line
                or self.is_noise(line))

    def _read_transaction(self, lines: Lines, index: int, date: str,
                          first_text: str) -> Tuple[Optional[Transaction], int]:
        continuation, next_index = collect_continuation(lines, index + 1, self._ends_transaction)
        full_text = f"{first_text} {continuation}".strip()

        cleaned = GLUED_DECIMALS.sub(r'\1 \2', full_text)
        for pattern in ROW_CODES:
            cleaned = pattern.sub(' ', cleaned)

        first_number = DECIMAL_NUMBER.search(cleaned)
        if not first_number:
            return None, next_index

        description = cleaned[:first_number.start()]
        raw_number = DECIMAL_NUMBER.search(full_text)
        credit_text = full_text[:raw_number.start()] if raw_number else full_text

        amounts = find_amounts(cleaned)
        if len(amounts) == 1:
            record = self._recover_from_raw(date, description, full_text, credit_text)
        else:
            record = self.build_transaction(date, description, amounts, credit_text=credit_text)

        if record:
            logger.debug("%s | %s | %s £%s | Bal: £%s", record.date, record.description[:30],
                         record.type, record.amount, record.balance)
        return record, next_index

    def _recover_from_raw(self, date: str, description: str, full_text: str,
                          credit_text: str) -> Optional[Transaction]:
        """Second attempt when cleaning left a single number: last two raw decimals"""
        raw = full_text
        for pattern in RAW_ROW_CODES:
            raw = pattern.sub(' ', raw)
        raw = GLUED_DECIMALS.sub(r'\1 \2', raw)

        numbers = RAW_DECIMAL.findall(raw)
        if len(numbers) < 2:
            logger.debug("Skipping row - not enough numbers: %r", full_text[:100])
            return None

        amount, balance = float(numbers[-2]), float(numbers[-1])
        description = self.clean_description(description)
        if amount <= 0 or not description:
            return None

        return Transaction(
            date=date,
            description=description,
            amount=amount,
            balance=balance,
            type=CREDIT if self.is_credit(credit_text, RAW_CREDIT_PHRASES) else DEBIT,
        )

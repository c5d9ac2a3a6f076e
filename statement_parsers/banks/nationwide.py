"""
Nationwide Statement Parser

Dates are "DD Mon", often glued to the description ("07Feb"). Columns are
Out, In, Balance. The opening balance line comes out of the PDF text layer
without spaces: "2025Balance from statement 47 dated 05/02/2025313.41".
"""

import re
from typing import List, Optional, Tuple

from ..line_scanner import (
    DECIMAL_NUMBER,
    MONTHS,
    Lines,
    collect_until_numbers,
    find_amounts,
    month_name,
)
from ..logging_setup import get_logger
from ..models import Transaction
from .base import OUT_IN_BALANCE, BankStatementParser, compile_all

logger = get_logger(__name__)

# Month must not run on into a lower-case word ("13 Market St")
DATE_PATTERN = re.compile(rf'^(\d{{1,2}})\s*((?i:{MONTHS}))(?![a-z])\s*(.+)')
OPENING_BALANCE_PATTERN = re.compile(
    r'dated\s*(\d{2})/(\d{2})/(\d{4})\s*([\d,]+\.\d{2})', re.IGNORECASE)


class NationwideParser(BankStatementParser):
    """Parser for Nationwide Building Society current account statements"""

    parser_id = 'nationwide'
    bank_name = 'Nationwide'

    MARKERS = ('Nationwide Building Society', 'FlexDirect', 'NAIAGB21')

    NOISE_MARKERS = (
        'Nationwide Building Society', 'FlexDirect', 'Statement no', 'Sort code',
        'Account no', 'Start balance', 'End balance', '£ Out', '£ In', '£ Balance',
        'Average credit', 'Average debit', 'BIC', 'IBAN', 'Swift',
        'Intermediary Bank', 'NAIAGB', 'MIDLGB', 'Prudential Regulation',
        'Financial Conduct', 'Head Office', 'DC83', 'DC85',
        'Interest, Rates and Fees', 'Summary box', 'AER', 'Gross p.a',
        'arranged overdraft', 'overdraft interest', 'SEPA', 'CHAPS', 'SWIFT',
        'visa.co.uk', 'nationwide.co.uk', 'Receiving money', 'Sending money',
    )
    NOISE_PATTERNS = compile_all([
        r'^\d{4}$',             # year-only lines
        r'(?i)^Balance$',
    ])

    DESCRIPTION_NOISE = compile_all([r'(?i)\bJT bal VW\b'])

    CREDIT_PHRASES = ('bank credit', 'automated credit', 'credit transfer', 'paid in')

    YEAR_PATTERN = re.compile(r'Statement\s+\d{1,2}\s+\w+\s+(\d{4})', re.IGNORECASE)
    COLUMN_ORDER = OUT_IN_BALANCE

    def _scan(self, lines: Lines, year: str) -> List[Transaction]:
        transactions = []
        current_date = ''
        index = 0

        while index < len(lines):
            line = lines[index]

            if not line or self.is_noise(line):
                index += 1
                continue

            if 'Balance from statement' in line and 'dated' in line:
                opening = self._read_opening_balance(line)
                if opening:
                    transactions.append(opening)
                    current_date = opening.date
                index += 1
                continue

            date_match = DATE_PATTERN.match(line)
            if date_match:
                day, month, rest = date_match.groups()
                current_date = f"{day} {month} {year}"
                record, index = self._read_transaction(lines, index, current_date, rest.strip(),
                                                       min_numbers=1)
            elif current_date:
                record, index = self._read_transaction(lines, index, current_date, line,
                                                       min_numbers=2)
            else:
                index += 1
                continue

            if record:
                transactions.append(record)

        return transactions

    def _read_opening_balance(self, line: str) -> Optional[Transaction]:
        match = OPENING_BALANCE_PATTERN.search(line)
        if not match:
            return None

        day, month, year, balance = match.groups()
        name = month_name(int(month))
        if not name:
            return None

        date = f"{day} {name} {year}"
        logger.debug("Opening Balance: £%s on %s", balance, date)
        return Transaction.opening_balance(date, float(balance.replace(',', '')))

    def _ends_transaction(self, line: str) -> bool:
        return not line or bool(DATE_PATTERN.match(line)) or self.is_noise(line)

    def _read_transaction(self, lines: Lines, index: int, date: str, first_text: str,
                          min_numbers: int) -> Tuple[Optional[Transaction], int]:
        # Descriptions wrap before the amount columns; keep reading until they appear
        full_text, next_index = collect_until_numbers(lines, index + 1, first_text,
                                                      self._ends_transaction)

        amounts = find_amounts(full_text)
        if len(amounts) < min_numbers:
            return None, next_index

        description = full_text[:DECIMAL_NUMBER.search(full_text).start()]
        record = self.build_transaction(date, description, amounts)
        if record:
            logger.debug("%s | %s | %s £%s | Bal: £%s", record.date, record.description[:30],
                         record.type, record.amount, record.balance)
        return record, next_index

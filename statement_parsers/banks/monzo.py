"""
Monzo Statement Parser

Rows look like "DD/MM/YYYY Description -Amount Balance" inside a table that
starts at a "Date ... Amount ... Balance" header. The date is often glued to
the description ("12/01/2025PUMPGYMS") and the amount to the balance.
"""

import re
from typing import List, Optional, Tuple

from ..line_scanner import Lines, collapse_whitespace, collect_continuation
from ..logging_setup import get_logger
from ..models import CREDIT, DEBIT, Transaction
from .base import BankStatementParser, compile_all

logger = get_logger(__name__)

DATE_PATTERN = re.compile(r'^(\d{2}/\d{2}/\d{4})(.*)$')
SIGNED_NUMBER = re.compile(r'[-+]?(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}')

FOOTER_MARKERS = (
    'Monzo Bank Limited',
    'Registered Office',
    'Financial Services Register',
    'Sort code:',
)


class MonzoParser(BankStatementParser):
    """Parser for Monzo current account statements"""

    parser_id = 'monzo'
    bank_name = 'Monzo'

    MARKERS = ('Monzo Bank Limited', 'monzo.com')
    NOISE_MARKERS = FOOTER_MARKERS

    DESCRIPTION_NOISE = compile_all([r'(?i)\s*GBR\s*'])

    def _scan(self, lines: Lines, year: str) -> List[Transaction]:
        transactions = []
        in_section = False
        index = 0

        while index < len(lines):
            line = lines[index]

            if self._is_table_header(line):
                in_section = True
                logger.debug("Found transaction section at line %d: %r", index, line)
                index += 1
                continue

            # Footer closes the table; the next page header re-opens it
            if in_section and self.is_noise(line):
                in_section = False
                index += 1
                continue

            date_match = DATE_PATTERN.match(line) if in_section else None
            if not date_match:
                index += 1
                continue

            record, index = self._read_transaction(lines, index, date_match.group(1),
                                                   date_match.group(2))
            if record:
                transactions.append(record)

        return transactions

    @staticmethod
    def _is_table_header(line: str) -> bool:
        return 'Date' in line and ('Amount' in line or 'Balance' in line)

    def _ends_transaction(self, line: str) -> bool:
        return not line or bool(DATE_PATTERN.match(line)) or self.is_noise(line)

    def _read_transaction(self, lines: Lines, index: int, date: str,
                          first_text: str) -> Tuple[Optional[Transaction], int]:
        continuation, next_index = collect_continuation(lines, index + 1, self._ends_transaction)
        full_text = collapse_whitespace(f"{first_text} {continuation}")

        numbers = list(SIGNED_NUMBER.finditer(full_text))
        if len(numbers) < 2:
            logger.debug("Skipping row - not enough numbers: %r", full_text[:100])
            return None, next_index

        amount_match, balance_match = numbers[-2], numbers[-1]
        amount_token, balance_token = amount_match.group(), balance_match.group()
        amount = abs(float(amount_token.replace(',', '')))
        balance = float(balance_token.replace(',', ''))

        description = self.clean_description(full_text[:amount_match.start()])
        if amount <= 0 or not description:
            return None, next_index

        record = Transaction(
            date=date,
            description=description,
            amount=amount,
            balance=balance,
            type=DEBIT if amount_token.startswith('-') else CREDIT,
        )
        logger.debug("%s | %s | %s £%s | Balance: £%s", date, description, record.type,
                     amount, balance)
        return record, next_index

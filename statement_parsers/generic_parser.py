"""
Generic Statement Parser - fallback for statements from unknown institutions

Two tiers:
1. Strict: one transaction per line that holds a recognisable date followed
   by a decimal amount.
2. Lenient (only when strict finds nothing): find the transaction section,
   then read it either as columnar label/value pairs or as inline rows.
"""

import re
from typing import List, Optional, Tuple

from .banks.base import BankStatementParser
from .line_scanner import MONTHS, Lines, collapse_whitespace, parse_amount
from .logging_setup import get_logger
from .models import CREDIT, DEBIT, DEFAULT_DESCRIPTION, Transaction

logger = get_logger(__name__)

MONTH_WORD = rf'(?:{MONTHS})[a-z]*'

# Tried in order; the first pattern found in a line wins
DATE_PATTERNS = [
    re.compile(r'\b(\d{1,2}[/-]\d{1,2}[/-]\d{2,4})\b'),                          # 01/12/2024
    re.compile(r'\b(\d{4}[/-]\d{1,2}[/-]\d{1,2})\b'),                            # 2024-12-01
    re.compile(rf'\b(\d{{1,2}}\s+{MONTH_WORD}\s+\d{{2,4}})\b', re.IGNORECASE),   # 01 Dec 2024
    re.compile(rf'\b({MONTH_WORD}\s+\d{{1,2}},?\s+\d{{4}})\b', re.IGNORECASE),   # Dec 1, 2024
    re.compile(rf'\b(\d{{1,2}}-{MONTH_WORD}-\d{{2,4}})\b', re.IGNORECASE),       # 01-Dec-2024
    re.compile(rf'\b(\d{{1,2}}(?:st|nd|rd|th)\s+{MONTH_WORD}(?:\s+\d{{4}})?)\b', re.IGNORECASE),
]

AMOUNT_PATTERN = re.compile(
    r'(?P<sign>[-+])?(?:£|\$|€|GBP|USD)?\s*'
    r'(?P<number>\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2})')

DEBIT_KEYWORDS = re.compile(r'\bdebit\b|\bdr\b', re.IGNORECASE)
CREDIT_KEYWORDS = re.compile(r'\bcredit\b|\bcr\b', re.IGNORECASE)

MIN_LINE_LENGTH = 10

# Lenient tier
LENIENT_DATE = re.compile(
    rf'\b(\d{{1,2}}\s+(?:{MONTHS})\s+\d{{2,4}}|\d{{1,2}}[/-]\d{{1,2}}[/-]\d{{2,4}})\b',
    re.IGNORECASE)
COLUMNAR_DATE = re.compile(rf'\b(\d{{1,2}}\s+(?:{MONTHS})\s+\d{{2,4}})\b', re.IGNORECASE)
# Inline rows may print whole-pound amounts ("20 blank 68")
INLINE_NUMBER = re.compile(r'\b(?:\d+\.\d{2}|\d{1,3}(?:,\d{3})*(?:\.\d{2})?)\b')
TYPE_CODES = re.compile(r'\b(TFR|DDR|DEB|CR|SO|BP|FPI|CHQ|blank)\b', re.IGNORECASE)
BLANK = re.compile(r'\bblank\b', re.IGNORECASE)
INLINE_CREDIT_PHRASES = ('credit', 'paid in', 'receipt', 'deposit', 'refund')

SECTION_SAMPLE_LINES = 20
COLUMNAR_LOOKAHEAD = 20
COLUMNAR_DATE_LABELS = ('date', 'date.')
COLUMNAR_HEADER_WORDS = ('column', 'date.', 'description.', 'type.', 'money in',
                         'money out', 'balance')
INLINE_SKIP_WORDS = ('page', 'column', 'sort code', 'balance on')


class GenericParser(BankStatementParser):
    """Institution-agnostic parser with strict and lenient tiers"""

    parser_id = 'generic'
    bank_name = None

    CREDIT_PHRASES = INLINE_CREDIT_PHRASES

    def _scan(self, lines: Lines, year: str) -> List[Transaction]:
        transactions = self.parse_strict(lines)
        if transactions:
            return transactions

        logger.info("No transactions found with strict parsing, trying lenient mode...")
        return self.parse_lenient(lines)

    # =========================================================================
    # STRICT TIER
    # =========================================================================

    def parse_strict(self, lines: Lines) -> List[Transaction]:
        transactions = []
        for line in lines:
            record = self._read_strict_line(line)
            if record:
                transactions.append(record)
        return transactions

    def _read_strict_line(self, line: str) -> Optional[Transaction]:
        if len(line) < MIN_LINE_LENGTH:
            return None

        lowered = line.lower()
        if 'date' in lowered and 'description' in lowered and 'amount' in lowered:
            return None

        date_match = self._find_date(line)
        if not date_match:
            return None

        after_date = line[date_match.end():]
        amounts = list(AMOUNT_PATTERN.finditer(after_date))
        if not amounts:
            return None

        # First non-zero amount is the transaction amount
        main = next((m for m in amounts if float(m.group('number').replace(',', '')) > 0), None)
        if main is None:
            return None
        amount = float(main.group('number').replace(',', ''))

        description = collapse_whitespace(after_date[:amounts[0].start()])
        if not description and len(line) > len(date_match.group(1)) + MIN_LINE_LENGTH:
            parts = re.split(r'\s{2,}', line)
            if len(parts) >= 2:
                description = collapse_whitespace(parts[1])

        balance = None
        if len(amounts) > 1:
            last = float(amounts[-1].group('number').replace(',', ''))
            if last != amount:
                balance = last

        return Transaction(
            date=date_match.group(1),
            description=description or DEFAULT_DESCRIPTION,
            amount=amount,
            balance=balance,
            type=self._strict_type(line, main.group('sign'), amount),
        )

    @staticmethod
    def _find_date(line: str) -> Optional[re.Match]:
        for pattern in DATE_PATTERNS:
            match = pattern.search(line)
            if match:
                return match
        return None

    def _strict_type(self, line: str, sign: Optional[str], amount: float) -> str:
        """Keywords first, then the sign on the amount, then the magnitude"""
        if DEBIT_KEYWORDS.search(line):
            return DEBIT
        if CREDIT_KEYWORDS.search(line):
            return CREDIT
        if sign == '-':
            return DEBIT
        if sign == '+':
            return CREDIT
        # Crude fallback: small amounts are usually card spending
        return DEBIT if amount < self.debit_threshold else CREDIT

    # =========================================================================
    # LENIENT TIER
    # =========================================================================

    def parse_lenient(self, lines: Lines) -> List[Transaction]:
        start, found_header = self._find_section_start(lines)

        if self._is_columnar(lines, start):
            logger.info("Detected columnar format, using columnar parser")
            transactions = self.parse_columnar(lines, start)
            logger.info("Columnar mode extracted %d transactions", len(transactions))
            if transactions:
                return transactions
            logger.info("Columnar mode found nothing, reading inline rows")

        transactions = []
        index = start + 1 if found_header else start
        while index < len(lines):
            record, index = self._read_inline_row(lines, index)
            if record:
                transactions.append(record)

        logger.info("Lenient mode extracted %d transactions", len(transactions))
        return transactions

    @staticmethod
    def _find_section_start(lines: Lines) -> Tuple[int, bool]:
        for index, line in enumerate(lines):
            lowered = line.lower()
            if ('your transactions' in lowered
                    or ('transaction' in lowered and 'date' in lowered)
                    or ('date' in lowered and 'description' in lowered)):
                logger.debug("Found transaction section at line %d: %s", index, line)
                return index, True
        return 0, False

    @staticmethod
    def _is_columnar(lines: Lines, start: int) -> bool:
        """A "Date" label alone on its line, with the date value on the next line"""
        end = min(start + SECTION_SAMPLE_LINES, len(lines) - 1)
        for index in range(start, end):
            if (lines[index].lower() in COLUMNAR_DATE_LABELS
                    and COLUMNAR_DATE.search(lines[index + 1])):
                return True
        return False

    def _read_inline_row(self, lines: Lines, index: int) -> Tuple[Optional[Transaction], int]:
        line = lines[index]
        next_index = index + 1
        lowered = line.lower()

        if (not line
                or any(word in lowered for word in INLINE_SKIP_WORDS)
                or ('money in' in lowered and 'money out' in lowered)):
            return None, next_index

        date_match = LENIENT_DATE.search(line)
        if not date_match:
            return None, next_index

        after_date = line[date_match.end():]
        numbers = list(INLINE_NUMBER.finditer(after_date))
        if not numbers:
            return None, next_index

        amounts = [float(m.group().replace(',', '')) for m in numbers]
        before_first = after_date[:numbers[0].start()]

        description = collapse_whitespace(TYPE_CODES.sub(' ', before_first))
        if len(description) < 2:
            description = DEFAULT_DESCRIPTION

        if len(amounts) == 1:
            # Balance-only row
            return None, next_index

        balance = None
        if len(amounts) == 2:
            amount, balance = amounts
            if BLANK.search(before_first):
                txn_type = DEBIT        # money in column was blank
            elif BLANK.search(after_date[numbers[0].end():]):
                txn_type = CREDIT       # money out column was blank
            elif self.is_credit(before_first):
                txn_type = CREDIT
            else:
                txn_type = DEBIT
        else:
            money_in, money_out, balance = amounts[:3]
            if money_in > 0:
                amount, txn_type = money_in, CREDIT
            else:
                amount, txn_type = money_out, DEBIT

        if amount <= 0:
            return None, next_index

        return Transaction(
            date=date_match.group(1),
            description=description,
            amount=amount,
            balance=balance,
            type=txn_type,
        ), next_index

    # =========================================================================
    # COLUMNAR FORMAT
    # =========================================================================

    def parse_columnar(self, lines: Lines, start: int) -> List[Transaction]:
        """
        Read statements where every field label sits on its own line:

            Date / 01 Aug 25 / Description / M MUNIU / Type / TFR /
            Money In / 20.00 / Money Out / blank / Balance / 68.64

        A record ends at its Balance label or at the next Date label.
        """
        index = start
        while index < len(lines) and any(word in lines[index].lower()
                                         for word in COLUMNAR_HEADER_WORDS):
            index += 1

        transactions = []
        while index < len(lines) - 1:
            record, index = self._read_columnar_record(lines, index)
            if record:
                transactions.append(record)
        return transactions

    def _read_columnar_record(self, lines: Lines, index: int) -> Tuple[Optional[Transaction], int]:
        if lines[index].lower() not in COLUMNAR_DATE_LABELS:
            return None, index + 1

        date_match = COLUMNAR_DATE.search(lines[index + 1])
        if not date_match:
            return None, index + 1

        description = ''
        money_in = money_out = 0.0
        balance = None

        cursor = index + 2
        limit = min(index + COLUMNAR_LOOKAHEAD, len(lines))
        while cursor < limit:
            label = lines[cursor].lower()
            value = lines[cursor + 1] if cursor + 1 < len(lines) else ''

            if label in ('description', 'description.'):
                description = value
            elif label in ('type', 'type.'):
                pass
            elif 'money in' in label:
                money_in = self._columnar_amount(value) or 0.0
            elif 'money out' in label:
                money_out = self._columnar_amount(value) or 0.0
            elif 'balance' in label:
                amount = self._columnar_amount(value)
                if amount is not None and amount > 0:
                    balance = amount
                cursor += 2
                break
            elif label in COLUMNAR_DATE_LABELS:
                break
            else:
                cursor += 1
                continue
            cursor += 2

        if money_in > 0:
            amount, txn_type = money_in, CREDIT
        else:
            amount, txn_type = money_out, DEBIT

        description = collapse_whitespace(description)
        if amount <= 0 or not description:
            return None, cursor

        return Transaction(
            date=date_match.group(1),
            description=description,
            amount=amount,
            balance=balance,
            type=txn_type,
        ), cursor

    @staticmethod
    def _columnar_amount(value: str) -> Optional[float]:
        if not value or value.lower() == 'blank':
            return None
        return parse_amount(value)

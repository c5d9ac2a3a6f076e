"""
CSV Parser Module - Parse bank statement CSV exports

Column names differ between banks, so each field is resolved from a list of
known header names: exact match first, then case-insensitive.
"""

import io
import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .errors import CSVParseError
from .logging_setup import get_logger
from .models import CREDIT, DEBIT, DEFAULT_DESCRIPTION, Transaction

logger = get_logger(__name__)

CSV_ENCODINGS = ('utf-8-sig', 'latin-1', 'cp1252')

DATE_KEYS = ['date', 'transaction date', 'posting date', 'Date', 'Transaction Date',
             'value date', 'trans date', 'post date']
DESCRIPTION_KEYS = ['description', 'details', 'memo', 'Description', 'Details', 'Memo',
                    'narrative', 'particulars', 'reference', 'payee', 'name']
AMOUNT_KEYS = ['amount', 'Amount', 'value', 'transaction amount']
DEBIT_KEYS = ['debit', 'Debit', 'money out', 'Money Out', 'paid out', 'withdrawal',
              'withdrawals', 'debit amount']
CREDIT_KEYS = ['credit', 'Credit', 'money in', 'Money In', 'paid in', 'deposit',
               'deposits', 'credit amount']
BALANCE_KEYS = ['balance', 'Balance', 'running balance', 'Running Balance',
                'closing balance', 'available balance']
TYPE_KEYS = ['type', 'Type', 'transaction type', 'Transaction Type']

TYPE_ALIASES = {
    'debit': DEBIT,
    'dr': DEBIT,
    'withdrawal': DEBIT,
    'credit': CREDIT,
    'cr': CREDIT,
    'deposit': CREDIT,
}


def resolve_column(row: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    """First matching column name: exact, then case-insensitive"""
    for key in keys:
        if key in row:
            return key

    lowered = {name.lower(): name for name in row}
    for key in keys:
        if key.lower() in lowered:
            return lowered[key.lower()]
    return None


def parse_csv_amount(value) -> Optional[float]:
    """
    Parse a CSV cell to a signed float.

    Handles currency symbols, thousands separators, (123.45) negatives and
    CR / DR suffixes. Returns None for empty or non-numeric cells.
    """
    if value is None:
        return None

    amount_str = str(value).strip()
    if not amount_str or amount_str.lower() == 'nan':
        return None

    amount_str = re.sub(r'[$€£₹,\s]', '', amount_str)

    if amount_str.startswith('(') and amount_str.endswith(')'):
        amount_str = '-' + amount_str[1:-1]

    if amount_str.upper().endswith('CR'):
        amount_str = amount_str[:-2]
    elif amount_str.upper().endswith('DR'):
        amount_str = '-' + amount_str[:-2].lstrip('-')

    try:
        amount = float(amount_str)
    except ValueError:
        return None

    if pd.isna(amount):
        return None
    return amount


class CSVParser:
    """Parse rows of a CSV statement export into transactions"""

    def parse(self, rows: Iterable[Mapping[str, object]]) -> List[Transaction]:
        transactions = []
        skipped = 0

        for raw_row in rows:
            row = self._normalize_row(raw_row)
            record = self._parse_row(row)
            if record:
                transactions.append(record)
            else:
                skipped += 1

        logger.info("CSV: %d transactions, %d rows skipped", len(transactions), skipped)
        return transactions

    def parse_bytes(self, data: bytes) -> List[Transaction]:
        """Decode CSV bytes with pandas and parse the rows"""
        for encoding in CSV_ENCODINGS:
            try:
                df = pd.read_csv(
                    io.BytesIO(data),
                    encoding=encoding,
                    dtype=str,
                    keep_default_na=False,
                    skipinitialspace=True,
                )
                break
            except UnicodeDecodeError:
                continue
            except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
                raise CSVParseError(f"Could not read CSV file: {e}") from e
        else:
            raise CSVParseError("Could not decode CSV file")

        df.columns = [str(column).strip() for column in df.columns]
        logger.info("CSV columns: %s", list(df.columns))
        return self.parse(df.to_dict('records'))

    @staticmethod
    def _normalize_row(row: Mapping[str, object]) -> Dict[str, str]:
        normalized = {}
        for key, value in row.items():
            if key is None:
                continue
            normalized[str(key).strip()] = '' if value is None else str(value).strip()
        return normalized

    def _parse_row(self, row: Dict[str, str]) -> Optional[Transaction]:
        date_key = resolve_column(row, DATE_KEYS)
        date = row.get(date_key, '') if date_key else ''
        if not date:
            return None

        amount, txn_type = self._resolve_amount(row)
        if amount is None or amount == 0:
            return None

        description_key = resolve_column(row, DESCRIPTION_KEYS)
        description = row.get(description_key, '') if description_key else ''
        description = re.sub(r'\s+', ' ', description).strip() or DEFAULT_DESCRIPTION

        balance_key = resolve_column(row, BALANCE_KEYS)
        balance = parse_csv_amount(row.get(balance_key)) if balance_key else None

        return Transaction(
            date=date,
            description=description,
            amount=abs(amount),
            balance=balance,
            type=txn_type,
        )

    def _resolve_amount(self, row: Dict[str, str]):
        """(signed amount, type); debit/credit columns win over a single amount column"""
        debit_key = resolve_column(row, DEBIT_KEYS)
        credit_key = resolve_column(row, CREDIT_KEYS)

        if debit_key or credit_key:
            debit = parse_csv_amount(row.get(debit_key)) if debit_key else None
            credit = parse_csv_amount(row.get(credit_key)) if credit_key else None
            if debit:
                return abs(debit), DEBIT
            if credit:
                return abs(credit), CREDIT

        amount_key = resolve_column(row, AMOUNT_KEYS)
        if not amount_key:
            return None, None

        raw_value = row.get(amount_key, '')
        amount = parse_csv_amount(raw_value)
        if amount is None:
            return None, None

        if amount < 0:
            return amount, DEBIT

        if not raw_value.lstrip().startswith('+'):
            type_key = resolve_column(row, TYPE_KEYS)
            declared = TYPE_ALIASES.get(row.get(type_key, '').lower()) if type_key else None
            if declared:
                return amount, declared
        return amount, CREDIT

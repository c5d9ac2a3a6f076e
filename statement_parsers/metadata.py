"""
Statement metadata - account number, statement period, bank name

Best effort only: anything not found is left as None.
"""

import re
from typing import Optional

from .banks.base import BankStatementParser
from .models import StatementMetadata

ACCOUNT_NUMBER_PATTERN = re.compile(r'account\s*(?:number|no\.?|#)?\s*:?\s*(\d+)', re.IGNORECASE)
PERIOD_PATTERN = re.compile(
    r'(?:statement\s+period|period\s+covered|period)\s*:?\s*([\w ,\-/]+)', re.IGNORECASE)


def extract_account_number(text: str) -> Optional[str]:
    match = ACCOUNT_NUMBER_PATTERN.search(text or '')
    return match.group(1) if match else None


def extract_statement_period(text: str) -> Optional[str]:
    match = PERIOD_PATTERN.search(text or '')
    if not match:
        return None
    period = match.group(1).strip(' ,-/')
    return period or None


def extract_metadata(text: str, parser: Optional[BankStatementParser] = None) -> StatementMetadata:
    """Collect metadata from statement text; the bank name comes from the parser"""
    return StatementMetadata(
        account_number=extract_account_number(text),
        statement_period=extract_statement_period(text),
        bank_name=parser.bank_name if parser is not None else None,
    )

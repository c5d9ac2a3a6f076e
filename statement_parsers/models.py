"""
Models Module - Value objects produced by the statement parsers
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

CREDIT = 'credit'
DEBIT = 'debit'
BROUGHT_FORWARD = 'brought_forward'

TRANSACTION_TYPES = (CREDIT, DEBIT, BROUGHT_FORWARD)

DEFAULT_DESCRIPTION = 'Transaction'
OPENING_BALANCE_DESCRIPTION = 'BROUGHT FORWARD'

STATUS_SUCCESS = 'success'
STATUS_ERROR = 'error'


@dataclass(frozen=True)
class Transaction:
    """
    One financial movement on a statement.

    The date is kept in the institution's own format. The amount is always a
    magnitude; direction is carried by ``type``.
    """
    date: str
    description: str
    amount: float
    balance: Optional[float] = None
    type: Optional[str] = None

    @classmethod
    def opening_balance(cls, date: str, balance: float) -> 'Transaction':
        """Brought-forward marker: zero amount, balance only"""
        return cls(
            date=date,
            description=OPENING_BALANCE_DESCRIPTION,
            amount=0.0,
            balance=balance,
            type=BROUGHT_FORWARD,
        )

    @property
    def is_opening_balance(self) -> bool:
        return self.type == BROUGHT_FORWARD

    def to_dict(self) -> Dict:
        data = {
            'date': self.date,
            'description': self.description,
            'amount': self.amount,
        }
        if self.balance is not None:
            data['balance'] = self.balance
        if self.type is not None:
            data['type'] = self.type
        return data


@dataclass(frozen=True)
class StatementMetadata:
    """Best-effort statement details; any field may be missing"""
    account_number: Optional[str] = None
    statement_period: Optional[str] = None
    bank_name: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {}
        if self.account_number:
            data['accountNumber'] = self.account_number
        if self.statement_period:
            data['statementPeriod'] = self.statement_period
        if self.bank_name:
            data['bankName'] = self.bank_name
        return data


@dataclass
class StatementResult:
    """
    Outcome of one pipeline run.

    ``raw_text`` and ``needs_ocr`` are working fields for the orchestrator and
    the caller's diagnostics; they never become part of a transaction.
    """
    transactions: List[Transaction] = field(default_factory=list)
    metadata: StatementMetadata = field(default_factory=StatementMetadata)
    used_ocr: bool = False
    confidence: Optional[float] = None
    raw_text: str = ''
    needs_ocr: bool = False
    status: str = STATUS_SUCCESS
    error: Optional[str] = None
    excerpt_length: int = 500

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS and bool(self.transactions)

    @property
    def raw_excerpt(self) -> str:
        return self.raw_text[:self.excerpt_length]

    def to_dict(self) -> Dict:
        """Caller-facing result"""
        if not self.ok:
            return {
                'error': self.error or 'No transactions found',
                'rawContent': self.raw_excerpt,
                'usedOCR': self.used_ocr,
            }

        data = {
            'transactions': [t.to_dict() for t in self.transactions],
            'metadata': self.metadata.to_dict(),
            'usedOCR': self.used_ocr,
        }
        if self.confidence is not None:
            data['confidence'] = self.confidence
        return data

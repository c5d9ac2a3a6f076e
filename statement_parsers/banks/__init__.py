"""Institution-specific statement parsers"""

from .base import BankStatementParser
from .monzo import MonzoParser
from .nationwide import NationwideParser
from .natwest import NatWestParser
from .santander import SantanderParser

__all__ = [
    'BankStatementParser',
    'MonzoParser',
    'NationwideParser',
    'NatWestParser',
    'SantanderParser',
]

"""
Bank Detector - pick the statement parser for a document's text

Institutions are checked in a fixed priority order and the first whose
marker appears in the text wins. Text that matches none goes to the generic
parser. Adding an institution means adding a parser class to BANK_PARSERS.
"""

from typing import Dict, Type

from .banks import (
    BankStatementParser,
    MonzoParser,
    NationwideParser,
    NatWestParser,
    SantanderParser,
)
from .generic_parser import GenericParser
from .logging_setup import get_logger

logger = get_logger(__name__)

GENERIC = GenericParser.parser_id

# Priority order matters: a NatWest statement may mention another bank
BANK_PARSERS = (
    NatWestParser,
    NationwideParser,
    SantanderParser,
    MonzoParser,
)

PARSERS: Dict[str, Type[BankStatementParser]] = {
    parser.parser_id: parser for parser in BANK_PARSERS
}
PARSERS[GENERIC] = GenericParser


def classify(text: str) -> str:
    """Return the parser id for the statement text"""
    if text:
        for parser in BANK_PARSERS:
            if parser.matches(text):
                logger.info("Detected %s bank statement", parser.bank_name)
                return parser.parser_id
    return GENERIC


def get_parser(parser_id: str, **options) -> BankStatementParser:
    """
    New parser instance for a parser id.

    Args:
        parser_id: One of the PARSERS keys
        **options: fallback_year / debit_threshold overrides

    Raises:
        KeyError: Unknown parser id
    """
    try:
        parser_class = PARSERS[parser_id]
    except KeyError:
        raise KeyError(f"Unknown statement parser: {parser_id}") from None
    return parser_class(**options)


def detect_parser(text: str, **options) -> BankStatementParser:
    return get_parser(classify(text), **options)

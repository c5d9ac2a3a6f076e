"""
Line scanning helpers shared by the statement parsers.

Statements are scanned as an immutable tuple of stripped lines. Readers take
a cursor (line index) and return the text they consumed together with the
index of the next unread line, so no loop index is ever modified in place.
"""

import re
from typing import Callable, List, Optional, Tuple

Lines = Tuple[str, ...]

MONTHS = 'Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec'
MONTH_ABBREVIATIONS = MONTHS.split('|')

# Money token: "1,234.56" or "1234.56"
DECIMAL_NUMBER = re.compile(r'\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2}')

WHITESPACE = re.compile(r'\s+')


def split_lines(text: str) -> Lines:
    """Split text into a tuple of stripped lines"""
    if not text:
        return ()
    return tuple(line.strip() for line in text.split('\n'))


def collapse_whitespace(text: str) -> str:
    return WHITESPACE.sub(' ', text).strip()


def parse_amount(token: str) -> Optional[float]:
    """Convert a money token to float; None when it is not numeric"""
    if token is None:
        return None
    cleaned = re.sub(r'[£$€,\s]', '', str(token))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def find_numbers(text: str) -> List[str]:
    """All decimal money tokens in document order"""
    return DECIMAL_NUMBER.findall(text)


def find_amounts(text: str) -> List[float]:
    return [float(token.replace(',', '')) for token in find_numbers(text)]


def month_name(month_number: int) -> Optional[str]:
    """3-letter month abbreviation for 1-12"""
    if 1 <= month_number <= 12:
        return MONTH_ABBREVIATIONS[month_number - 1]
    return None


def collect_continuation(lines: Lines, start: int,
                         is_boundary: Callable[[str], bool]) -> Tuple[str, int]:
    """
    Join lines from ``start`` until a boundary line or the end of the text.

    Returns:
        Tuple of (joined text, index of the first line not consumed)
    """
    parts = []
    index = start
    while index < len(lines) and not is_boundary(lines[index]):
        parts.append(lines[index])
        index += 1
    return ' '.join(parts), index


def collect_until_numbers(lines: Lines, start: int, first_text: str,
                          is_boundary: Callable[[str], bool]) -> Tuple[str, int]:
    """
    Extend ``first_text`` with following lines until it holds a money token.

    Used for rows whose description wraps before the amount columns.
    """
    text = first_text
    index = start
    while not find_numbers(text) and index < len(lines) and not is_boundary(lines[index]):
        text = f"{text} {lines[index]}"
        index += 1
    return text, index

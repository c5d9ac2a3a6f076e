"""
OCR Repair Module - fix systematic recognition errors before parsing

Table-rule artifacts at line starts are removed and repeated spaces collapsed
first. The corrections that follow apply only in numeric and date contexts so
that merchant names and other prose keep their letters:
1. Garbled currency symbols -> £
2. O/o -> 0 and I/l -> 1 next to a digit
3. Leading letter of a dd/mm/yyyy date -> 0
4. S/B -> 5/8 after a decimal point

The order matters: later rules never re-introduce what earlier rules fixed,
and running the repair twice gives the same text as running it once.
"""

import re

# OCR table-rule garbage
LINE_START_GARBAGE = re.compile(r'^(?:[\|_~—–]+[ \t]*)+', re.MULTILINE)
REPEATED_SPACES = re.compile(r'[ \t]{2,}')

# Rule 1: currency symbols
# Mis-encoded pound signs from Latin-1/UTF-8 round trips
MOJIBAKE_POUND = re.compile(r'(?:Ã‚Â£|Â£)')
# Garbage letter or mojibake right after a currency symbol
CURRENCY_GARBAGE = re.compile(r'([£$])\s*(?:Ã‚|Â|â‚¬|E)(?=\s*\d)')
# "E45.S7" / "€12.00" where the pound sign was read as E or euro
CURRENCY_MISREAD = re.compile(r'(?<![A-Za-z0-9£$])[E€](?=\d[\dOoIl,]*\.[0-9OoSBIl]{2}(?![A-Za-z0-9]))')

# Rule 2: letters touching digits
LETTER_O_BEFORE_DIGIT = re.compile(r'\b[Oo](?=\d)')
LETTER_O_AFTER_DIGIT = re.compile(r'(?<=\d)[Oo]\b')
LETTER_I_BEFORE_DIGIT = re.compile(r'\b[Il](?=\d)')
LETTER_I_AFTER_DIGIT = re.compile(r'(?<=\d)[Il]\b')

# Rule 3: "O1/12/2024", "D1/12/2024"
DATE_LEADING_LETTER = re.compile(r'\b[A-Za-z](\d)/(\d{2})/(\d{4})\b')

# Rule 4: "45.S7" -> "45.57", "12.B0" -> "12.80"
DECIMAL_LETTER = re.compile(r'(\d+\.)([SB])(\d)')
DECIMAL_DIGITS = {'S': '5', 'B': '8'}


def _fix_currency(text: str) -> str:
    text = MOJIBAKE_POUND.sub('£', text)
    text = CURRENCY_GARBAGE.sub(r'\1', text)
    text = CURRENCY_MISREAD.sub('£', text)
    return text


def _fix_numeric_letters(text: str) -> str:
    text = LETTER_O_BEFORE_DIGIT.sub('0', text)
    text = LETTER_O_AFTER_DIGIT.sub('0', text)
    text = LETTER_I_BEFORE_DIGIT.sub('1', text)
    text = LETTER_I_AFTER_DIGIT.sub('1', text)
    return text


def _fix_dates(text: str) -> str:
    return DATE_LEADING_LETTER.sub(r'0\1/\2/\3', text)


def _fix_decimals(text: str) -> str:
    return DECIMAL_LETTER.sub(
        lambda m: m.group(1) + DECIMAL_DIGITS[m.group(2)] + m.group(3), text)


def _strip_artifacts(text: str) -> str:
    text = LINE_START_GARBAGE.sub('', text)
    return REPEATED_SPACES.sub(' ', text)


def repair_ocr_text(text: str) -> str:
    """Apply the OCR corrections in order and return the repaired text"""
    if not text:
        return ''

    text = _strip_artifacts(text)
    text = _fix_currency(text)
    text = _fix_numeric_letters(text)
    text = _fix_dates(text)
    text = _fix_decimals(text)
    return text

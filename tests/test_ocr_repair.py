import pytest

from statement_parsers.ocr_repair import repair_ocr_text


def test_repairs_date_and_amount_line():
    assert repair_ocr_text("O1/12/2024 TESCO STORES E45.S7") == "01/12/2024 TESCO STORES £45.57"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Â£12.00", "£12.00"),
        ("Ã‚Â£12.00", "£12.00"),
        ("£E12.00", "£12.00"),
        ("Paid €9.99", "Paid £9.99"),
    ],
)
def test_currency_symbols(raw, expected):
    assert repair_ocr_text(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1O.00", "10.00"),
        ("O5.00", "05.00"),
        ("l5.00", "15.00"),
        ("2I 12.00", "21 12.00"),
    ],
)
def test_letters_next_to_digits(raw, expected):
    assert repair_ocr_text(raw) == expected


def test_date_leading_letter():
    assert repair_ocr_text("D1/12/2024 CARD") == "01/12/2024 CARD"


def test_decimal_letters():
    assert repair_ocr_text("12.B0 and 7.S5") == "12.80 and 7.55"


def test_merchant_names_keep_their_letters():
    text = "TESCO OIL LTD BOOTS ESSO EE LIMITED 20.00"
    assert repair_ocr_text(text) == text


def test_strips_table_rules_and_repeated_spaces():
    assert repair_ocr_text("| __ 01/12/2024   TESCO") == "01/12/2024 TESCO"


def test_empty_text():
    assert repair_ocr_text("") == ""


@pytest.mark.parametrize(
    "raw",
    [
        "O1/12/2024 TESCO STORES E45.S7",
        "E4O.00",
        "O1/12/2024 l5.S0",
        "Â£1,234.S6",
        "_ | 02/01/2024  CARD  PAYMENT  £E9.99",
    ],
)
def test_repair_is_idempotent(raw):
    once = repair_ocr_text(raw)
    assert repair_ocr_text(once) == once

from statement_parsers.banks import SantanderParser
from statement_parsers.line_scanner import (
    collect_continuation,
    collect_until_numbers,
    find_amounts,
    month_name,
    parse_amount,
    split_lines,
)
from statement_parsers.metadata import extract_metadata
from statement_parsers.models import (
    BROUGHT_FORWARD,
    DEBIT,
    STATUS_ERROR,
    StatementMetadata,
    StatementResult,
    Transaction,
)


def test_opening_balance_record():
    txn = Transaction.opening_balance("05 Feb 2025", 313.41)
    assert txn.is_opening_balance
    assert txn.to_dict() == {
        "date": "05 Feb 2025",
        "description": "BROUGHT FORWARD",
        "amount": 0.0,
        "balance": 313.41,
        "type": BROUGHT_FORWARD,
    }


def test_transaction_dict_omits_missing_fields():
    assert Transaction("01/01/2024", "Shop", 2.0).to_dict() == {
        "date": "01/01/2024",
        "description": "Shop",
        "amount": 2.0,
    }


def test_success_result_dict():
    result = StatementResult(
        transactions=[Transaction("01/01/2024", "Shop", 2.0, 8.0, DEBIT)],
        metadata=StatementMetadata(account_number="12345678", bank_name="Monzo"),
    )
    data = result.to_dict()
    assert result.ok
    assert data["metadata"] == {"accountNumber": "12345678", "bankName": "Monzo"}
    assert data["usedOCR"] is False
    assert "confidence" not in data


def test_error_result_dict():
    result = StatementResult(raw_text="x" * 600, status=STATUS_ERROR, error="nothing", used_ocr=True)
    assert not result.ok
    assert result.to_dict() == {"error": "nothing", "rawContent": "x" * 500, "usedOCR": True}


def test_success_without_transactions_is_not_ok():
    assert not StatementResult().ok


# -------------------------------------------------------------------------
# metadata
# -------------------------------------------------------------------------

def test_extract_metadata():
    text = "Account Number: 12345678\nStatement Period: 01 Jan 2024 - 31 Jan 2024"
    metadata = extract_metadata(text, SantanderParser())
    assert metadata.account_number == "12345678"
    assert metadata.statement_period == "01 Jan 2024 - 31 Jan 2024"
    assert metadata.bank_name == "Santander"


def test_metadata_missing_fields():
    metadata = extract_metadata("nothing to see")
    assert metadata == StatementMetadata()
    assert metadata.to_dict() == {}


# -------------------------------------------------------------------------
# line scanning helpers
# -------------------------------------------------------------------------

def test_split_lines_strips():
    assert split_lines("  a \n\tb\n") == ("a", "b", "")
    assert split_lines("") == ()


def test_parse_amount():
    assert parse_amount("£1,234.56") == 1234.56
    assert parse_amount(" 7 ") == 7.0
    assert parse_amount("abc") is None
    assert parse_amount("") is None


def test_find_amounts():
    assert find_amounts("Ref 3245 paid 1,234.56 then 7.00") == [1234.56, 7.0]


def test_month_name():
    assert month_name(2) == "Feb"
    assert month_name(13) is None


def test_collect_continuation_stops_at_boundary():
    lines = ("first", "second", "", "third")
    assert collect_continuation(lines, 0, lambda line: not line) == ("first second", 2)
    assert collect_continuation(lines, 4, lambda line: not line) == ("", 4)


def test_collect_until_numbers():
    lines = ("Contactless Payment", "TESCO STORES 12.50 300.91", "next")
    text, index = collect_until_numbers(lines, 1, lines[0], lambda line: False)
    assert text == "Contactless Payment TESCO STORES 12.50 300.91"
    assert index == 2

import pytest

from statement_parsers.csv_parser import CSVParser, parse_csv_amount, resolve_column
from statement_parsers.errors import CSVParseError
from statement_parsers.models import CREDIT, DEBIT

SCENARIO_CSV = (
    b"Posting Date, Details, Debit, Credit, Running Balance\n"
    b"01/01/2024, Coffee Shop, 4.50, , 95.50\n"
)


def test_bank_export_columns_resolved():
    txns = CSVParser().parse_bytes(SCENARIO_CSV)
    assert len(txns) == 1
    assert txns[0].to_dict() == {
        "date": "01/01/2024",
        "description": "Coffee Shop",
        "amount": 4.50,
        "balance": 95.50,
        "type": DEBIT,
    }


def test_parse_rows_directly():
    rows = [{
        "Posting Date": "01/01/2024",
        "Details": "Coffee Shop",
        "Debit": "4.50",
        "Credit": "",
        "Running Balance": "95.50",
    }]
    txns = CSVParser().parse(rows)
    assert txns[0].amount == 4.50
    assert txns[0].type == DEBIT
    assert txns[0].balance == 95.50


def test_credit_column():
    rows = [{"Date": "02/01/2024", "Description": "Salary", "Money Out": "", "Money In": "1,500.00"}]
    txns = CSVParser().parse(rows)
    assert txns[0].amount == 1500.00
    assert txns[0].type == CREDIT


@pytest.mark.parametrize(
    "value, amount, txn_type",
    [
        ("-12.00", 12.00, DEBIT),
        ("(5.00)", 5.00, DEBIT),
        ("100.00 CR", 100.00, CREDIT),
        ("25.00 DR", 25.00, DEBIT),
        ("£1,200.00", 1200.00, CREDIT),
    ],
)
def test_single_amount_column(value, amount, txn_type):
    txns = CSVParser().parse([{"Date": "01/01/2024", "Description": "Row", "Amount": value}])
    assert txns[0].amount == amount
    assert txns[0].type == txn_type


def test_type_column_sets_direction_of_unsigned_amount():
    rows = [{"Date": "01/01/2024", "Description": "Gym", "Amount": "30.00", "Type": "DR"}]
    assert CSVParser().parse(rows)[0].type == DEBIT


def test_invalid_rows_are_dropped():
    rows = [
        {"Date": "", "Description": "No date", "Amount": "1.00"},
        {"Date": "01/01/2024", "Description": "Not a number", "Amount": "abc"},
        {"Date": "01/01/2024", "Description": "Zero", "Amount": "0.00"},
        {"Date": "01/01/2024", "Description": "Kept", "Amount": "2.00"},
    ]
    txns = CSVParser().parse(rows)
    assert [t.description for t in txns] == ["Kept"]


def test_missing_description_defaults():
    txns = CSVParser().parse([{"Date": "01/01/2024", "Amount": "5.00"}])
    assert txns[0].description == "Transaction"
    assert txns[0].balance is None


def test_headers_match_case_insensitively():
    rows = [{"DATE": "01/01/2024", "NARRATIVE": "Bus", "AMOUNT": "-2.00", "BALANCE": "8.00"}]
    txns = CSVParser().parse(rows)
    assert txns[0].description == "Bus"
    assert txns[0].type == DEBIT
    assert txns[0].balance == 8.00


def test_debit_column_preferred_over_amount():
    rows = [{"Date": "01/01/2024", "Description": "Shop", "Amount": "10.00", "Debit": "10.00"}]
    assert CSVParser().parse(rows)[0].type == DEBIT


def test_resolve_column_prefers_exact_name():
    row = {"date": "a", "Date": "b"}
    assert resolve_column(row, ["Date", "date"]) == "Date"
    assert resolve_column({"VALUE DATE": "x"}, ["value date"]) == "VALUE DATE"
    assert resolve_column({"x": "y"}, ["date"]) is None


def test_parse_csv_amount_rejects_empty():
    assert parse_csv_amount("") is None
    assert parse_csv_amount(None) is None
    assert parse_csv_amount("n/a") is None


def test_empty_file_raises():
    with pytest.raises(CSVParseError):
        CSVParser().parse_bytes(b"")


def test_latin1_file():
    data = b"Date,Description,Amount\n01/01/2024,Caf\xe9,-3.00\n"
    txns = CSVParser().parse_bytes(data)
    assert txns[0].description == "Café"
    assert txns[0].amount == 3.00

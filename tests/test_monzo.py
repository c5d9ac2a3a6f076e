import pytest

from statement_parsers.banks import MonzoParser
from statement_parsers.models import CREDIT, DEBIT


@pytest.fixture
def transactions(monzo_text):
    return MonzoParser().parse(monzo_text)


def test_monzo_transaction_count(transactions):
    assert len(transactions) == 3


def test_glued_date_amount_and_balance(transactions):
    txn = transactions[0]
    assert txn.date == "12/01/2025"
    assert txn.description == "PUMPGYMS"
    assert txn.amount == 20.99
    assert txn.balance == 50.01
    assert txn.type == DEBIT


def test_positive_amount_is_credit(transactions):
    txn = transactions[1]
    assert txn.description == "Transfer from J SMITH"
    assert txn.amount == 100.00
    assert txn.balance == 150.01
    assert txn.type == CREDIT


def test_section_reopens_after_footer(transactions):
    txn = transactions[2]
    assert txn.date == "14/01/2025"
    assert txn.description == "Coffee Shop"
    assert txn.amount == 3.50
    assert txn.balance == 146.51


def test_rows_before_table_header_are_ignored():
    text = "\n".join([
        "Monzo Bank Limited",
        "01/01/2025 Opening summary -1.00 2.00",
    ])
    assert MonzoParser().parse(text) == []


def test_amount_equal_to_balance():
    text = "\n".join([
        "Date Description Amount Balance",
        "02/02/2025 Top up +10.00 10.00",
    ])
    txns = MonzoParser().parse(text)
    assert len(txns) == 1
    assert txns[0].description == "Top up"
    assert txns[0].amount == 10.00
    assert txns[0].type == CREDIT

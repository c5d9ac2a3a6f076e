import pytest

from statement_parsers.banks import SantanderParser
from statement_parsers.models import BROUGHT_FORWARD, CREDIT, DEBIT


@pytest.fixture
def transactions(santander_text):
    return SantanderParser().parse(santander_text)


def test_santander_transaction_count(transactions):
    assert len(transactions) == 4


def test_balance_brought_forward(transactions):
    opening = transactions[0]
    assert opening.type == BROUGHT_FORWARD
    assert opening.balance == 128.19
    assert opening.date == "16 Sep 2025"


def test_glued_mandate_amount_and_balance(transactions):
    txn = transactions[1]
    assert txn.date == "17 Sep 2025"
    assert txn.description == "DIRECT DEBIT PAYMENT TO EE"
    assert txn.amount == 2.97
    assert txn.balance == 125.22
    assert txn.type == DEBIT


def test_receipt_on_wrapped_line(transactions):
    txn = transactions[2]
    assert txn.date == "18 Sep 2025"
    assert txn.description == "FASTER PAYMENTS RECEIPT FROM J SMITH"
    assert txn.amount == 100.00
    assert txn.balance == 225.22
    assert txn.type == CREDIT


def test_card_payment_date_code_removed(transactions):
    txn = transactions[3]
    assert txn.description == "CARD PAYMENT TO TESCO"
    assert txn.amount == 10.00
    assert txn.balance == 215.22
    assert txn.type == DEBIT


def test_carried_forward_is_not_a_transaction(transactions):
    assert all("carried" not in t.description.lower() for t in transactions)


def test_period_header_is_skipped():
    text = "\n".join([
        "Santander UK plc",
        "16th Sep 2025 to 15th Oct 2025",
        "17th Sep CARD PAYMENT TO SHOP 4.00 96.00",
    ])
    txns = SantanderParser().parse(text)
    assert len(txns) == 1
    assert txns[0].description == "CARD PAYMENT TO SHOP"


def test_row_mentioning_to_and_year_is_kept():
    text = "\n".join([
        "Santander UK plc",
        "Your account summary for 16th Sep 2025 to 15th Oct 2025",
        "17th Sep Transfer to savings ON 15-09-2025 10.00 100.00",
    ])
    txns = SantanderParser().parse(text)
    assert len(txns) == 1
    assert txns[0].description == "Transfer to savings"
    assert txns[0].amount == 10.00
    assert txns[0].balance == 100.00
    assert txns[0].type == DEBIT

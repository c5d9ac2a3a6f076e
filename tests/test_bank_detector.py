import pytest

from statement_parsers.bank_detector import GENERIC, PARSERS, classify, detect_parser, get_parser
from statement_parsers.banks import MonzoParser, NatWestParser
from statement_parsers.generic_parser import GenericParser


@pytest.mark.parametrize(
    "fixture_name, parser_id",
    [
        ("natwest_text", "natwest"),
        ("nationwide_text", "nationwide"),
        ("santander_text", "santander"),
        ("monzo_text", "monzo"),
    ],
)
def test_classify_statements(request, fixture_name, parser_id):
    assert classify(request.getfixturevalue(fixture_name)) == parser_id


def test_unknown_text_is_generic():
    assert classify("01/12/2024 TESCO STORES 45.57 120.00") == GENERIC
    assert classify("") == GENERIC


def test_priority_order_decides_between_markers():
    text = "National Westminster Bank Plc\nTransfer to Santander account"
    assert classify(text) == "natwest"


def test_markers_are_case_sensitive():
    assert classify("paid from my natwest account") == GENERIC


def test_classification_is_deterministic(monzo_text):
    assert {classify(monzo_text) for _ in range(5)} == {"monzo"}


def test_get_parser_returns_new_instances():
    first = get_parser("natwest")
    second = get_parser("natwest")
    assert isinstance(first, NatWestParser)
    assert first is not second


def test_get_parser_passes_options():
    parser = get_parser(GENERIC, fallback_year="2021", debit_threshold=50)
    assert isinstance(parser, GenericParser)
    assert parser.fallback_year == "2021"
    assert parser.debit_threshold == 50.0


def test_unknown_parser_id():
    with pytest.raises(KeyError):
        get_parser("barclays")


def test_detect_parser(monzo_text):
    assert isinstance(detect_parser(monzo_text), MonzoParser)


def test_every_variant_registered():
    assert set(PARSERS) == {"natwest", "nationwide", "santander", "monzo", "generic"}

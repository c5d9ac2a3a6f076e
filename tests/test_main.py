import json
import sys

import pytest

import main
from statement_parsers.models import CREDIT, DEBIT, StatementResult, Transaction

CSV_EXPORT = (
    b"Date,Description,Amount,Balance\n"
    b"01/01/2024,Coffee Shop,-4.50,95.50\n"
    b"02/01/2024,Salary,1000.00,1095.50\n"
)


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["statement-converter", *args])
    with pytest.raises(SystemExit) as excinfo:
        main.main()
    return excinfo.value.code


def test_summarize():
    result = StatementResult(transactions=[
        Transaction("01/01/2024", "Coffee", 4.5, None, DEBIT),
        Transaction("02/01/2024", "Salary", 1000.0, None, CREDIT),
    ])
    assert main.summarize(result) == {"count": 2, "total_credits": 1000.0, "total_debits": 4.5}


def test_cli_json_output(tmp_path, monkeypatch, capsys):
    path = tmp_path / "export.csv"
    path.write_bytes(CSV_EXPORT)

    assert run_cli(monkeypatch, str(path), "--json", "--no-ocr") == 0

    data = json.loads(capsys.readouterr().out)
    assert [t["type"] for t in data["transactions"]] == [DEBIT, CREDIT]
    assert data["usedOCR"] is False


def test_cli_table_output(tmp_path, monkeypatch, capsys):
    path = tmp_path / "export.csv"
    path.write_bytes(CSV_EXPORT)

    assert run_cli(monkeypatch, str(path), "--no-ocr") == 0

    out = capsys.readouterr().out
    assert "Coffee Shop" in out
    assert "Transactions: 2" in out


def test_cli_missing_file(tmp_path, monkeypatch, capsys):
    assert run_cli(monkeypatch, str(tmp_path / "missing.pdf")) == 1
    assert "File not found" in capsys.readouterr().out


def test_cli_unsupported_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "statement.txt"
    path.write_text("hello")
    assert run_cli(monkeypatch, str(path)) == 1
    assert "Unsupported file format" in capsys.readouterr().out


def test_cli_empty_statement(tmp_path, monkeypatch, capsys):
    path = tmp_path / "empty.csv"
    path.write_bytes(b"Date,Description,Amount\n01/01/2024,Nothing,0.00\n")

    assert run_cli(monkeypatch, str(path), "--no-ocr") == 1
    assert "No transactions found" in capsys.readouterr().out


def test_settings_live_inside_the_package():
    from statement_parsers import config

    assert config.SUPPORTED_PDF_EXTENSIONS == [".pdf"]
    assert main.SUPPORTED_EXTENSIONS[0] == ".pdf"

"""
Bank Statement Converter - Main Entry Point

Command Line Interface for converting bank statements into transactions
"""

import os
import sys
import json
import argparse
from typing import Dict

from statement_parsers.config import (
    LOG_LEVEL,
    SUPPORTED_CSV_EXTENSIONS,
    SUPPORTED_IMAGE_EXTENSIONS,
    SUPPORTED_PDF_EXTENSIONS,
)
from statement_parsers import StatementError, StatementPipeline, StatementResult, configure_logging

SUPPORTED_EXTENSIONS = SUPPORTED_PDF_EXTENSIONS + SUPPORTED_CSV_EXTENSIONS + SUPPORTED_IMAGE_EXTENSIONS


def print_transactions(result: StatementResult):
    """Print the transactions as a table"""
    metadata = result.metadata
    if metadata.bank_name:
        print(f"Bank: {metadata.bank_name}")
    if metadata.account_number:
        print(f"Account: {metadata.account_number}")
    if metadata.statement_period:
        print(f"Period: {metadata.statement_period}")
    if result.used_ocr:
        print(f"OCR confidence: {result.confidence}")

    print(f"\n{'Date':<14} {'Description':<40} {'Type':<16} {'Amount':>12} {'Balance':>12}")
    print('=' * 98)
    for txn in result.transactions:
        balance = f"{txn.balance:,.2f}" if txn.balance is not None else ''
        print(f"{txn.date:<14} {txn.description[:40]:<40} {txn.type or '':<16} "
              f"{txn.amount:>12,.2f} {balance:>12}")
    print('=' * 98)

    summary = summarize(result)
    print(f"Transactions: {summary['count']}")
    print(f"Total Credits: £{summary['total_credits']:,.2f}")
    print(f"Total Debits: £{summary['total_debits']:,.2f}")


def summarize(result: StatementResult) -> Dict:
    credits = sum(t.amount for t in result.transactions if t.type == 'credit')
    debits = sum(t.amount for t in result.transactions if t.type == 'debit')
    return {
        'count': len(result.transactions),
        'total_credits': round(credits, 2),
        'total_debits': round(debits, 2),
    }


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description='Bank Statement Converter - Extract transactions from bank statements',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py statement.pdf
  python main.py statement.csv --json
  python main.py scan.png --log-level DEBUG
        """
    )

    parser.add_argument('file', help='Bank statement file (PDF, CSV or image)')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser.add_argument('--no-ocr', action='store_true', help='Disable the OCR fallback')
    parser.add_argument('--log-level', default=LOG_LEVEL,
                        help=f'Logging level (default: {LOG_LEVEL})')

    args = parser.parse_args()
    configure_logging(args.log_level)

    if not os.path.exists(args.file):
        print(f"\n✗ Error: File not found: {args.file}")
        sys.exit(1)

    ext = os.path.splitext(args.file)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        print(f"\n✗ Error: Unsupported file format: {ext}")
        print(f"   Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}")
        sys.exit(1)

    try:
        result = StatementPipeline(use_ocr=not args.no_ocr).process_file(args.file)
    except StatementError as e:
        print(f"\n✗ Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.ok:
        print_transactions(result)
    else:
        print(f"\n✗ {result.error}")
        print(f"\nRaw content:\n{result.raw_excerpt}")

    sys.exit(0 if result.ok else 1)


if __name__ == "__main__":
    main()

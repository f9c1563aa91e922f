import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Mapping, TextIO

from errors import TransactionParseError
from models import ClientAccount, Transaction, TransactionType

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Read CSV file lazily, yielding transactions in file order."""
    with open(filepath, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f, skipinitialspace=True)
        for row in reader:
            if not any(value.strip() for value in row.values() if isinstance(value, str)):
                continue
            yield parse_row(row, reader.line_num)


def parse_row(row: Dict[str, str], line_number: int) -> Transaction:
    """Parse CSV row into Transaction."""
    normalized = {
        (k or "").strip(): (v or "").strip()
        for k, v in row.items()
        if isinstance(v, str) or v is None
    }

    try:
        transaction_type = TransactionType(normalized["type"].lower())
        client_id = int(normalized["client"])
        transaction_id = int(normalized["tx"])
    except KeyError as e:
        raise TransactionParseError(line_number, f"missing column {e}") from e
    except ValueError as e:
        raise TransactionParseError(line_number, f"invalid field in {row}: {e}") from e

    amount_str = normalized.get("amount", "")

    try:
        if transaction_type == TransactionType.DEPOSIT:
            return Transaction.deposit(client_id, transaction_id, _parse_amount(amount_str, line_number))
        if transaction_type == TransactionType.WITHDRAWAL:
            return Transaction.withdrawal(client_id, transaction_id, _parse_amount(amount_str, line_number))

        if amount_str:
            logger.debug(f"Line {line_number}: ignoring amount on {transaction_type} row")
        if transaction_type == TransactionType.DISPUTE:
            return Transaction.dispute(client_id, transaction_id)
        if transaction_type == TransactionType.RESOLVE:
            return Transaction.resolve(client_id, transaction_id)
        return Transaction.chargeback(client_id, transaction_id)
    except ValueError as e:
        raise TransactionParseError(line_number, str(e)) from e


def _parse_amount(amount_str: str, line_number: int) -> Decimal:
    if not amount_str:
        raise TransactionParseError(line_number, "amount is required")
    try:
        return Decimal(amount_str)
    except InvalidOperation as e:
        raise TransactionParseError(line_number, f"invalid amount {amount_str!r}") from e


def format_amount(value: Decimal) -> str:
    """Format amount with exactly 4 decimal places."""
    return f"{value:.4f}"


def write_accounts(accounts: Mapping[int, ClientAccount], stream: TextIO) -> None:
    """Write account snapshot as CSV, one row per client ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])

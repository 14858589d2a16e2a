import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional, TextIO

from errors import MalformedRecordError, SourceError
from models import MONEY_CONTEXT, Transaction, TransactionType, ClientAccount

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Read CSV file and yield transactions in file order."""
    try:
        with open(filepath, "r", newline="") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            if reader.fieldnames is None:
                logger.warning(f"{filepath}: empty input")
                return
            for row in reader:
                yield parse_csv_row(row, reader.line_num)
    except csv.Error as e:
        raise MalformedRecordError(reader.line_num, str(e)) from e
    except UnicodeDecodeError as e:
        raise SourceError(filepath, f"cannot decode input: {e.reason}") from e
    except OSError as e:
        raise SourceError(filepath, e.strerror or str(e)) from e


def parse_csv_row(row: Dict[Optional[str], object], line: int) -> Transaction:
    """Parse CSV row into Transaction. Keys and values are trimmed."""
    if None in row:
        raise MalformedRecordError(line, "too many fields")

    normalized = {k.strip(): (v or "").strip() for k, v in row.items()}

    try:
        transaction_type_str = normalized["type"].lower()
        client_str = normalized["client"]
        transaction_id_str = normalized["tx"]
    except KeyError as e:
        raise MalformedRecordError(line, f"missing column {e}") from e

    try:
        transaction_type = TransactionType(transaction_type_str)
    except ValueError as e:
        raise MalformedRecordError(line, f"unknown transaction type '{transaction_type_str}'") from e

    client_id = _parse_id(client_str, "client", MAX_CLIENT_ID, line)
    transaction_id = _parse_id(transaction_id_str, "tx", MAX_TRANSACTION_ID, line)

    amount = None
    amount_str = normalized.get("amount", "")
    if amount_str:
        if "_" in amount_str:
            raise MalformedRecordError(line, f"invalid amount '{amount_str}'")
        try:
            amount = Decimal(amount_str)
        except InvalidOperation as e:
            raise MalformedRecordError(line, f"invalid amount '{amount_str}'") from e
        if not amount.is_finite():
            raise MalformedRecordError(line, f"invalid amount '{amount_str}'")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, name: str, maximum: int, line: int) -> int:
    # int() accepts digit grouping like 1_000
    if "_" in value:
        raise MalformedRecordError(line, f"invalid {name} '{value}'")
    try:
        parsed = int(value)
    except ValueError as e:
        raise MalformedRecordError(line, f"invalid {name} '{value}'") from e
    if not 0 <= parsed <= maximum:
        raise MalformedRecordError(line, f"{name} out of range: {parsed}")
    return parsed


def format_decimal(value: Decimal) -> str:
    """Format decimal in fixed-point notation, removing trailing zeros."""
    normalized = value.normalize(MONEY_CONTEXT)
    return f"{normalized:f}"


def write_accounts(accounts: Iterable[ClientAccount], output: TextIO) -> None:
    """Write one CSV row per account, sorted by client id."""
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow([
            account.client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
    output.flush()

import csv
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import Transaction, TransactionType, TransactionParseError

MAX_CLIENT_ID = 65535
MAX_TRANSACTION_ID = 4294967295

_AMOUNT_REQUIRED = (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Yield transactions from a CSV stream with a `type, client, tx, amount` header.

    Empty lines are skipped; any other malformed row, including one made only
    of separators or whitespace, raises TransactionParseError.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    rows = iter(reader)
    while True:
        try:
            row = next(rows)
        except StopIteration:
            return
        except csv.Error as e:
            raise TransactionParseError(str(e), line_number=reader.line_num) from e
        except UnicodeDecodeError as e:
            # decoding runs ahead of the csv reader, so the failing line is unknown
            raise TransactionParseError(f"input is not valid UTF-8: {e}") from e

        try:
            yield parse_row(row)
        except TransactionParseError as e:
            # reader.line_num counts the header, so it is the physical line of this row
            raise TransactionParseError(str(e), line_number=reader.line_num) from e


def parse_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
    """
    Parse a CSV row into a Transaction.

    A row longer than the header is rejected. A short row may only omit the
    trailing amount, which then reads as absent.
    """
    if None in row:
        raise TransactionParseError(f"unexpected extra fields {row[None]!r}")

    normalized = {k.strip(): v for k, v in row.items()}
    for field in ("type", "client", "tx"):
        if normalized.get(field) is None:
            raise TransactionParseError(f"missing field {field!r}")

    type_str = normalized["type"].strip().lower()
    client_str = normalized["client"].strip()
    tx_str = normalized["tx"].strip()

    try:
        transaction_type = TransactionType(type_str)
    except ValueError as e:
        raise TransactionParseError(f"unknown transaction type {type_str!r}") from e

    client_id = _parse_id(client_str, "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(tx_str, "tx", MAX_TRANSACTION_ID)
    amount = _parse_amount((normalized.get("amount") or "").strip())

    if amount is None and transaction_type in _AMOUNT_REQUIRED:
        raise TransactionParseError(f"{transaction_type.value} {transaction_id} has no amount")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, field: str, maximum: int) -> int:
    try:
        parsed = int(value)
    except ValueError as e:
        raise TransactionParseError(f"invalid {field} {value!r}") from e
    if not 0 <= parsed <= maximum:
        raise TransactionParseError(f"{field} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise TransactionParseError(f"cannot parse amount {value!r} as a decimal") from e
    if not amount.is_finite():
        raise TransactionParseError(f"amount {value!r} is not a finite number")
    return amount

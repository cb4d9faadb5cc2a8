import csv
import logging
from typing import Dict, Iterator, Optional, TextIO

from models import Transaction, TransactionType, parse_amount

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


def _parse_id(value: str, upper_bound: int, field: str) -> int:
    parsed = int(value)
    if not 0 <= parsed <= upper_bound:
        raise ValueError(f"{field} out of range: {parsed}")
    return parsed


def parse_row(row: Dict[str, Optional[str]]) -> Optional[Transaction]:
    """
    Parse a CSV row into a Transaction.
    Returns None for malformed rows, which are logged and otherwise ignored.
    """
    try:
        if None in row:
            raise ValueError("too many columns")

        # A missing trailing column reads as empty.
        normalized = {k.strip(): (v or "").strip() for k, v in row.items()}
        for value in normalized.values():
            # Raises UnicodeEncodeError, a ValueError, on undecodable input bytes.
            value.encode("utf-8")

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")

        amount = None
        if transaction_type.creates_entry:
            amount = parse_amount(normalized.get("amount", ""))
            if amount <= 0:
                raise ValueError(f"amount must be positive, got {normalized['amount']}")

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def read_transactions(stream: TextIO) -> Iterator[Optional[Transaction]]:
    """
    Lazily decode transactions from CSV text, in input order.
    Yields None in place of each malformed row.
    """
    reader = csv.DictReader(stream)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.warning(f"Failed to read line {reader.line_num}: {e}")
            yield None
            continue
        yield parse_row(row)

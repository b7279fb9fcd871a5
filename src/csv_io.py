import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Mapping, Optional, TextIO

from errors import RecordParseError
from models import (
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    ClientAccount,
    TransactionRecord,
    TransactionType,
    format_amount,
)

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def read_transaction_records(stream: TextIO) -> Iterator[TransactionRecord]:
    """Lazily parse CSV rows (with header) into raw records."""
    reader = csv.DictReader(stream)
    for row in reader:
        yield parse_csv_row(row)


def parse_csv_row(row: Mapping[Optional[str], Optional[str]]) -> TransactionRecord:
    """Parse CSV row into TransactionRecord. Raises RecordParseError on malformed input."""
    try:
        # key None collects surplus fields, value None marks a short row
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID)

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = Decimal(amount_str)
    except KeyError as e:
        raise RecordParseError(row, f"missing column {e}") from e
    except (ValueError, InvalidOperation) as e:
        raise RecordParseError(row, str(e) or type(e).__name__) from e

    return TransactionRecord(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, maximum: int) -> int:
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"id {parsed} out of range 0..{maximum}")
    return parsed


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per account, amounts with four decimal places."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in accounts.values():
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
    logger.debug(f"Wrote {len(accounts)} accounts")

from decimal import Decimal
from typing import Optional

from errors import InvalidTransaction
from models import (
    AMOUNT_MAX_DIGITS,
    AMOUNT_SCALE,
    Chargeback,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    TransactionRecord,
    TransactionType,
    Withdrawal,
    amount_digits,
    amount_scale,
)


def validate(record: TransactionRecord) -> Transaction:
    """
    Convert a raw record into its typed transaction.

    Pure: no engine state is consulted. Raises InvalidTransaction when the
    record's shape does not match its declared type.
    """
    match record.transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(record.client_id, record.transaction_id, _require_amount(record))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(record.client_id, record.transaction_id, _require_amount(record))
        case TransactionType.DISPUTE:
            _require_no_amount(record)
            return Dispute(record.client_id, record.transaction_id)
        case TransactionType.RESOLVE:
            _require_no_amount(record)
            return Resolve(record.client_id, record.transaction_id)
        case TransactionType.CHARGEBACK:
            _require_no_amount(record)
            return Chargeback(record.client_id, record.transaction_id)
        case _:
            raise InvalidTransaction(record)


def is_valid_amount(amount: Optional[Decimal]) -> bool:
    if amount is None or not amount.is_finite():
        return False
    return amount > 0 and amount_scale(amount) <= AMOUNT_SCALE and amount_digits(amount) <= AMOUNT_MAX_DIGITS


def _require_amount(record: TransactionRecord) -> Decimal:
    if not is_valid_amount(record.amount):
        raise InvalidTransaction(record)
    return record.amount


def _require_no_amount(record: TransactionRecord) -> None:
    if record.amount is not None:
        raise InvalidTransaction(record)

import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import InvalidTransaction
from models import Chargeback, Deposit, Dispute, Resolve, TransactionRecord, TransactionType, Withdrawal
from validator import is_valid_amount, validate


def make_record(transaction_type: TransactionType, amount=None) -> TransactionRecord:
    return TransactionRecord(
        transaction_type=transaction_type,
        client_id=1,
        transaction_id=7,
        amount=Decimal(amount) if amount is not None else None,
    )


class TestValidateAmountBearing:
    def test_valid_deposit(self):
        transaction = validate(make_record(TransactionType.DEPOSIT, "100.5"))
        assert transaction == Deposit(client_id=1, transaction_id=7, amount=Decimal("100.5"))

    def test_valid_withdrawal(self):
        transaction = validate(make_record(TransactionType.WITHDRAWAL, "1.2345"))
        assert transaction == Withdrawal(client_id=1, transaction_id=7, amount=Decimal("1.2345"))

    @pytest.mark.parametrize("amount", ["100", "100.0", "100.00", "100.000", "100.0000", "0.0001"])
    def test_accepts_precision_variants(self, amount):
        assert isinstance(validate(make_record(TransactionType.DEPOSIT, amount)), Deposit)

    @pytest.mark.parametrize("transaction_type", [TransactionType.DEPOSIT, TransactionType.WITHDRAWAL])
    @pytest.mark.parametrize("amount", [None, "0", "-100", "1.23456", "NaN", "Infinity", "1E+37"])
    def test_rejects_bad_amounts(self, transaction_type, amount):
        record = make_record(transaction_type, amount)

        with pytest.raises(InvalidTransaction) as exc_info:
            validate(record)

        assert exc_info.value.record is record


class TestValidateReferencing:
    @pytest.mark.parametrize(
        "transaction_type, expected",
        [
            (TransactionType.DISPUTE, Dispute(client_id=1, referenced_transaction_id=7)),
            (TransactionType.RESOLVE, Resolve(client_id=1, referenced_transaction_id=7)),
            (TransactionType.CHARGEBACK, Chargeback(client_id=1, referenced_transaction_id=7)),
        ],
    )
    def test_valid_without_amount(self, transaction_type, expected):
        assert validate(make_record(transaction_type)) == expected

    @pytest.mark.parametrize(
        "transaction_type", [TransactionType.DISPUTE, TransactionType.RESOLVE, TransactionType.CHARGEBACK]
    )
    def test_rejects_amount(self, transaction_type):
        with pytest.raises(InvalidTransaction):
            validate(make_record(transaction_type, "10"))


class TestIsValidAmount:
    def test_boundaries(self):
        assert is_valid_amount(Decimal("0.0001"))
        assert not is_valid_amount(Decimal("0.00001"))
        assert not is_valid_amount(Decimal("0.0000"))
        assert not is_valid_amount(None)

    def test_magnitude_limit(self):
        assert is_valid_amount(Decimal("9" * 36 + ".9999"))
        assert not is_valid_amount(Decimal("1" + "0" * 36))

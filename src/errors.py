from decimal import Decimal


class PaymentsEngineError(Exception):
    """Base class for all payments engine errors."""


# Hard errors: abort the whole run.


class RecordParseError(PaymentsEngineError):
    """Input row could not be turned into a TransactionRecord."""

    def __init__(self, row, reason: str):
        self.row = row
        self.reason = reason
        super().__init__(f"Failed to parse row {row}: {reason}")


class InvalidTransaction(PaymentsEngineError):
    """Record shape does not match its declared transaction type."""

    def __init__(self, record):
        self.record = record
        super().__init__(f"Invalid transaction: {record}")


# Soft errors: the record is skipped and processing continues.


class ProcessingError(PaymentsEngineError):
    """Business-rule violation while applying a validated transaction."""


class TransactionNotFound(ProcessingError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


class ClientMismatch(ProcessingError):
    def __init__(self, transaction_id: int, expected: int, got: int):
        self.transaction_id = transaction_id
        self.expected = expected
        self.got = got
        super().__init__(f"Client mismatch: transaction {transaction_id} belongs to client {expected}, not {got}")


class NotUnderDispute(ProcessingError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is not under dispute")


class AlreadyUnderDispute(ProcessingError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is already under dispute")


class InsufficientFunds(ProcessingError):
    def __init__(self, client_id: int, available: Decimal, requested: Decimal):
        self.client_id = client_id
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient funds: client {client_id} has {available}, requested {requested}")


class AccountNotFound(ProcessingError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account {client_id} not found")


class AccountLocked(ProcessingError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account {client_id} is locked")


class DuplicateTransaction(ProcessingError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} was already applied")


# Internal consistency fault: a bug, never caused by input.


class InvariantViolation(AssertionError):
    pass

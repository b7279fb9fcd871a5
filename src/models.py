from dataclasses import dataclass
from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow, localcontext
from enum import Enum
from typing import Optional, Union

from errors import InvariantViolation

# Maximum number of fractional digits an amount may carry.
AMOUNT_SCALE = 4

# Maximum number of digits a single amount may carry at AMOUNT_SCALE places.
AMOUNT_MAX_DIGITS = 40

# Balance arithmetic: sums of valid amounts fit without rounding, and a
# result that would need rounding raises Inexact.
BALANCE_CONTEXT = Context(prec=80, traps=[InvalidOperation, DivisionByZero, Overflow, Inexact])

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

ZERO = Decimal("0")


def amount_scale(amount: Decimal) -> int:
    """Number of fractional digits of a finite decimal, as written."""
    exponent = amount.as_tuple().exponent
    return max(0, -exponent)


def amount_digits(amount: Decimal) -> int:
    """Digits needed to hold a finite decimal at AMOUNT_SCALE fractional places."""
    return max(amount.adjusted() + 1, 0) + AMOUNT_SCALE


def normalize_amount(amount: Decimal) -> Decimal:
    """Strip trailing zeros so equal balances share one representation."""
    return amount.normalize()


def format_amount(amount: Decimal) -> str:
    """Render with exactly AMOUNT_SCALE decimal places."""
    return f"{amount:.{AMOUNT_SCALE}f}"


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass
class TransactionRecord:
    """Raw, unvalidated input row. `transaction_id` is the referenced tx for dispute-like types."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __str__(self) -> str:
        if self.amount is None:
            return f"{self.transaction_type.value} (client: {self.client_id}, tx: {self.transaction_id})"
        return f"{self.transaction_type.value} (client: {self.client_id}, tx: {self.transaction_id}, amount: {self.amount})"


@dataclass(frozen=True)
class Deposit:
    client_id: int
    transaction_id: int
    amount: Decimal

    def __str__(self) -> str:
        return f"[deposit] client={self.client_id} tx={self.transaction_id} amount={self.amount}"


@dataclass(frozen=True)
class Withdrawal:
    client_id: int
    transaction_id: int
    amount: Decimal

    def __str__(self) -> str:
        return f"[withdrawal] client={self.client_id} tx={self.transaction_id} amount={self.amount}"


@dataclass(frozen=True)
class Dispute:
    client_id: int
    referenced_transaction_id: int

    def __str__(self) -> str:
        return f"[dispute] client={self.client_id} ref_tx={self.referenced_transaction_id}"


@dataclass(frozen=True)
class Resolve:
    client_id: int
    referenced_transaction_id: int

    def __str__(self) -> str:
        return f"[resolve] client={self.client_id} ref_tx={self.referenced_transaction_id}"


@dataclass(frozen=True)
class Chargeback:
    client_id: int
    referenced_transaction_id: int

    def __str__(self) -> str:
        return f"[chargeback] client={self.client_id} ref_tx={self.referenced_transaction_id}"


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass
class ClientAccount:
    """
    Per-client balances.

    Mutators assume the caller already authorized the operation. deposit,
    withdraw, hold and release refuse to touch a locked account; chargeback
    on a locked account leaves the balances as they are.
    """

    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    total: Decimal = ZERO
    locked: bool = False

    def deposit(self, amount: Decimal) -> None:
        self._require_unlocked("deposit")
        with localcontext(BALANCE_CONTEXT):
            self.available += amount
            self.total += amount
            self._normalize()

    def withdraw(self, amount: Decimal) -> None:
        self._require_unlocked("withdraw")
        with localcontext(BALANCE_CONTEXT):
            self.available -= amount
            self.total -= amount
            self._normalize()

    def hold(self, amount: Decimal) -> None:
        # available may go negative when funds were withdrawn before the dispute
        self._require_unlocked("hold")
        with localcontext(BALANCE_CONTEXT):
            self.available -= amount
            self.held += amount
            self._normalize()

    def release(self, amount: Decimal) -> None:
        self._require_unlocked("release")
        with localcontext(BALANCE_CONTEXT):
            self.held -= amount
            self.available += amount
            self._normalize()

    def chargeback(self, amount: Decimal) -> None:
        if self.locked:
            return
        with localcontext(BALANCE_CONTEXT):
            self.held -= amount
            self.total -= amount
            self._normalize()
        self.locked = True

    def check_invariant(self) -> None:
        with localcontext(BALANCE_CONTEXT):
            consistent = self.total == self.available + self.held
        if not consistent:
            raise InvariantViolation(
                f"Account {self.client_id}: total {self.total} != available {self.available} + held {self.held}"
            )

    def _require_unlocked(self, operation: str) -> None:
        if self.locked:
            raise InvariantViolation(f"Account {self.client_id}: {operation} called on a locked account")

    def _normalize(self) -> None:
        self.available = normalize_amount(self.available)
        self.held = normalize_amount(self.held)
        self.total = normalize_amount(self.total)


class ProcessingStats:
    """Counters for applied and skipped records."""

    def __init__(self):
        self.processed = 0
        self.skipped = 0

    def record_success(self):
        self.processed += 1

    def record_skip(self):
        self.skipped += 1

    @property
    def rows_seen(self) -> int:
        return self.processed + self.skipped

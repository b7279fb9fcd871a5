import logging

from errors import (
    AccountLocked,
    AccountNotFound,
    AlreadyUnderDispute,
    ClientMismatch,
    DuplicateTransaction,
    InsufficientFunds,
    NotUnderDispute,
    TransactionNotFound,
)
from models import (
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    Withdrawal,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies validated transactions against state.

    Each handler either mutates exactly one account or raises a single
    ProcessingError subclass and leaves state untouched. Checks run in the
    order: ledger lookup, client match, dispute state, account lock.
    """

    def __init__(self, state: StateManager, strict: bool = False):
        self._state = state
        self._strict = strict

    def process_transaction(self, transaction: Transaction) -> None:
        logger.debug(f"Processing transaction: {transaction}")
        match transaction:
            case Deposit():
                self._handle_deposit(transaction)
            case Withdrawal():
                self._handle_withdrawal(transaction)
            case Dispute():
                self._handle_dispute(transaction)
            case Resolve():
                self._handle_resolve(transaction)
            case Chargeback():
                self._handle_chargeback(transaction)
            case _:
                raise TypeError(f"Unsupported transaction: {transaction!r}")

    def _handle_deposit(self, deposit: Deposit) -> None:
        if self._state.has_deposit(deposit.transaction_id):
            raise DuplicateTransaction(deposit.transaction_id)

        account = self._state.get_or_create_account(deposit.client_id)
        if account.locked:
            raise AccountLocked(deposit.client_id)

        account.deposit(deposit.amount)
        self._state.store_deposit(deposit)
        self._verify(account)

    def _handle_withdrawal(self, withdrawal: Withdrawal) -> None:
        account = self._existing_account(withdrawal.client_id)

        if account.locked:
            raise AccountLocked(withdrawal.client_id)

        if account.available < withdrawal.amount:
            raise InsufficientFunds(withdrawal.client_id, account.available, withdrawal.amount)

        account.withdraw(withdrawal.amount)
        self._verify(account)

    def _handle_dispute(self, dispute: Dispute) -> None:
        deposit = self._referenced_deposit(dispute.client_id, dispute.referenced_transaction_id)

        if self._state.is_transaction_disputed(dispute.referenced_transaction_id):
            raise AlreadyUnderDispute(dispute.referenced_transaction_id)

        account = self._existing_account(dispute.client_id)
        if account.locked:
            raise AccountLocked(dispute.client_id)

        self._state.mark_transaction_disputed(dispute.referenced_transaction_id)
        account.hold(deposit.amount)
        self._verify(account)

    def _handle_resolve(self, resolve: Resolve) -> None:
        deposit = self._referenced_deposit(resolve.client_id, resolve.referenced_transaction_id)

        if not self._state.is_transaction_disputed(resolve.referenced_transaction_id):
            raise NotUnderDispute(resolve.referenced_transaction_id)

        account = self._existing_account(resolve.client_id)
        if account.locked:
            raise AccountLocked(resolve.client_id)

        self._state.clear_transaction_dispute(resolve.referenced_transaction_id)
        account.release(deposit.amount)
        self._verify(account)

    def _handle_chargeback(self, chargeback: Chargeback) -> None:
        deposit = self._referenced_deposit(chargeback.client_id, chargeback.referenced_transaction_id)

        if not self._state.is_transaction_disputed(chargeback.referenced_transaction_id):
            raise NotUnderDispute(chargeback.referenced_transaction_id)

        # No lock check: a chargeback is what locks the account. On an
        # already-locked account the dispute closes but balances stay put.
        account = self._existing_account(chargeback.client_id)
        was_locked = account.locked

        self._state.clear_transaction_dispute(chargeback.referenced_transaction_id)
        account.chargeback(deposit.amount)
        self._verify(account)
        if was_locked:
            logger.warning(f"Chargeback of tx {chargeback.referenced_transaction_id} on locked client {chargeback.client_id} left balances unchanged")
        else:
            logger.info(f"Client {chargeback.client_id} locked by chargeback of tx {chargeback.referenced_transaction_id}")

    def _referenced_deposit(self, client_id: int, transaction_id: int) -> Deposit:
        deposit = self._state.get_deposit(transaction_id)
        if deposit is None:
            raise TransactionNotFound(transaction_id)
        if deposit.client_id != client_id:
            raise ClientMismatch(transaction_id, expected=deposit.client_id, got=client_id)
        return deposit

    def _existing_account(self, client_id: int) -> ClientAccount:
        account = self._state.get_account(client_id)
        if account is None:
            raise AccountNotFound(client_id)
        return account

    def _verify(self, account: ClientAccount) -> None:
        if self._strict:
            account.check_invariant()

import logging
from typing import Dict, Optional, Set

from models import ClientAccount, Deposit

logger = logging.getLogger(__name__)


class StateManager:
    """
    Run-lifetime state: client accounts, the deposit ledger used for dispute
    lookups, and the set of transaction ids currently under dispute.
    Owned by a single engine; not thread-safe.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._deposits: Dict[int, Deposit] = {}
        self._disputed_transaction_ids: Set[int] = set()

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the client's account, or None if it was never opened."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or open a new one with zero balances."""
        if client_id not in self._accounts:
            logger.debug(f"Opening account for client {client_id}")
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_deposit(self, deposit: Deposit) -> None:
        """Record an applied deposit for future dispute lookups."""
        self._deposits[deposit.transaction_id] = deposit

    def get_deposit(self, transaction_id: int) -> Optional[Deposit]:
        return self._deposits.get(transaction_id)

    def has_deposit(self, transaction_id: int) -> bool:
        return transaction_id in self._deposits

    def mark_transaction_disputed(self, transaction_id: int) -> None:
        self._disputed_transaction_ids.add(transaction_id)

    def is_transaction_disputed(self, transaction_id: int) -> bool:
        return transaction_id in self._disputed_transaction_ids

    def clear_transaction_dispute(self, transaction_id: int) -> None:
        self._disputed_transaction_ids.discard(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def account_count(self) -> int:
        return len(self._accounts)

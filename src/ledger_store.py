from typing import Callable, Dict, Optional

from models import ClientAccount, TransactionRecord


class LedgerStore:
    """
    Pure storage for client accounts and deposit/withdrawal history.
    Performs no business validation; the processor owns all rules.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, TransactionRecord] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zeroed one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Retrieve an account without creating it."""
        return self._accounts.get(client_id)

    def record_transaction(self, record: TransactionRecord) -> bool:
        """
        Store a deposit or withdrawal for future dispute lookups.
        Returns False and leaves the store untouched if the id is taken.
        """
        if record.transaction_id in self._transactions:
            return False
        self._transactions[record.transaction_id] = record
        return True

    def lookup_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def mutate_account(self, client_id: int, mutation: Callable[[ClientAccount], None]) -> ClientAccount:
        """
        Apply a balance change to an existing account.
        Raises KeyError if the client has no account.
        """
        account = self._accounts[client_id]
        mutation(account)
        return account

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

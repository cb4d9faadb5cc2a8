import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import TransactionRecord, TransactionType
from ledger_store import LedgerStore


def make_record(transaction_id: int, client_id: int = 1, amount: int = 10000) -> TransactionRecord:
    return TransactionRecord(
        transaction_id=transaction_id,
        client_id=client_id,
        amount=amount,
        transaction_type=TransactionType.DEPOSIT,
    )


class TestLedgerStore:
    def setup_method(self):
        self.store = LedgerStore()

    def test_get_or_create_account(self):
        account = self.store.get_or_create_account(1)
        assert account.client_id == 1
        assert account.total == 0
        assert self.store.get_or_create_account(1) is account

    def test_get_account_does_not_create(self):
        assert self.store.get_account(5) is None
        assert self.store.get_all_accounts() == {}

    def test_record_and_lookup_transaction(self):
        record = make_record(1)
        assert self.store.record_transaction(record) is True
        assert self.store.lookup_transaction(1) is record
        assert self.store.lookup_transaction(2) is None

    def test_duplicate_transaction_id_rejected(self):
        first = make_record(1, amount=10000)
        second = make_record(1, client_id=2, amount=99999)
        self.store.record_transaction(first)

        assert self.store.record_transaction(second) is False
        assert self.store.lookup_transaction(1) is first

    def test_mutate_account(self):
        created = self.store.get_or_create_account(3)
        account = self.store.mutate_account(3, lambda a: a.credit(25000))
        assert account is created
        assert account.available == 25000

    def test_mutate_account_never_creates(self):
        with pytest.raises(KeyError):
            self.store.mutate_account(4, lambda a: a.credit(25000))
        assert self.store.get_account(4) is None

    def test_get_all_accounts_is_a_copy(self):
        self.store.get_or_create_account(1)
        accounts = self.store.get_all_accounts()
        accounts.clear()
        assert 1 in self.store.get_all_accounts()

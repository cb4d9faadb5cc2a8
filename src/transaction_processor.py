import logging
from typing import Optional

from models import (
    ClientAccount,
    DisputeState,
    ProcessingError,
    Transaction,
    TransactionRecord,
    TransactionType,
)
from ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to the ledger one at a time, in input order.

    Every rule is checked before anything is written, so a rejected
    transaction leaves the ledger exactly as it found it.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    def apply(self, transaction: Transaction) -> Optional[ProcessingError]:
        """
        Apply a single transaction.

        Returns:
            None on success, otherwise the ProcessingError naming the
            first rule the transaction broke.
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> Optional[ProcessingError]:
        if transaction.amount is None or transaction.amount <= 0:
            return ProcessingError.INVALID_AMOUNT

        account = self._store.get_account(transaction.client_id)
        if account is not None and account.locked:
            return ProcessingError.ACCOUNT_LOCKED

        if self._store.lookup_transaction(transaction.transaction_id) is not None:
            return ProcessingError.DUPLICATE_TRANSACTION_ID

        self._store.record_transaction(self._to_record(transaction))
        self._store.get_or_create_account(transaction.client_id)
        self._store.mutate_account(transaction.client_id, lambda a: a.credit(transaction.amount))
        return None

    def _handle_withdrawal(self, transaction: Transaction) -> Optional[ProcessingError]:
        if transaction.amount is None or transaction.amount <= 0:
            return ProcessingError.INVALID_AMOUNT

        account = self._store.get_account(transaction.client_id)
        if account is None:
            return ProcessingError.UNKNOWN_CLIENT_FOR_WITHDRAWAL

        if account.locked:
            return ProcessingError.ACCOUNT_LOCKED

        if self._store.lookup_transaction(transaction.transaction_id) is not None:
            return ProcessingError.DUPLICATE_TRANSACTION_ID

        if account.available < transaction.amount:
            return ProcessingError.INSUFFICIENT_FUNDS

        self._store.record_transaction(self._to_record(transaction))
        self._store.mutate_account(transaction.client_id, lambda a: a.debit(transaction.amount))
        return None

    def _handle_dispute(self, transaction: Transaction) -> Optional[ProcessingError]:
        original = self._store.lookup_transaction(transaction.transaction_id)
        error = self._check_reference(transaction, original, DisputeState.DISPUTED)
        if error is not None:
            return error

        # Withdrawals are disputable too; the hold must not drive available below zero.
        account = self._store.get_account(original.client_id)
        if account.available < original.amount:
            return ProcessingError.INSUFFICIENT_FUNDS

        self._store.mutate_account(original.client_id, lambda a: a.hold(original.amount))
        original.advance(DisputeState.DISPUTED)
        return None

    def _handle_resolve(self, transaction: Transaction) -> Optional[ProcessingError]:
        original = self._store.lookup_transaction(transaction.transaction_id)
        error = self._check_reference(transaction, original, DisputeState.RESOLVED)
        if error is not None:
            return error

        self._store.mutate_account(original.client_id, lambda a: a.release_hold(original.amount))
        original.advance(DisputeState.RESOLVED)
        return None

    def _handle_chargeback(self, transaction: Transaction) -> Optional[ProcessingError]:
        original = self._store.lookup_transaction(transaction.transaction_id)
        error = self._check_reference(transaction, original, DisputeState.CHARGED_BACK)
        if error is not None:
            return error

        self._store.mutate_account(original.client_id, self._charge_back(original.amount))
        original.advance(DisputeState.CHARGED_BACK)
        logger.info(f"Chargeback for tx {transaction.transaction_id}: client {original.client_id} locked")
        return None

    @staticmethod
    def _check_reference(
        transaction: Transaction,
        original: Optional[TransactionRecord],
        target: DisputeState,
    ) -> Optional[ProcessingError]:
        if original is None:
            return ProcessingError.TRANSACTION_NOT_FOUND

        if original.client_id != transaction.client_id:
            return ProcessingError.CLIENT_ID_MISMATCH

        if not original.can_advance_to(target):
            return ProcessingError.INVALID_DISPUTE_STATE

        return None

    @staticmethod
    def _charge_back(amount: int):
        def mutation(account: ClientAccount) -> None:
            account.remove_held(amount)
            account.locked = True

        return mutation

    @staticmethod
    def _to_record(transaction: Transaction) -> TransactionRecord:
        return TransactionRecord(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            amount=transaction.amount,
            transaction_type=transaction.transaction_type,
        )

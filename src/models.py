from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional

# Amounts are stored as integer ten-thousandths of a unit.
PRECISION = 4
SCALE = 10 ** PRECISION
_QUANTUM = Decimal(1).scaleb(-PRECISION)


def parse_amount(text: str) -> int:
    """
    Parse a decimal string into scaled integer units.

    Rounds half-to-even at the fourth fractional digit.
    Raises ValueError for anything that is not a finite number.
    """
    try:
        value = Decimal(text.strip())
        if not value.is_finite():
            raise ValueError(f"amount is not finite: {text!r}")
        return int(value.quantize(_QUANTUM, rounding=ROUND_HALF_EVEN).scaleb(PRECISION))
    except InvalidOperation as e:
        raise ValueError(f"invalid amount: {text!r}") from e


def format_amount(units: int) -> str:
    """Render scaled units with exactly four fractional digits."""
    sign = "-" if units < 0 else ""
    whole, fraction = divmod(abs(units), SCALE)
    return f"{sign}{whole}.{fraction:0{PRECISION}d}"


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def creates_entry(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


DISPUTE_TRANSITIONS = {
    DisputeState.NORMAL: {DisputeState.DISPUTED},
    DisputeState.DISPUTED: {DisputeState.RESOLVED, DisputeState.CHARGED_BACK},
    DisputeState.RESOLVED: set(),
    DisputeState.CHARGED_BACK: set(),
}


class ProcessingError(Enum):
    UNKNOWN_CLIENT_FOR_WITHDRAWAL = "unknown_client_for_withdrawal"
    DUPLICATE_TRANSACTION_ID = "duplicate_transaction_id"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    ACCOUNT_LOCKED = "account_locked"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"
    CLIENT_ID_MISMATCH = "client_id_mismatch"
    INVALID_AMOUNT = "invalid_amount"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[int] = None

    def __repr__(self) -> str:
        amount = format_amount(self.amount) if self.amount is not None else None
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={amount})"


@dataclass
class TransactionRecord:
    """A stored deposit or withdrawal, tracked for later disputes."""

    transaction_id: int
    client_id: int
    amount: int
    transaction_type: TransactionType
    dispute_state: DisputeState = DisputeState.NORMAL

    def can_advance_to(self, state: DisputeState) -> bool:
        return state in DISPUTE_TRANSITIONS[self.dispute_state]

    def advance(self, state: DisputeState) -> None:
        if not self.can_advance_to(state):
            raise ValueError(
                f"tx {self.transaction_id}: illegal dispute transition "
                f"{self.dispute_state.value} -> {state.value}"
            )
        self.dispute_state = state


@dataclass
class ClientAccount:
    client_id: int
    available: int = 0
    held: int = 0
    locked: bool = False

    @property
    def total(self) -> int:
        return self.available + self.held

    def credit(self, amount: int) -> None:
        self.available += amount

    def debit(self, amount: int) -> None:
        self.available -= amount

    def hold(self, amount: int) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: int) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: int) -> None:
        self.held -= amount


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.skipped = 0
        self.failures: Counter = Counter()

    def record_success(self):
        self.processed += 1

    def record_failure(self, error: ProcessingError):
        self.failed += 1
        self.failures[error] += 1

    def record_skip(self):
        self.skipped += 1

    def summary(self) -> str:
        line = f"Processed: {self.processed}, Failed: {self.failed}, Skipped: {self.skipped}"
        if self.failures:
            breakdown = ", ".join(
                f"{error.value}={count}" for error, count in sorted(self.failures.items(), key=lambda item: item[0].value)
            )
            line += f" ({breakdown})"
        return line

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    def __str__(self) -> str:
        return self.value


class DepositStatus(Enum):
    """Lifecycle status of a stored deposit."""

    DEPOSITED = "deposited"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"

    def __str__(self) -> str:
        return self.value


AMOUNT_TRANSACTION_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.WITHDRAWAL})


def preceding_state(transaction_type: TransactionType) -> Optional[DepositStatus]:
    """
    Status a deposit must be in for this transaction type to apply to it.

    Deposits and withdrawals never reference an earlier deposit, so they have none.
    """
    if transaction_type == TransactionType.DISPUTE:
        return DepositStatus.DEPOSITED
    if transaction_type in (TransactionType.RESOLVE, TransactionType.CHARGEBACK):
        return DepositStatus.DISPUTED
    return None


def resulting_state(transaction_type: TransactionType) -> Optional[DepositStatus]:
    """Status a deposit is left in after this transaction type is applied."""
    return {
        TransactionType.DEPOSIT: DepositStatus.DEPOSITED,
        TransactionType.DISPUTE: DepositStatus.DISPUTED,
        TransactionType.RESOLVE: DepositStatus.RESOLVED,
        TransactionType.CHARGEBACK: DepositStatus.CHARGED_BACK,
    }.get(transaction_type)


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise ValueError(f"client id {self.client_id} out of range")
        if not 0 <= self.transaction_id <= MAX_TRANSACTION_ID:
            raise ValueError(f"transaction id {self.transaction_id} out of range")

        if self.transaction_type in AMOUNT_TRANSACTION_TYPES:
            if self.amount is None:
                raise ValueError(f"{self.transaction_type} tx {self.transaction_id}: amount is required")
            object.__setattr__(self, "amount", self._to_decimal(self.amount))
        elif self.amount is not None:
            raise ValueError(f"{self.transaction_type} tx {self.transaction_id}: amount is not allowed")

    def _to_decimal(self, amount) -> Decimal:
        # Floats go through str so 10.1 becomes Decimal("10.1"), not its binary expansion.
        if isinstance(amount, bool) or not isinstance(amount, (Decimal, int, float)):
            raise ValueError(f"{self.transaction_type} tx {self.transaction_id}: invalid amount {amount!r}")
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        if not amount.is_finite():
            raise ValueError(f"{self.transaction_type} tx {self.transaction_id}: invalid amount {amount}")
        return amount

    @classmethod
    def deposit(cls, client_id: int, transaction_id: int, amount: Decimal) -> "Transaction":
        return cls(TransactionType.DEPOSIT, client_id, transaction_id, amount)

    @classmethod
    def withdrawal(cls, client_id: int, transaction_id: int, amount: Decimal) -> "Transaction":
        return cls(TransactionType.WITHDRAWAL, client_id, transaction_id, amount)

    @classmethod
    def dispute(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.DISPUTE, client_id, transaction_id)

    @classmethod
    def resolve(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.RESOLVE, client_id, transaction_id)

    @classmethod
    def chargeback(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.CHARGEBACK, client_id, transaction_id)

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


@dataclass
class DepositRecord:
    client_id: int
    amount: Decimal
    status: DepositStatus = DepositStatus.DEPOSITED


class ProcessingStats:
    """Counters for tracking processing outcomes."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.failures_by_kind = {}

    def record_success(self):
        self.processed += 1

    def record_failure(self, kind: str):
        self.failed += 1
        self.failures_by_kind[kind] = self.failures_by_kind.get(kind, 0) + 1

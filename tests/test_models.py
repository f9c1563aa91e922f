import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import (
    ClientAccount,
    DepositStatus,
    ProcessingStats,
    Transaction,
    TransactionType,
    preceding_state,
    resulting_state,
)


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction.deposit(client_id=1, transaction_id=1, amount=Decimal("100.0"))
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_withdrawal(self):
        transaction = Transaction.withdrawal(client_id=2, transaction_id=7, amount=Decimal("5"))
        assert transaction.transaction_type == TransactionType.WITHDRAWAL
        assert transaction.amount == Decimal("5")

    def test_lifecycle_factories_have_no_amount(self):
        assert Transaction.dispute(1, 1).transaction_type == TransactionType.DISPUTE
        assert Transaction.resolve(1, 1).transaction_type == TransactionType.RESOLVE
        assert Transaction.chargeback(1, 1).transaction_type == TransactionType.CHARGEBACK
        assert Transaction.dispute(1, 1).amount is None
        assert Transaction.resolve(1, 1).amount is None
        assert Transaction.chargeback(1, 1).amount is None

    def test_deposit_requires_amount(self):
        with pytest.raises(ValueError):
            Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1)

    def test_dispute_rejects_amount(self):
        with pytest.raises(ValueError):
            Transaction(TransactionType.DISPUTE, client_id=1, transaction_id=1, amount=Decimal("1"))

    def test_numeric_amounts_become_decimal(self):
        assert Transaction.deposit(1, 1, 10.0).amount == Decimal("10.0")
        assert Transaction.deposit(1, 1, 10.1).amount == Decimal("10.1")
        assert Transaction.withdrawal(1, 2, 5).amount == Decimal("5")
        assert isinstance(Transaction.withdrawal(1, 2, 5).amount, Decimal)

    @pytest.mark.parametrize("amount", [
        Decimal("NaN"),
        Decimal("Infinity"),
        float("nan"),
        float("-inf"),
        "10.0",
        True,
    ])
    def test_invalid_amount_rejected(self, amount):
        with pytest.raises(ValueError):
            Transaction.deposit(1, 1, amount)
        with pytest.raises(ValueError):
            Transaction.withdrawal(1, 1, amount)

    def test_id_ranges(self):
        Transaction.dispute(65535, 4294967295)
        with pytest.raises(ValueError):
            Transaction.dispute(65536, 1)
        with pytest.raises(ValueError):
            Transaction.dispute(1, 4294967296)
        with pytest.raises(ValueError):
            Transaction.dispute(-1, 1)


class TestTransitionTable:
    def test_preceding_state(self):
        assert preceding_state(TransactionType.DEPOSIT) is None
        assert preceding_state(TransactionType.WITHDRAWAL) is None
        assert preceding_state(TransactionType.DISPUTE) == DepositStatus.DEPOSITED
        assert preceding_state(TransactionType.RESOLVE) == DepositStatus.DISPUTED
        assert preceding_state(TransactionType.CHARGEBACK) == DepositStatus.DISPUTED

    def test_resulting_state(self):
        assert resulting_state(TransactionType.DEPOSIT) == DepositStatus.DEPOSITED
        assert resulting_state(TransactionType.WITHDRAWAL) is None
        assert resulting_state(TransactionType.DISPUTE) == DepositStatus.DISPUTED
        assert resulting_state(TransactionType.RESOLVE) == DepositStatus.RESOLVED
        assert resulting_state(TransactionType.CHARGEBACK) == DepositStatus.CHARGED_BACK


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_total_follows_hold_and_release(self):
        account = ClientAccount(client_id=1, available=Decimal("10"))
        account.hold(Decimal("4"))
        assert account.available == Decimal("6")
        assert account.held == Decimal("4")
        assert account.total == Decimal("10")

        account.release_hold(Decimal("4"))
        assert account.available == Decimal("10")
        assert account.held == Decimal("0")


class TestProcessingStats:
    def test_counts_failures_by_kind(self):
        stats = ProcessingStats()
        stats.record_success()
        stats.record_failure("InsufficientFunds")
        stats.record_failure("InsufficientFunds")
        stats.record_failure("DuplicateTransaction")

        assert stats.processed == 1
        assert stats.failed == 3
        assert stats.failures_by_kind == {"InsufficientFunds": 2, "DuplicateTransaction": 1}

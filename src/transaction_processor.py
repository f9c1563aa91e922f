import logging

from errors import (
    ClientAccountFrozen,
    DuplicateTransaction,
    InsufficientFunds,
    InvalidTransactionState,
    LedgerInvariantError,
    MissingTransaction,
)
from models import (
    ClientAccount,
    DepositRecord,
    Transaction,
    TransactionType,
    preceding_state,
    resulting_state,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Processes transactions against state.
    Raises a ProcessTransactionError subclass when a transaction is rejected,
    and LedgerInvariantError when the ledger itself is found inconsistent.
    All checks run before any mutation, so a rejected transaction leaves
    balances and history untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Process a single transaction.

        Raises:
            DuplicateTransaction: deposit/withdrawal id already used
            ClientAccountFrozen: withdrawal from a locked account
            InsufficientFunds: withdrawal or dispute exceeds available funds
            MissingTransaction: referenced deposit not found for this client
            InvalidTransactionState: deposit is not in the required prior status
            LedgerInvariantError: held funds cannot cover a resolve/chargeback
        """
        account = self._state.get_or_create_account(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(account, transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> None:
        if self._state.is_transaction_processed(transaction.transaction_id):
            raise DuplicateTransaction(transaction.transaction_id)

        account.credit(transaction.amount)
        self._state.store_deposit(
            transaction.transaction_id,
            DepositRecord(
                client_id=transaction.client_id,
                amount=transaction.amount,
                status=resulting_state(transaction.transaction_type),
            ),
        )

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> None:
        if self._state.is_transaction_processed(transaction.transaction_id):
            raise DuplicateTransaction(transaction.transaction_id)

        if account.locked:
            raise ClientAccountFrozen(transaction.transaction_id, transaction.transaction_type, transaction.client_id)

        if account.available < transaction.amount:
            raise InsufficientFunds(transaction.transaction_id, transaction.transaction_type)

        account.debit(transaction.amount)
        self._state.record_withdrawal(transaction.transaction_id)

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> None:
        deposit = self._lookup_deposit(transaction)

        if account.available < deposit.amount:
            raise InsufficientFunds(transaction.transaction_id, transaction.transaction_type)

        account.hold(deposit.amount)
        deposit.status = resulting_state(transaction.transaction_type)
        logger.debug(f"Dispute for tx {transaction.transaction_id}: holding {deposit.amount}")

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> None:
        deposit = self._lookup_deposit(transaction)
        self._check_held_covers(account, deposit, transaction)

        account.release_hold(deposit.amount)
        deposit.status = resulting_state(transaction.transaction_type)
        logger.debug(f"Resolve for tx {transaction.transaction_id}: released {deposit.amount}")

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> None:
        deposit = self._lookup_deposit(transaction)
        self._check_held_covers(account, deposit, transaction)

        account.remove_held(deposit.amount)
        account.lock()
        deposit.status = resulting_state(transaction.transaction_type)
        logger.info(f"Chargeback for tx {transaction.transaction_id}: client {account.client_id} account locked")

    def _lookup_deposit(self, transaction: Transaction) -> DepositRecord:
        """Find the deposit a dispute/resolve/chargeback refers to and validate the transition."""
        deposit = self._state.get_deposit(transaction.transaction_id)

        if deposit is None:
            raise MissingTransaction(transaction.transaction_id, transaction.client_id, transaction.transaction_type)

        if deposit.status != preceding_state(transaction.transaction_type):
            raise InvalidTransactionState(transaction.transaction_id, transaction.transaction_type, deposit.status)

        # A deposit owned by another client is reported as missing for this one.
        if deposit.client_id != transaction.client_id:
            raise MissingTransaction(transaction.transaction_id, transaction.client_id, transaction.transaction_type)

        return deposit

    @staticmethod
    def _check_held_covers(account: ClientAccount, deposit: DepositRecord, transaction: Transaction) -> None:
        # Only a successful dispute reaches DISPUTED, and it added exactly this amount to held.
        if account.held < deposit.amount:
            raise LedgerInvariantError(
                f"logic error: held funds ({account.held}) of client {account.client_id} should never be "
                f"insufficient for a {transaction.transaction_type} of tx {transaction.transaction_id} (amount {deposit.amount})"
            )

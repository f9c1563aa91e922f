from models import DepositStatus, TransactionType


class ProcessTransactionError(Exception):
    """
    Base class for business-rule rejections of a single transaction.

    The ledger is left unchanged by the rejected transaction, so callers
    can skip it and keep processing the stream.
    """


class DuplicateTransaction(ProcessTransactionError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f'transaction: "{transaction_id}" has already been processed')


class InsufficientFunds(ProcessTransactionError):
    def __init__(self, transaction_id: int, transaction_type: TransactionType):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        super().__init__(
            f'{transaction_type} transaction: "{transaction_id}" failed. client has insufficient funds'
        )


class MissingTransaction(ProcessTransactionError):
    """Referenced deposit does not exist, or belongs to another client."""

    def __init__(self, transaction_id: int, client_id: int, transaction_type: TransactionType):
        self.transaction_id = transaction_id
        self.client_id = client_id
        self.transaction_type = transaction_type
        super().__init__(
            f'cannot {transaction_type} transaction: "{transaction_id}" with client id: "{client_id}". '
            f"no deposit with this id exists"
        )


class InvalidTransactionState(ProcessTransactionError):
    def __init__(self, transaction_id: int, transaction_type: TransactionType, actual_status: DepositStatus):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        self.actual_status = actual_status
        super().__init__(
            f'{transaction_type} transaction: "{transaction_id}" failed. deposit status was: {actual_status}'
        )


class ClientAccountFrozen(ProcessTransactionError):
    def __init__(self, transaction_id: int, transaction_type: TransactionType, client_id: int):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        self.client_id = client_id
        super().__init__(
            f'{transaction_type} transaction: "{transaction_id}" failed. client account: {client_id} is frozen'
        )


class LedgerInvariantError(Exception):
    """
    Ledger bookkeeping is inconsistent (e.g. held funds below a disputed amount).

    Not a ProcessTransactionError: processing must stop rather than skip.
    """


class TransactionParseError(Exception):
    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}")

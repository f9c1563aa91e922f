from types import MappingProxyType
from typing import Dict, Mapping, Optional, Set

from models import ClientAccount, DepositRecord


class StateManager:
    """
    Owns all ledger state for one run.
    Stores client accounts, deposit history for dispute lookups, and
    processed withdrawal ids for duplicate detection.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._deposits: Dict[int, DepositRecord] = {}
        self._withdrawal_ids: Set[int] = set()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_deposit(self, transaction_id: int, record: DepositRecord) -> None:
        """Store deposit for future dispute lookups."""
        self._deposits[transaction_id] = record

    def get_deposit(self, transaction_id: int) -> Optional[DepositRecord]:
        """Retrieve stored deposit by transaction ID."""
        return self._deposits.get(transaction_id)

    def record_withdrawal(self, transaction_id: int) -> None:
        self._withdrawal_ids.add(transaction_id)

    def is_transaction_processed(self, transaction_id: int) -> bool:
        """Check the shared deposit/withdrawal id namespace."""
        return transaction_id in self._deposits or transaction_id in self._withdrawal_ids

    def get_all_accounts(self) -> Mapping[int, ClientAccount]:
        """Return a read-only view of all accounts (for final output)."""
        return MappingProxyType(self._accounts)

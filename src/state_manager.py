from typing import Dict

from dispute_index import DisputeIndex
from models import ClientAccount


class StateManager:
    """
    State owned by a single replay run: client accounts and the dispute index.
    Not shared between runs and never accessed concurrently.
    """

    def __init__(self, dispute_index: DisputeIndex):
        self._accounts: Dict[int, ClientAccount] = {}
        self._dispute_index = dispute_index

    @property
    def dispute_index(self) -> DisputeIndex:
        return self._dispute_index

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

import logging

from models import Transaction, TransactionType, ClientAccount, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions, in log order, to the accounts held by a StateManager.

    Records that cannot be applied (locked account, insufficient funds,
    unresolvable dispute reference) are ignored and reported as
    ProcessingResult.IGNORED. A negative or missing amount raises
    ContractViolation and aborts the run.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        The dispute index is filled from deposits and withdrawals before the
        record touches its account, so a later dispute on the same id can find
        the original amount.
        """
        account = self._state.get_or_create_account(transaction.client_id)
        self._state.dispute_index.fill(transaction)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                applied = account.deposit(transaction.amount)
            case TransactionType.WITHDRAWAL:
                applied = account.withdraw(transaction.amount)
            case TransactionType.DISPUTE:
                applied = self._apply_reference(account, transaction, ClientAccount.hold)
            case TransactionType.RESOLVE:
                applied = self._apply_reference(account, transaction, ClientAccount.release_hold)
            case TransactionType.CHARGEBACK:
                applied = self._apply_reference(account, transaction, ClientAccount.charge_back)
            case _:
                raise ValueError(f"Unsupported transaction type: {transaction.transaction_type}")

        if applied:
            return ProcessingResult.APPLIED

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Ignored {transaction}: {self._describe_failure(account, transaction)}")
        return ProcessingResult.IGNORED

    def _apply_reference(self, account: ClientAccount, transaction: Transaction, handler) -> bool:
        reference = self._state.dispute_index.lookup(transaction.transaction_id)
        if reference is None:
            return False
        return handler(account, reference.amount)

    def _describe_failure(self, account: ClientAccount, transaction: Transaction) -> str:
        if account.locked:
            return "account is locked"
        if transaction.transaction_type == TransactionType.WITHDRAWAL:
            return f"insufficient funds (available {account.available})"
        return "no resolvable reference"

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Optional, Union

from models import Transaction, TransactionType


@dataclass(frozen=True)
class PendingReference:
    """A dispute was seen for this id, but no deposit or withdrawal has bound to it yet."""

    transaction_id: int


@dataclass(frozen=True)
class ResolvedReference:
    """The original deposit or withdrawal a dispute refers to."""

    transaction_id: int
    transaction_type: TransactionType
    amount: Decimal


DisputeReference = Union[PendingReference, ResolvedReference]

_REFERENCEABLE_TYPES = (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeIndex:
    """
    Maps disputed transaction ids to the original transaction they refer to.

    Ids absent from the index were never disputed. An id maps to a
    PendingReference until its deposit or withdrawal is replayed, after which
    it maps to a ResolvedReference for the rest of the run.
    """

    def __init__(self):
        self._references: Dict[int, DisputeReference] = {}

    @classmethod
    def from_transactions(cls, transactions: Iterable[Transaction]) -> "DisputeIndex":
        """Discovery pass: one pending entry per distinct disputed transaction id."""
        index = cls()
        for transaction in transactions:
            if transaction.transaction_type == TransactionType.DISPUTE:
                index.open(transaction.transaction_id)
        return index

    def open(self, transaction_id: int) -> None:
        """Register a disputed id. Repeated calls keep the existing entry."""
        self._references.setdefault(transaction_id, PendingReference(transaction_id))

    def fill(self, transaction: Transaction) -> bool:
        """
        Bind a replayed deposit or withdrawal to its pending dispute entry.

        Returns True if an entry was filled. Entries are filled at most once;
        later records reusing the same id do not overwrite the binding.
        """
        if transaction.transaction_type not in _REFERENCEABLE_TYPES:
            return False

        reference = self._references.get(transaction.transaction_id)
        if not isinstance(reference, PendingReference):
            return False

        self._references[transaction.transaction_id] = ResolvedReference(
            transaction_id=transaction.transaction_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
        )
        return True

    def lookup(self, transaction_id: int) -> Optional[ResolvedReference]:
        """Return the bound original transaction, or None if there is no resolvable reference."""
        reference = self._references.get(transaction_id)
        if isinstance(reference, ResolvedReference):
            return reference
        return None

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._references

    def __len__(self) -> int:
        return len(self._references)

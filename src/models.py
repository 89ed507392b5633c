from contextlib import contextmanager
from dataclasses import dataclass
from decimal import (
    Context,
    Decimal,
    DecimalException,
    Inexact,
    InvalidOperation,
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    Overflow,
    localcontext,
)
from enum import Enum
from typing import Optional

# Balances never round: any result that cannot be held exactly traps.
EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[Inexact, Overflow, InvalidOperation],
)


class LedgerError(Exception):
    """Base class for errors that abort a replay run."""


class TransactionParseError(LedgerError):
    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class ContractViolation(LedgerError):
    """An amount that can never be valid reached an account handler."""


class BalanceOverflow(LedgerError):
    """A balance could not be represented exactly."""


@contextmanager
def exact_arithmetic():
    with localcontext(EXACT_CONTEXT):
        try:
            yield
        except DecimalException as e:
            raise BalanceOverflow(f"balance arithmetic is not exact: {e!r}") from e


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


def _require_amount(amount: Optional[Decimal]) -> Decimal:
    if amount is None:
        raise ContractViolation("amount is required")
    if amount < 0:
        raise ContractViolation(f"amount must not be negative, got {amount}")
    return amount


@dataclass
class ClientAccount:
    """
    Balances of one client.
    Every mutator is a no-op once the account is locked; a locked account is never unlocked.
    Mutators return True when balances changed.
    Arithmetic is exact; a result that would round raises BalanceOverflow and leaves balances unchanged.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        with exact_arithmetic():
            return self.available + self.held

    def deposit(self, amount: Decimal) -> bool:
        amount = _require_amount(amount)
        if self.locked:
            return False
        with exact_arithmetic():
            self.available += amount
        return True

    def withdraw(self, amount: Decimal) -> bool:
        amount = _require_amount(amount)
        if self.locked or self.available < amount:
            return False
        with exact_arithmetic():
            self.available -= amount
        return True

    def hold(self, amount: Decimal) -> bool:
        # available may go negative here when funds were already withdrawn
        amount = _require_amount(amount)
        if self.locked:
            return False
        with exact_arithmetic():
            available, held = self.available - amount, self.held + amount
        self.available, self.held = available, held
        return True

    def release_hold(self, amount: Decimal) -> bool:
        amount = _require_amount(amount)
        if self.locked:
            return False
        with exact_arithmetic():
            available, held = self.available + amount, self.held - amount
        self.available, self.held = available, held
        return True

    def charge_back(self, amount: Decimal) -> bool:
        amount = _require_amount(amount)
        if self.locked:
            return False
        with exact_arithmetic():
            self.held -= amount
        self.locked = True
        return True


class ProcessingStats:
    """Counters for a single replay run."""

    def __init__(self):
        self.applied = 0
        self.ignored = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1

    @property
    def processed(self) -> int:
        return self.applied + self.ignored

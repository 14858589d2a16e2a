from dataclasses import dataclass, field
from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow
from enum import Enum
from typing import Dict, Optional

# 34 significant digits, as decimal128. Any rounding raises Inexact.
MONEY_CONTEXT = Context(prec=34, traps=[InvalidOperation, DivisionByZero, Overflow, Inexact])


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def requires_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Balances of a single client.

    `total` is derived from `available` and `held`, so the
    total == available + held invariant holds after every mutation.
    `locked` only records that a chargeback happened; it does not
    block further transactions.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    disputed: Dict[int, Decimal] = field(default_factory=dict, repr=False, compare=False)

    @property
    def total(self) -> Decimal:
        return MONEY_CONTEXT.add(self.available, self.held)

    def _commit(self, available: Decimal, held: Decimal) -> None:
        """
        Store new balances. Raises decimal.Inexact, leaving the account
        untouched, if the new total cannot be represented exactly.
        """
        MONEY_CONTEXT.add(available, held)
        self.available = available
        self.held = held

    def credit(self, amount: Decimal) -> None:
        self._commit(MONEY_CONTEXT.add(self.available, amount), self.held)

    def debit(self, amount: Decimal) -> None:
        self._commit(MONEY_CONTEXT.subtract(self.available, amount), self.held)

    def hold(self, transaction_id: int, amount: Decimal) -> None:
        self._commit(
            MONEY_CONTEXT.subtract(self.available, amount),
            MONEY_CONTEXT.add(self.held, amount),
        )
        self.disputed[transaction_id] = amount

    def release_hold(self, transaction_id: int) -> Optional[Decimal]:
        amount = self.disputed.get(transaction_id)
        if amount is None:
            return None
        self._commit(
            MONEY_CONTEXT.add(self.available, amount),
            MONEY_CONTEXT.subtract(self.held, amount),
        )
        del self.disputed[transaction_id]
        return amount

    def remove_held(self, transaction_id: int) -> Optional[Decimal]:
        amount = self.disputed.get(transaction_id)
        if amount is None:
            return None
        self._commit(self.available, MONEY_CONTEXT.subtract(self.held, amount))
        del self.disputed[transaction_id]
        self.locked = True
        return amount


class ProcessingStats:
    """Counters for the end-of-run summary."""

    def __init__(self):
        self.processed = 0
        self.ignored = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.processed += 1
        elif result == ProcessingResult.IGNORED:
            self.ignored += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Ignored: {self.ignored}"

import logging
from decimal import Decimal, Inexact
from typing import Dict, Iterator, Tuple

from errors import InsufficientFundsError, MissingAmountError, PrecisionError
from models import MONEY_CONTEXT, Transaction, TransactionType, ClientAccount, ProcessingResult

logger = logging.getLogger(__name__)


class Ledger:
    """
    Client accounts plus the cache of deposits that can still be disputed.
    Transactions must be applied in input order, one at a time.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._deposits: Dict[int, Decimal] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            SUCCESS: Balances were updated
            IGNORED: Dispute, resolve or chargeback referencing a transaction
                     that is not (or no longer) disputable

        Raises:
            MissingAmountError: Deposit or withdrawal without an amount
            InsufficientFundsError: Withdrawal exceeds the available funds
            PrecisionError: A balance would need more than 34 significant digits
        """
        if transaction.transaction_type.requires_amount and transaction.amount is None:
            raise MissingAmountError(transaction.transaction_id, transaction.transaction_type.value)

        account = self.get_or_create_account(transaction.client_id)

        try:
            match transaction.transaction_type:
                case TransactionType.DEPOSIT:
                    return self._handle_deposit(account, transaction)
                case TransactionType.WITHDRAWAL:
                    return self._handle_withdrawal(account, transaction)
                case TransactionType.DISPUTE:
                    return self._handle_dispute(account, transaction)
                case TransactionType.RESOLVE:
                    return self._handle_resolve(account, transaction)
                case TransactionType.CHARGEBACK:
                    return self._handle_chargeback(account, transaction)
        except Inexact as e:
            raise PrecisionError(transaction.transaction_id, MONEY_CONTEXT.prec) from e

        raise ValueError(f"unsupported transaction type: {transaction.transaction_type}")

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.transaction_id in self._deposits:
            logger.warning(f"Deposit tx {transaction.transaction_id}: duplicate id, replacing cached amount")

        account.credit(transaction.amount)
        self._deposits[transaction.transaction_id] = transaction.amount
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if account.available >= transaction.amount and account.total >= transaction.amount:
            account.debit(transaction.amount)
            return ProcessingResult.SUCCESS

        raise InsufficientFundsError(
            account.client_id,
            transaction.transaction_id,
            transaction.amount,
            account.available,
        )

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.transaction_id in account.disputed:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: already disputed, ignoring")
            return ProcessingResult.IGNORED

        amount = self._deposits.get(transaction.transaction_id)

        if amount is None:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: no disputable deposit, ignoring")
            return ProcessingResult.IGNORED

        # available may go negative here
        account.hold(transaction.transaction_id, amount)
        # Dropping the deposit keeps resolved and charged back ids from being disputed again.
        del self._deposits[transaction.transaction_id]
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if account.release_hold(transaction.transaction_id) is None:
            logger.debug(f"Resolve for tx {transaction.transaction_id}: not disputed, ignoring")
            return ProcessingResult.IGNORED
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if account.remove_held(transaction.transaction_id) is None:
            logger.debug(f"Chargeback for tx {transaction.transaction_id}: not disputed, ignoring")
            return ProcessingResult.IGNORED
        return ProcessingResult.SUCCESS

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def snapshot(self) -> Iterator[Tuple[int, Decimal, Decimal, Decimal, bool]]:
        """Yield (client, available, held, total, locked) per account, in no particular order."""
        for account in self._accounts.values():
            yield account.client_id, account.available, account.held, account.total, account.locked

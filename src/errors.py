from decimal import Decimal


class LedgerError(Exception):
    """Base class for conditions that abort the whole batch."""


class MalformedRecordError(LedgerError):
    def __init__(self, line: int, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"malformed record at line {line}: {reason}")


class MissingAmountError(LedgerError):
    def __init__(self, transaction_id: int, transaction_type: str):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        super().__init__(
            f"cannot process transaction: id={transaction_id}: "
            f"'{transaction_type}' transaction must have 'amount' value"
        )


class InsufficientFundsError(LedgerError):
    def __init__(self, client_id: int, transaction_id: int, requested: Decimal, available: Decimal):
        self.client_id = client_id
        self.transaction_id = transaction_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"cannot process transaction: id={transaction_id}: "
            f"funds are not sufficient for withdrawal "
            f"(client={client_id}, requested={requested}, available={available})"
        )


class SourceError(LedgerError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class PrecisionError(LedgerError):
    def __init__(self, transaction_id: int, digits: int):
        self.transaction_id = transaction_id
        self.digits = digits
        super().__init__(
            f"cannot process transaction: id={transaction_id}: "
            f"balance cannot be represented exactly in {digits} significant digits"
        )

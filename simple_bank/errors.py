"""
Transfer engine errors.

Every failure of a transfer surfaces as exactly one exception
derived from TransferError. Callers map these to their own
protocol (the HTTP layer maps them to status codes).
"""


class TransferError(Exception):
    """Base class for all transfer engine failures."""


class InvalidArgumentError(TransferError, ValueError):
    """The request breaks a structural rule. Raised before touching the store."""


class AccountNotFoundError(TransferError):
    """An account referenced by the transfer does not exist."""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class TransactionFailureError(TransferError):
    """The store failed while opening, writing or committing a unit of work."""


class InsufficientFundsError(TransactionFailureError):
    """A debit would have taken the balance below zero."""

    def __init__(self, account_id: int, balance: int, delta: int):
        self.account_id = account_id
        self.balance = balance
        self.delta = delta
        super().__init__(
            f"Account {account_id} balance not enough: "
            f"balance={balance}, delta={delta}"
        )


class TransactionTimeoutError(TransactionFailureError):
    """The unit of work ran past its deadline and was rolled back."""


class RollbackFailedError(TransactionFailureError):
    """
    The unit of work failed and the rollback failed too.

    Both errors are kept: `original` is what made the unit of
    work fail, `rollback_error` is what the rollback raised.
    """

    def __init__(self, original: BaseException, rollback_error: BaseException):
        self.original = original
        self.rollback_error = rollback_error
        super().__init__(f"tx err: {original}, rb err: {rollback_error}")

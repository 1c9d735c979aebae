"""
Transfer store: the unit-of-work executor and its query handle.

Store.run_in_transaction() opens one database transaction,
hands a Queries object bound to it to the caller's function,
and then commits or rolls back everything that function wrote.
Queries exposes only the writes and reads a transfer needs.
"""

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from simple_bank.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    RollbackFailedError,
    TransactionFailureError,
    TransactionTimeoutError,
)
from simple_bank.models.account import Account
from simple_bank.models.entry import Entry
from simple_bank.models.transfer import Transfer

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _expired(deadline: float | None) -> bool:
    return deadline is not None and time.monotonic() >= deadline


class Queries:
    """
    Store operations bound to one open transaction.

    Every statement checks the unit of work's deadline first,
    so an expired transfer stops before its next write and is
    rolled back by the executor.
    """

    def __init__(self, db: Session, deadline: float | None = None):
        self.db = db
        self.deadline = deadline

    def _check_deadline(self) -> None:
        if _expired(self.deadline):
            raise TransactionTimeoutError("transfer deadline exceeded")

    def _insert(self, row, account_ids: tuple[int, ...]) -> None:
        """
        Add and flush one row inside a savepoint.

        When the store enforces foreign keys, an insert that
        references a missing account fails here. The savepoint
        keeps the transaction usable so the missing account can
        be looked up and reported as AccountNotFoundError. Other
        integrity errors propagate as they are.
        """
        self._check_deadline()
        try:
            with self.db.begin_nested():
                self.db.add(row)
        except IntegrityError:
            for account_id in account_ids:
                if self.db.get(Account, account_id) is None:
                    raise AccountNotFoundError(account_id)
            raise

    def create_transfer(
        self, from_account_id: int, to_account_id: int, amount: int
    ) -> Transfer:
        """Insert a transfer record and return it with its id and timestamp."""
        transfer = Transfer(
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
        )
        self._insert(transfer, (from_account_id, to_account_id))
        return transfer

    def create_entry(
        self, account_id: int, transfer_id: int, amount: int
    ) -> Entry:
        """Insert one ledger entry and return it with its id and timestamp."""
        entry = Entry(
            account_id=account_id,
            transfer_id=transfer_id,
            amount=amount,
        )
        self._insert(entry, (account_id,))
        return entry

    def apply_delta(self, account_id: int, delta: int) -> Account:
        """
        Add delta to an account's balance in one UPDATE statement.

        The increment happens inside the database, never as a
        read followed by a write, so two transactions updating
        the same row serialize on its lock without losing an
        update. A debit only matches the row while the balance
        stays non-negative.

        Raises AccountNotFoundError if the row does not exist and
        InsufficientFundsError if the debit was refused.
        """
        self._check_deadline()
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .returning(Account)
        )
        if delta < 0:
            stmt = stmt.where(Account.balance + delta >= 0)

        account = self.db.scalars(stmt).one_or_none()
        if account is not None:
            return account

        existing = self.db.get(Account, account_id, populate_existing=True)
        if existing is None:
            raise AccountNotFoundError(account_id)
        raise InsufficientFundsError(account_id, existing.balance, delta)

    def get_account(self, account_id: int) -> Account | None:
        self._check_deadline()
        return self.db.get(Account, account_id)

    def get_transfer(self, transfer_id: int) -> Transfer | None:
        self._check_deadline()
        return self.db.get(Transfer, transfer_id)

    def get_entry(self, entry_id: int) -> Entry | None:
        self._check_deadline()
        return self.db.get(Entry, entry_id)

    def list_entries(
        self,
        account_id: int | None = None,
        transfer_id: int | None = None,
    ) -> list[Entry]:
        """Return entries, oldest first, optionally filtered."""
        self._check_deadline()
        stmt = select(Entry).order_by(Entry.id)
        if account_id is not None:
            stmt = stmt.where(Entry.account_id == account_id)
        if transfer_id is not None:
            stmt = stmt.where(Entry.transfer_id == transfer_id)
        return list(self.db.scalars(stmt).all())


class Store:
    """
    Runs functions inside database transactions.

    The store takes a session factory rather than a session:
    every unit of work gets its own session and connection
    from the pool, so concurrent transfers never share one.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def run_in_transaction(
        self,
        fn: Callable[[Queries], T],
        timeout: float | None = None,
    ) -> T:
        """
        Execute fn inside one transaction and return its result.

        If fn returns, the transaction is committed. A failed
        commit raises TransactionFailureError and is not retried.

        If fn raises, the transaction is rolled back and the
        error propagates. Raw SQLAlchemy errors are wrapped in
        TransactionFailureError. If the rollback fails as well,
        RollbackFailedError carries both errors.

        With a timeout, lock waits on open, on every statement
        and on commit are bounded by the time left, and a store
        error raised once the deadline has passed surfaces as
        TransactionTimeoutError.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        if _expired(deadline):
            raise TransactionTimeoutError("transfer deadline exceeded")

        db = self.session_factory()
        try:
            try:
                if deadline is None:
                    db.connection()
                else:
                    db.connection(execution_options={
                        "lock_timeout": deadline - time.monotonic(),
                    })
            except SQLAlchemyError as exc:
                if _expired(deadline):
                    raise TransactionTimeoutError(
                        f"timed out opening transaction: {exc}"
                    ) from exc
                raise TransactionFailureError(
                    f"could not open transaction: {exc}"
                ) from exc

            try:
                result = fn(Queries(db, deadline))
            except BaseException as exc:
                self._rollback(db, exc)
                if isinstance(exc, SQLAlchemyError):
                    if _expired(deadline):
                        raise TransactionTimeoutError(str(exc)) from exc
                    raise TransactionFailureError(str(exc)) from exc
                raise

            try:
                db.commit()
            except SQLAlchemyError as exc:
                logger.error("Commit failed: %s", exc)
                if _expired(deadline):
                    raise TransactionTimeoutError(
                        f"timed out committing: {exc}"
                    ) from exc
                raise TransactionFailureError(f"commit failed: {exc}") from exc
            return result
        finally:
            db.close()

    @staticmethod
    def _rollback(db: Session, exc: BaseException) -> None:
        try:
            db.rollback()
        except SQLAlchemyError as rb_exc:
            logger.error(
                "Rollback failed: %s (transaction error: %s)", rb_exc, exc
            )
            raise RollbackFailedError(exc, rb_exc) from exc
        logger.warning("Transaction rolled back: %r", exc)

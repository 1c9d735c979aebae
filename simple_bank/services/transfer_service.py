"""
Transfer service: moves money between two accounts.

Each transfer, inside a single unit of work:
1. Creates the transfer record
2. Creates the debit entry (source, -amount)
3. Creates the credit entry (destination, +amount)
4. Updates both balances, lowest account id first
5. Returns the records and both updated accounts

Either all of it is committed or none of it is. The service
does not check ownership, currency or available funds before
starting; callers do that. The balance update itself still
refuses to go below zero.
"""

import logging

from simple_bank.config import get_settings
from simple_bank.errors import InvalidArgumentError, TransferError
from simple_bank.schemas.account import AccountSnapshot
from simple_bank.schemas.transfer import (
    EntrySnapshot,
    TransferResult,
    TransferSnapshot,
    TransferTxParams,
)
from simple_bank.services.ordering import add_money, lock_order
from simple_bank.services.store import Queries, Store

logger = logging.getLogger(__name__)


class TransferService:

    def __init__(self, store: Store, timeout: float | None = None):
        self.store = store
        if timeout is None:
            timeout = get_settings().TRANSFER_TIMEOUT
        self.timeout = timeout

    def transfer(
        self,
        from_account_id: int,
        to_account_id: int,
        amount: int,
        timeout: float | None = None,
    ) -> TransferResult:
        """Transfer amount from one account to another."""
        return self.transfer_tx(
            TransferTxParams(
                from_account_id=from_account_id,
                to_account_id=to_account_id,
                amount=amount,
            ),
            timeout=timeout,
        )

    def transfer_tx(
        self, params: TransferTxParams, timeout: float | None = None
    ) -> TransferResult:
        """
        Run one transfer as a single unit of work.

        Raises InvalidArgumentError without touching the store
        if the request is malformed. Any other failure rolls the
        whole transfer back and is raised as a TransferError.
        Nothing is retried; a resubmitted request is a new transfer.
        """
        self._validate(params)
        if timeout is None:
            timeout = self.timeout

        logger.debug(
            "Transfer %s -> %s amount=%s",
            params.from_account_id, params.to_account_id, params.amount,
        )
        try:
            result = self.store.run_in_transaction(
                lambda queries: self._execute(queries, params),
                timeout=timeout,
            )
        except TransferError as exc:
            logger.warning(
                "Transfer %s -> %s amount=%s failed: %s",
                params.from_account_id, params.to_account_id,
                params.amount, exc,
            )
            raise

        logger.info(
            "Transfer %s committed: %s -> %s amount=%s",
            result.transfer.id, params.from_account_id,
            params.to_account_id, params.amount,
        )
        return result

    @staticmethod
    def _validate(params: TransferTxParams) -> None:
        if params.amount <= 0:
            raise InvalidArgumentError(
                f"Transfer amount must be positive, got {params.amount}"
            )
        if params.from_account_id <= 0 or params.to_account_id <= 0:
            raise InvalidArgumentError("Account ids must be positive")
        if params.from_account_id == params.to_account_id:
            raise InvalidArgumentError("Cannot transfer to the same account")

    @staticmethod
    def _execute(queries: Queries, params: TransferTxParams) -> TransferResult:
        transfer = queries.create_transfer(
            from_account_id=params.from_account_id,
            to_account_id=params.to_account_id,
            amount=params.amount,
        )
        from_entry = queries.create_entry(
            account_id=params.from_account_id,
            transfer_id=transfer.id,
            amount=-params.amount,
        )
        to_entry = queries.create_entry(
            account_id=params.to_account_id,
            transfer_id=transfer.id,
            amount=params.amount,
        )

        # Lock order comes from the ids, never from source/destination
        deltas = {
            params.from_account_id: -params.amount,
            params.to_account_id: params.amount,
        }
        first_id, second_id = lock_order(
            params.from_account_id, params.to_account_id
        )
        first, second = add_money(
            queries, first_id, deltas[first_id], second_id, deltas[second_id]
        )
        accounts = {first.id: first, second.id: second}

        # Snapshot before commit expires the ORM objects
        return TransferResult(
            transfer=TransferSnapshot.model_validate(transfer),
            from_account=AccountSnapshot.model_validate(
                accounts[params.from_account_id]
            ),
            to_account=AccountSnapshot.model_validate(
                accounts[params.to_account_id]
            ),
            from_entry=EntrySnapshot.model_validate(from_entry),
            to_entry=EntrySnapshot.model_validate(to_entry),
        )

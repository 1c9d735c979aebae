"""
Lock ordering for balance updates.

Two transfers between the same accounts in opposite directions
would deadlock if each locked "its" source row first. Balances
are therefore always updated lowest account id first, whatever
role each account plays in the transfer.
"""

from simple_bank.models.account import Account
from simple_bank.services.store import Queries


def lock_order(account_id1: int, account_id2: int) -> tuple[int, int]:
    """Return the two account ids in the order their rows must be locked."""
    if account_id1 < account_id2:
        return account_id1, account_id2
    return account_id2, account_id1


def add_money(
    queries: Queries,
    account_id1: int,
    amount1: int,
    account_id2: int,
    amount2: int,
) -> tuple[Account, Account]:
    """
    Apply two balance deltas in exactly the order given.

    Callers pass the accounts in lock_order(); this function
    does not reorder them.
    """
    account1 = queries.apply_delta(account_id1, amount1)
    account2 = queries.apply_delta(account_id2, amount2)
    return account1, account2

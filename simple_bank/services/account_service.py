"""
Account service: creates and looks up accounts.

Callers use get_account() to check an account before asking
for a transfer. Balances are never changed here; only the
transfer engine updates them.
"""

from sqlalchemy.orm import Session

from simple_bank.errors import AccountNotFoundError
from simple_bank.models.account import Account
from simple_bank.schemas.account import AccountCreate


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate) -> Account:
        """Create an account. The caller controls the commit."""
        account = Account(
            owner=request.owner,
            currency=request.currency,
            balance=request.balance,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def get_account(self, account_id: int) -> Account:
        """Get an account by ID."""
        account = self.db.get(Account, account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return account

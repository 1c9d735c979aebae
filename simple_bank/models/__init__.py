"""
Database models package.

All models must be imported here so that Base.metadata
knows every table before create_all() runs.
"""

from simple_bank.models.base import Base
from simple_bank.models.account import Account
from simple_bank.models.transfer import Transfer
from simple_bank.models.entry import Entry

__all__ = [
    "Base",
    "Account",
    "Transfer",
    "Entry",
]

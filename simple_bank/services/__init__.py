"""Business logic services."""

from simple_bank.services.store import Queries, Store
from simple_bank.services.account_service import AccountService
from simple_bank.services.transfer_service import TransferService

__all__ = ["Queries", "Store", "AccountService", "TransferService"]

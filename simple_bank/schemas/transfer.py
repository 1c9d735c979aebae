"""
Pydantic schemas for transfers.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from simple_bank.schemas.account import AccountSnapshot


class TransferTxParams(BaseModel):
    """Everything needed to move money from one account to another."""
    from_account_id: int
    to_account_id: int
    amount: int


class TransferRequest(BaseModel):
    from_account_id: int = Field(ge=1)
    to_account_id: int = Field(ge=1)
    amount: int = Field(gt=0)


class TransferSnapshot(BaseModel):
    id: int
    from_account_id: int
    to_account_id: int
    amount: int
    created_at: datetime

    model_config = {"from_attributes": True, "frozen": True}


class EntrySnapshot(BaseModel):
    id: int
    account_id: int
    transfer_id: int
    amount: int
    created_at: datetime

    model_config = {"from_attributes": True, "frozen": True}


class TransferResult(BaseModel):
    """
    Outcome of a committed transfer.

    Balances in from_account and to_account are the values
    right after this transfer's own updates.
    """
    transfer: TransferSnapshot
    from_account: AccountSnapshot
    to_account: AccountSnapshot
    from_entry: EntrySnapshot
    to_entry: EntrySnapshot

    model_config = {"frozen": True}

"""
Pydantic schemas for accounts.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    owner: str = Field(min_length=1, max_length=100)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    balance: int = Field(default=0, ge=0)


class AccountSnapshot(BaseModel):
    """An account as it was at one point in time."""
    id: int
    owner: str
    currency: str
    balance: int
    created_at: datetime

    model_config = {"from_attributes": True, "frozen": True}

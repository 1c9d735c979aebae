"""
Account model.

An account holds a balance in the smallest currency unit.
Accounts are created and looked up by the account layer;
the transfer engine only adds to or subtracts from the
balance, and only inside a unit of work.
"""

from datetime import datetime

from sqlalchemy import BigInteger, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from simple_bank.models.base import Base, utcnow


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    balance: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    entries: Mapped[list["Entry"]] = relationship(back_populates="account")

    def __repr__(self) -> str:
        return f"<Account {self.id} {self.owner} {self.balance} {self.currency}>"

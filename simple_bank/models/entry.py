"""
Ledger entry model.

Each entry is one leg of a transfer: a negative amount on the
source account, a positive amount on the destination. Entries
are immutable. Once posted, they are never modified or deleted.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from simple_bank.models.base import Base, utcnow


class Entry(Base):
    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    transfer_id: Mapped[int] = mapped_column(
        ForeignKey("transfers.id"), nullable=False, index=True
    )
    # Signed: negative for a debit leg, positive for a credit leg
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    account: Mapped["Account"] = relationship(back_populates="entries")
    transfer: Mapped["Transfer"] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return f"<Entry {self.id} account={self.account_id} {self.amount}>"

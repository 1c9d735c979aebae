"""
Transfer model.

An immutable record of one completed movement of funds
between two accounts. Every transfer owns exactly two
entries, one per account.
"""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from simple_bank.models.base import Base, utcnow


class Transfer(Base):
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    from_account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    to_account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    entries: Mapped[list["Entry"]] = relationship(back_populates="transfer")

    def __repr__(self) -> str:
        return (
            f"<Transfer {self.id} {self.from_account_id}"
            f"->{self.to_account_id} {self.amount}>"
        )

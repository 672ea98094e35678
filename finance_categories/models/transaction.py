"""
Transaction model for financial transactions
"""
from typing import Optional, TYPE_CHECKING
from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import String, ForeignKey, Index, Numeric, Date, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_categories.db.base import Base, TimestampMixin, generate_id

if TYPE_CHECKING:
    from finance_categories.models.account import Account
    from finance_categories.models.category import Category
    from finance_categories.models.user import User


class TransactionType(str, Enum):
    """Transaction flow"""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class Transaction(Base, TimestampMixin):
    """
    Transaction model

    The category reference is optional and is cleared when the
    category is deleted.
    """
    __tablename__ = "transactions"

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    # Transaction details
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="Transaction amount (always positive)"
    )

    type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType),
        nullable=False,
        comment="Income, Expense or Transfer"
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        comment="Optional transaction description"
    )

    # Date
    transaction_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Date of transaction"
    )

    # Foreign keys
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    account_id: Mapped[str | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        index=True
    )

    # Transfers only
    source_account_id: Mapped[str | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL")
    )
    destination_account_id: Mapped[str | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL")
    )

    category_id: Mapped[str | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        index=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="transactions")
    account: Mapped[Optional["Account"]] = relationship(
        "Account",
        back_populates="transactions",
        foreign_keys=[account_id]
    )
    category: Mapped[Optional["Category"]] = relationship("Category", back_populates="transactions")

    # Indexes for common queries
    __table_args__ = (
        Index("idx_transaction_user_date", "user_id", "transaction_date"),
        Index("idx_transaction_user_category", "user_id", "category_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, type={self.type}, "
            f"amount={self.amount}, date={self.transaction_date})>"
        )
